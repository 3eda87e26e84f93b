"""Entry, Group and Config: the ownership tree of a configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .errors import InvalidName, NotFound, TypeMismatch
from .model import TypeTag, Value, as_kind, _Scalar

log = logging.getLogger(__name__)

_LINE_BREAKS = ("\n", "\r")


def _check_group_name(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidName(f"group name must be a non-empty str, got {name!r}")
    if any(c in name for c in _LINE_BREAKS):
        raise InvalidName(f"group name contains a line break: {name!r}")
    return name


def _check_entry_name(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidName(f"entry name must be a non-empty str, got {name!r}")
    if ":" in name or any(c in name for c in _LINE_BREAKS):
        raise InvalidName(f"entry name contains ':' or a line break: {name!r}")
    if name != name.strip():
        raise InvalidName(f"entry name has surrounding whitespace: {name!r}")
    if name.startswith("["):
        raise InvalidName(f"entry name starts with '[': {name!r}")
    return name


def _check_value(value) -> Value:
    if not isinstance(value, _Scalar):
        raise TypeError(f"expected a typed value (VInt32, VText, ...), got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------

@dataclass
class Entry:
    """A named wrapper around exactly one typed Value."""

    name: str
    value: Value

    @property
    def kind(self) -> TypeTag:
        return self.value.discriminant()

    def get(self, kind):
        """Return the payload, checking that *kind* is the active type.

        *kind* may be a TypeTag, a tag string such as ``"u32"`` or a
        variant class such as ``VUInt32``.
        """
        expected = as_kind(kind)
        if expected is not self.kind:
            raise TypeMismatch(expected, self.kind)
        return self.value.value

    def set(self, value: Value) -> None:
        """Replace payload and type in one step."""
        self.value = _check_value(value)


# ---------------------------------------------------------------------------
# Group
# ---------------------------------------------------------------------------

@dataclass
class Group:
    """A named collection of entries keyed by entry name."""

    name: str
    entries: dict[str, Entry] = field(default_factory=dict)

    def add_entry(
        self, name: str, value: Value, *, logger: logging.Logger | None = None
    ) -> Entry:
        """Create and register an Entry; an existing one is overwritten."""
        _check_entry_name(name)
        value = _check_value(value)
        if name in self.entries:
            (logger or log).warning(
                "Overwriting entry [%s] %s (%s -> %s)",
                self.name, name, self.entries[name].kind.tag, value.discriminant().tag,
            )
        entry = Entry(name, value)
        self.entries[name] = entry
        return entry

    def get_entry(self, name: str) -> Entry:
        try:
            return self.entries[name]
        except KeyError:
            raise NotFound("entry", name) from None

    def __getitem__(self, name: str) -> Entry:
        return self.get_entry(name)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

@dataclass
class Config:
    """Root of the tree and the unit of save/load."""

    groups: dict[str, Group] = field(default_factory=dict)

    def add_group(self, name: str, *, logger: logging.Logger | None = None) -> Group:
        """Create and register an empty Group; an existing one is replaced."""
        _check_group_name(name)
        if name in self.groups:
            (logger or log).warning(
                "Replacing group [%s] (%d entries dropped)", name, len(self.groups[name])
            )
        group = Group(name)
        self.groups[name] = group
        return group

    def get_group(self, name: str) -> Group:
        try:
            return self.groups[name]
        except KeyError:
            raise NotFound("group", name) from None

    def get_entry(self, group: str, entry: str) -> Entry:
        return self.get_group(group).get_entry(entry)

    def __getitem__(self, name: str) -> Group:
        return self.get_group(name)

    def __contains__(self, name: object) -> bool:
        return name in self.groups

    def __iter__(self):
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    # -- Persistence ----------------------------------------------------

    def save(self, path: str | Path, logger: logging.Logger | None = None) -> None:
        """Write this config to *path* in the text format."""
        from .codec import save
        save(self, path, logger=logger)

    @classmethod
    def load(cls, path: str | Path, logger: logging.Logger | None = None) -> Config:
        """Read *path* into a fresh Config; nothing is returned on failure."""
        from .codec import load_file
        return load_file(path, logger=logger)
