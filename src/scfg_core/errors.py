"""Exception hierarchy for SCFG Core."""

from __future__ import annotations


class SCFGError(Exception):
    """Base class for every error raised by scfg_core."""


class ConfigIOError(SCFGError, OSError):
    """A config file could not be opened, read or written."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class MalformedLine(SCFGError, ValueError):
    """A line of the text format could not be parsed."""

    def __init__(self, reason: str, line: str, lineno: int | None = None) -> None:
        where = f"line {lineno}" if lineno is not None else "input"
        super().__init__(f"{where}: {reason}: {line!r}")
        self.reason = reason
        self.line = line
        self.lineno = lineno


class UnknownTypeTag(SCFGError, ValueError):
    """A type tag outside i32/i64/u32/u64/f32/f64/str."""

    def __init__(self, tag: str, line: str | None = None, lineno: int | None = None) -> None:
        message = f"unknown type tag {tag!r}"
        if lineno is not None:
            message = f"line {lineno}: {message}: {line!r}"
        super().__init__(message)
        self.tag = tag
        self.line = line
        self.lineno = lineno


class NotFound(SCFGError, KeyError):
    """Lookup of a group or entry name that does not exist."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(name)
        self.kind = kind
        self.name = name

    def __str__(self) -> str:
        return f"no such {self.kind}: {self.name!r}"


class TypeMismatch(SCFGError, TypeError):
    """Typed access against a value holding another type."""

    def __init__(self, expected, actual) -> None:
        super().__init__(f"expected {expected.tag}, value holds {actual.tag}")
        self.expected = expected
        self.actual = actual


class OutOfRange(SCFGError, ValueError):
    """A payload that the target type cannot represent."""


class InvalidName(SCFGError, ValueError):
    """A group or entry name the text format cannot carry."""


class EncodeError(SCFGError, ValueError):
    """A value that cannot be written without corrupting the format."""
