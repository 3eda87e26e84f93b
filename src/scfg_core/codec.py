"""Codec: encodes a Config to the ``name: value -> tag`` text format and back.

File layout::

    [group]
    name: value -> tag

    [other]
    ...

Decoding is a single pass over the lines with one piece of state, the
group the following entry lines belong to. The value of an entry line ends
at the *last* ``->`` on the line, so negative numbers and values containing
hyphens or arrows decode unchanged. Line breaks inside values cannot be
represented and are rejected when encoding.
"""

from __future__ import annotations

import io
import logging
import math
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import IO, Iterable

from .config import Config, Group
from .errors import (
    ConfigIOError,
    EncodeError,
    InvalidName,
    MalformedLine,
    OutOfRange,
    UnknownTypeTag,
)
from .model import TypeTag, Value, VARIANTS, to_float32

log = logging.getLogger(__name__)

ARROW = "->"
TAG_WIDTH = 3

_INT_RE = re.compile(r"^[+-]?[0-9]+$")
_UINT_RE = re.compile(r"^\+?[0-9]+$")
_FLOAT_RE = re.compile(
    r"^[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)$",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Single values
# ---------------------------------------------------------------------------

def _format_float(x: float) -> str:
    if math.isnan(x):
        return "nan"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    return repr(x)


def _format_float32(x: float) -> str:
    """Shortest decimal text that reads back as the same single."""
    if math.isnan(x) or math.isinf(x):
        return _format_float(x)
    for precision in range(1, 10):
        text = f"{x:.{precision}g}"
        try:
            if to_float32(float(text)) == x:
                return text
        except OutOfRange:
            continue
    return repr(x)


def _check_encodable(text: str, what: str) -> str:
    # Lone surrogates survive in str but have no UTF-8 form.
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise EncodeError(f"{what} is not encodable as UTF-8: {text!r}") from exc
    return text


def format_value(value: Value) -> str:
    """Return the text form of *value* as it appears in an entry line."""
    kind = value.discriminant()
    if kind is TypeTag.TEXT:
        if "\n" in value.value or "\r" in value.value:
            raise EncodeError(f"str value contains a line break: {value.value!r}")
        return _check_encodable(value.value, "str value")
    if kind is TypeTag.FLOAT32:
        return _format_float32(value.value)
    if kind is TypeTag.FLOAT64:
        return _format_float(value.value)
    return str(value.value)


def parse_value(kind: TypeTag, text: str) -> Value:
    """Convert the text form of a value back to a Value of *kind*.

    Raises ValueError (OutOfRange included) for text that is not a valid
    literal of *kind*.
    """
    if kind is TypeTag.TEXT:
        return VARIANTS[kind](text)

    text = text.strip()
    if kind in (TypeTag.FLOAT32, TypeTag.FLOAT64):
        if not _FLOAT_RE.match(text):
            raise ValueError(f"not a number: {text!r}")
        return VARIANTS[kind](float(text))

    pattern = _UINT_RE if kind in (TypeTag.UINT32, TypeTag.UINT64) else _INT_RE
    if not pattern.match(text):
        raise ValueError(f"not an integer: {text!r}")
    return VARIANTS[kind](int(text))


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------

def format_entry(name: str, value: Value) -> str:
    _check_encodable(name, "entry name")
    return f"{name}: {format_value(value)} {ARROW} {value.discriminant().tag}"


def _trim_separator(segment: str) -> str:
    """Drop the single blank the encoder puts on each side of a value."""
    if segment[:1].isspace():
        segment = segment[1:]
    if segment[-1:].isspace():
        segment = segment[:-1]
    return segment


def _split_typed(rest: str, line: str, lineno: int | None) -> tuple[str, TypeTag]:
    """Split ``<value> -> <tag>`` into the value text and its TypeTag."""
    arrow = rest.rfind(ARROW)
    if arrow < 0:
        raise MalformedLine(f"missing '{ARROW}'", line, lineno)

    tag = rest[arrow + len(ARROW):].strip()
    if len(tag) < TAG_WIDTH:
        raise MalformedLine("missing or short type tag", line, lineno)
    if len(tag) > TAG_WIDTH:
        raise MalformedLine("unexpected text after type tag", line, lineno)
    try:
        kind = TypeTag(tag)
    except ValueError:
        raise UnknownTypeTag(tag, line, lineno) from None

    return _trim_separator(rest[:arrow]), kind


def _parse_typed(rest: str, line: str, lineno: int | None) -> Value:
    value_text, kind = _split_typed(rest, line, lineno)
    try:
        return parse_value(kind, value_text)
    except ValueError as exc:
        raise MalformedLine(f"bad {kind.tag} value ({exc})", line, lineno) from exc


def parse_typed_value(text: str) -> Value:
    """Parse a ``<value> -> <tag>`` fragment on its own."""
    return _parse_typed(text, text, None)


def parse_header(line: str, lineno: int | None = None) -> str:
    """Return the group name of a ``[name]`` header line."""
    text = line.rstrip()
    if not text.endswith("]") or len(text) < 2:
        raise MalformedLine("unterminated group header", line, lineno)
    name = text[1:-1]
    if not name:
        raise MalformedLine("empty group name", line, lineno)
    return name


def parse_entry_line(line: str, lineno: int | None = None) -> tuple[str, Value]:
    """Split an entry line into its name and typed value."""
    name, sep, rest = line.partition(":")
    if not sep:
        raise MalformedLine("missing ':'", line, lineno)
    name = name.strip()
    if not name:
        raise MalformedLine("empty entry name", line, lineno)
    return name, _parse_typed(rest, line, lineno)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def dump(config: Config, fp: IO[str], logger: logging.Logger | None = None) -> None:
    """Write *config* to the text stream *fp*."""
    logger = logger or log
    for group_name, group in config.groups.items():
        logger.debug("Saving group: [%s]", group_name)
        fp.write(f"[{_check_encodable(group_name, 'group name')}]\n")
        for entry_name, entry in group.entries.items():
            logger.debug("Saving entry: [%s] %s -> %s", group_name, entry_name, entry.kind.tag)
            fp.write(format_entry(entry_name, entry.value))
            fp.write("\n")
        fp.write("\n")


def dumps(config: Config, logger: logging.Logger | None = None) -> str:
    buf = io.StringIO()
    dump(config, buf, logger=logger)
    return buf.getvalue()


def _discard(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


def save(config: Config, path: str | Path, logger: logging.Logger | None = None) -> None:
    """Write *config* to *path*, replacing the file only once it is complete."""
    path = Path(path)
    try:
        tmp = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="\n",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
    except OSError as exc:
        raise ConfigIOError(str(path), exc.strerror or str(exc)) from exc

    try:
        with tmp as fp:
            dump(config, fp, logger=logger)
        if path.exists():
            os.chmod(tmp.name, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp.name, path)
    except OSError as exc:
        _discard(tmp.name)
        raise ConfigIOError(str(path), exc.strerror or str(exc)) from exc
    except BaseException:
        _discard(tmp.name)
        raise


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def load(lines: Iterable[str], logger: logging.Logger | None = None) -> Config:
    """Parse an iterable of lines (e.g. an open file) into a new Config.

    The Config is built privately and only returned when every line parsed;
    any error propagates and the partial result is dropped.
    """
    logger = logger or log
    config = Config()
    group: Group | None = None

    for lineno, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue

        if line.startswith("["):
            name = parse_header(line, lineno)
            logger.debug("Found group: [%s]", name)
            if name in config:
                group = config.get_group(name)
                continue
            try:
                group = config.add_group(name, logger=logger)
            except InvalidName as exc:
                raise MalformedLine(str(exc), line, lineno) from exc
            continue

        if group is None:
            logger.debug("Ignoring line %d outside of any group: %r", lineno, line)
            continue

        name, value = parse_entry_line(line, lineno)
        logger.debug(
            "Found entry: [%s] %s: %s -> %s",
            group.name, name, value.value, value.discriminant().tag,
        )
        try:
            group.add_entry(name, value, logger=logger)
        except InvalidName as exc:
            raise MalformedLine(str(exc), line, lineno) from exc

    return config


def loads(text: str, logger: logging.Logger | None = None) -> Config:
    return load(io.StringIO(text), logger=logger)


def load_file(path: str | Path, logger: logging.Logger | None = None) -> Config:
    """Read and parse the config file at *path*."""
    try:
        with open(path, encoding="utf-8-sig") as fp:
            return load(fp, logger=logger)
    except UnicodeDecodeError as exc:
        raise ConfigIOError(str(path), f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise ConfigIOError(str(path), exc.strerror or str(exc)) from exc
