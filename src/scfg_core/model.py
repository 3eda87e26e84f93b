"""Data model for SCFG Core: the closed set of typed values."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from .errors import OutOfRange, UnknownTypeTag


# ---------------------------------------------------------------------------
# TypeTag (the discriminant)
# ---------------------------------------------------------------------------

class TypeTag(Enum):
    """One member per primitive type; the value is the 3-character tag."""

    INT32 = "i32"
    INT64 = "i64"
    UINT32 = "u32"
    UINT64 = "u64"
    FLOAT32 = "f32"
    FLOAT64 = "f64"
    TEXT = "str"

    @property
    def tag(self) -> str:
        return self.value

    @classmethod
    def from_tag(cls, tag: str) -> TypeTag:
        try:
            return cls(tag)
        except ValueError:
            raise UnknownTypeTag(tag) from None


_INT_RANGES: dict[TypeTag, tuple[int, int]] = {
    TypeTag.INT32: (-(2**31), 2**31 - 1),
    TypeTag.INT64: (-(2**63), 2**63 - 1),
    TypeTag.UINT32: (0, 2**32 - 1),
    TypeTag.UINT64: (0, 2**64 - 1),
}


def _check_int(payload: object, kind: TypeTag) -> int:
    if isinstance(payload, bool) or not isinstance(payload, int):
        raise TypeError(f"{kind.tag} payload must be int, got {type(payload).__name__}")
    lo, hi = _INT_RANGES[kind]
    if not lo <= payload <= hi:
        raise OutOfRange(f"{payload} does not fit in {kind.tag} [{lo}, {hi}]")
    return payload


def _check_float(payload: object, kind: TypeTag) -> float:
    if isinstance(payload, bool) or not isinstance(payload, (int, float)):
        raise TypeError(f"{kind.tag} payload must be float, got {type(payload).__name__}")
    try:
        return float(payload)
    except OverflowError:
        raise OutOfRange(f"{payload} does not fit in {kind.tag}") from None


def to_float32(x: float) -> float:
    """Round *x* to the nearest IEEE-754 single-precision value."""
    if math.isnan(x) or math.isinf(x):
        return x
    try:
        return struct.unpack("<f", struct.pack("<f", x))[0]
    except OverflowError:
        raise OutOfRange(f"{x!r} does not fit in f32") from None


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

class _Scalar:
    __slots__ = ()

    kind: ClassVar[TypeTag]

    def discriminant(self) -> TypeTag:
        return self.kind


@dataclass(frozen=True, slots=True)
class VInt32(_Scalar):
    value: int
    kind: ClassVar[TypeTag] = TypeTag.INT32

    def __post_init__(self) -> None:
        _check_int(self.value, self.kind)


@dataclass(frozen=True, slots=True)
class VInt64(_Scalar):
    value: int
    kind: ClassVar[TypeTag] = TypeTag.INT64

    def __post_init__(self) -> None:
        _check_int(self.value, self.kind)


@dataclass(frozen=True, slots=True)
class VUInt32(_Scalar):
    value: int
    kind: ClassVar[TypeTag] = TypeTag.UINT32

    def __post_init__(self) -> None:
        _check_int(self.value, self.kind)


@dataclass(frozen=True, slots=True)
class VUInt64(_Scalar):
    value: int
    kind: ClassVar[TypeTag] = TypeTag.UINT64

    def __post_init__(self) -> None:
        _check_int(self.value, self.kind)


@dataclass(frozen=True, slots=True)
class VFloat32(_Scalar):
    """Single-precision float; the payload is stored already rounded."""

    value: float
    kind: ClassVar[TypeTag] = TypeTag.FLOAT32

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", to_float32(_check_float(self.value, self.kind)))


@dataclass(frozen=True, slots=True)
class VFloat64(_Scalar):
    value: float
    kind: ClassVar[TypeTag] = TypeTag.FLOAT64

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _check_float(self.value, self.kind))


@dataclass(frozen=True, slots=True)
class VText(_Scalar):
    value: str
    kind: ClassVar[TypeTag] = TypeTag.TEXT

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"str payload must be str, got {type(self.value).__name__}")

    def __str__(self) -> str:
        return self.value


Value = Union[VInt32, VInt64, VUInt32, VUInt64, VFloat32, VFloat64, VText]

VARIANTS: dict[TypeTag, type] = {
    TypeTag.INT32: VInt32,
    TypeTag.INT64: VInt64,
    TypeTag.UINT32: VUInt32,
    TypeTag.UINT64: VUInt64,
    TypeTag.FLOAT32: VFloat32,
    TypeTag.FLOAT64: VFloat64,
    TypeTag.TEXT: VText,
}


def make_value(kind: TypeTag | str, payload) -> Value:
    """Build the variant for *kind* (a TypeTag or its tag string)."""
    if not isinstance(kind, TypeTag):
        kind = TypeTag.from_tag(kind)
    return VARIANTS[kind](payload)


def as_kind(kind) -> TypeTag:
    """Normalise a TypeTag, tag string or variant class to a TypeTag."""
    if isinstance(kind, TypeTag):
        return kind
    if isinstance(kind, str):
        return TypeTag.from_tag(kind)
    if isinstance(kind, type) and issubclass(kind, _Scalar):
        return kind.kind
    raise TypeError(f"not a value type: {kind!r}")
