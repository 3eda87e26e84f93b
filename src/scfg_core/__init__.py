"""SCFG Core: typed key-value configuration store with a plain-text format."""

from .config import Config, Entry, Group
from .codec import dump, dumps, load, load_file, loads, save
from .model import (
    TypeTag,
    Value,
    VFloat32,
    VFloat64,
    VInt32,
    VInt64,
    VText,
    VUInt32,
    VUInt64,
    make_value,
)
from .errors import (
    ConfigIOError,
    EncodeError,
    InvalidName,
    MalformedLine,
    NotFound,
    OutOfRange,
    SCFGError,
    TypeMismatch,
    UnknownTypeTag,
)
from .repl import ConfigRepl

__all__ = [
    "Config",
    "Group",
    "Entry",
    "TypeTag",
    "Value",
    "VInt32",
    "VInt64",
    "VUInt32",
    "VUInt64",
    "VFloat32",
    "VFloat64",
    "VText",
    "make_value",
    "dump",
    "dumps",
    "load",
    "loads",
    "load_file",
    "save",
    "SCFGError",
    "ConfigIOError",
    "MalformedLine",
    "UnknownTypeTag",
    "NotFound",
    "TypeMismatch",
    "OutOfRange",
    "InvalidName",
    "EncodeError",
    "ConfigRepl",
]
