"""Data models for deepcheck."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Kind(Enum):
    """Category of a runtime value, drives dumping and comparison."""
    NIL = "nil"
    BOOL = "bool"
    BYTE = "byte"
    INT = "int"
    FLOAT = "float"
    COMPLEX = "complex"
    STRING = "string"
    BYTES = "bytes"
    ERROR = "error"
    POINTER = "pointer"
    RAW_POINTER = "raw_pointer"
    CHAN = "chan"
    FUNC = "func"
    MAP = "map"
    STRUCT = "struct"
    SLICE = "slice"
    ARRAY = "array"
    SET = "set"
    OTHER = "other"


# Kinds compared by their primitive value.
PRIMITIVE_KINDS = frozenset({
    Kind.BOOL,
    Kind.BYTE,
    Kind.INT,
    Kind.FLOAT,
    Kind.COMPLEX,
    Kind.STRING,
})

# Kinds which may take part in reference cycles.
CONTAINER_KINDS = frozenset({
    Kind.MAP,
    Kind.STRUCT,
    Kind.SLICE,
    Kind.ARRAY,
    Kind.SET,
    Kind.BYTES,
})


class Byte(int):
    """A single element of a bytes or bytearray value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Byte(0x{int(self):02x})"


@dataclass
class Row:
    """A named, formatted line of a notice."""
    name: str
    format: str
    args: tuple = ()

    def value(self) -> str:
        """Render the row value."""
        if not self.args:
            return self.format
        return self.format % self.args

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value()}


@dataclass(frozen=True)
class Edit:
    """Replace a[start:end] with b[repl_start:repl_end]."""
    start: int
    end: int
    repl_start: int
    repl_end: int

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "repl_start": self.repl_start,
            "repl_end": self.repl_end,
        }


@dataclass
class Diag:
    """A diagonal of matching elements: a[x:x+length] == b[y:y+length]."""
    x: int
    y: int
    length: int
