"""Classification of runtime values into kinds."""

from __future__ import annotations

import asyncio
import ctypes
import dataclasses
import functools
import inspect
import numbers
import queue
import types
import weakref
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .models import Byte, Kind

# Marker for a struct field missing from an instance.
MISSING = object()

_CHAN_TYPES = (queue.Queue, queue.SimpleQueue, asyncio.Queue)

_RAW_POINTER_TYPES = (ctypes.c_void_p, ctypes._Pointer)


def is_namedtuple(value: Any) -> bool:
    """Check if a value is an instance of a namedtuple class."""
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def is_func(value: Any) -> bool:
    """Check if a value is a function, method or partial."""
    return inspect.isroutine(value) or isinstance(value, functools.partial)


def _has_own_eq(typ: type) -> bool:
    return typ.__eq__ is not object.__eq__


def _is_struct(value: Any) -> bool:
    if isinstance(value, (type, types.ModuleType, Enum, numbers.Number)):
        return False
    if _has_own_eq(type(value)):
        return False
    return hasattr(value, "__dict__") or bool(_slot_names(type(value)))


def kind_of(value: Any) -> Kind:
    """
    Classify a value.

    Args:
        value: Any runtime value

    Returns:
        The Kind used to dump and compare the value
    """
    if value is None:
        return Kind.NIL
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, Byte):
        return Kind.BYTE
    if isinstance(value, int) and not isinstance(value, Enum):
        return Kind.INT
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, complex):
        return Kind.COMPLEX
    if isinstance(value, str) and not isinstance(value, Enum):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray)):
        return Kind.BYTES
    if isinstance(value, BaseException):
        return Kind.ERROR
    if isinstance(value, weakref.ref):
        return Kind.POINTER
    if isinstance(value, _RAW_POINTER_TYPES):
        return Kind.RAW_POINTER
    if isinstance(value, _CHAN_TYPES):
        return Kind.CHAN
    if is_func(value):
        return Kind.FUNC
    if isinstance(value, Mapping):
        return Kind.MAP
    if is_namedtuple(value):
        return Kind.STRUCT
    if isinstance(value, list):
        return Kind.SLICE
    if isinstance(value, tuple):
        return Kind.ARRAY
    if isinstance(value, (set, frozenset)):
        return Kind.SET
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Kind.STRUCT
    if _is_struct(value):
        return Kind.STRUCT
    return Kind.OTHER


def base_value(value: Any, kind: Kind) -> Any:
    """Reduce a value of a primitive kind to its builtin type."""
    if kind == Kind.BOOL:
        return bool(value)
    if kind in (Kind.INT, Kind.BYTE):
        return int(value)
    if kind == Kind.FLOAT:
        return float(value)
    if kind == Kind.COMPLEX:
        return complex(value)
    if kind == Kind.STRING:
        return str.__str__(value)
    return value


@functools.lru_cache(maxsize=None)
def _slot_names(typ: type) -> tuple:
    names = []
    for cls in reversed(typ.__mro__):
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__") or name in names:
                continue
            names.append(name)
    return tuple(names)


def struct_fields(value: Any) -> list[str]:
    """
    List the field names of a struct-like value in declaration order.

    Dataclass fields come first in their declared order, namedtuple fields
    in tuple order, then slots from base to derived class, then instance
    attributes in insertion order.
    """
    if is_namedtuple(value):
        return list(type(value)._fields)

    names: list[str] = []
    if dataclasses.is_dataclass(value):
        names.extend(f.name for f in dataclasses.fields(value))

    for name in _slot_names(type(value)):
        if name not in names:
            names.append(name)

    attrs = getattr(value, "__dict__", None)
    if isinstance(attrs, dict):
        for name in attrs:
            if name not in names:
                names.append(name)

    return names


def field_value(value: Any, name: str) -> Any:
    """Get a field value, MISSING when the instance lacks the field."""
    return getattr(value, name, MISSING)


def is_exported(name: str) -> bool:
    """Check if a field name is part of the public surface."""
    return not name.startswith("_")


def same_func(want: Any, have: Any) -> bool:
    """Compare two callables by identity, bound methods by receiver and function."""
    if want is have:
        return True
    if isinstance(want, types.MethodType) and isinstance(have, types.MethodType):
        return want.__func__ is have.__func__ and want.__self__ is have.__self__
    return False


def raw_address(value: Any) -> int:
    """Address held by a ctypes pointer, 0 for a null pointer."""
    if isinstance(value, ctypes.c_void_p):
        return value.value or 0
    return ctypes.cast(value, ctypes.c_void_p).value or 0
