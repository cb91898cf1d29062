"""Built-in renderers used by Dump."""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from . import kinds
from .models import Byte, Kind
from .printer import Printer
from .utils import (
    address,
    format_bool,
    format_float,
    is_printable_char,
    quote,
    type_name,
)

if TYPE_CHECKING:
    from .dump import Dump

# Renders a value at a nesting level.
Dumper = Callable[["Dump", int, Any], str]

VAL_NIL = "nil"
VAL_FUNC = "<func>"
VAL_MAX_NESTING = "<...>"
VAL_INVALID = "<invalid>"
VAL_ERR_USAGE = "<dump-usage-error>"

TIME_AS_RFC3339 = ""
TIME_AS_UNIX = "<unix>"
TIME_AS_LITERAL = "<go-str>"

DURATION_AS_STRING = ""
DURATION_AS_SECONDS = "<seconds>"


def _usage_error(dmp: "Dump", lvl: int) -> str:
    return str(Printer(dmp).tab(dmp.indent + lvl).write(VAL_ERR_USAGE))


def _string(dmp: "Dump", text: str) -> str:
    if dmp.quote_strings or dmp.flat:
        return quote(text)
    if dmp.flat_strings > 0 and len(text) <= dmp.flat_strings:
        return quote(text)
    if "\n" in text:
        return text
    return quote(text)


def simple_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render booleans, integers, floats and strings."""
    kind = kinds.kind_of(val)
    if kind == Kind.BOOL:
        text = format_bool(val)
    elif kind in (Kind.INT, Kind.BYTE):
        text = str(int(val))
    elif kind == Kind.FLOAT:
        text = format_float(val)
    elif kind == Kind.STRING:
        text = _string(dmp, str.__str__(val))
    else:
        text = VAL_ERR_USAGE
    return str(Printer(dmp).tab(dmp.indent + lvl).write(text))


def hex_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render an integer as hex, 0x7b."""
    if not isinstance(val, int) or isinstance(val, bool):
        return _usage_error(dmp, lvl)
    return str(Printer(dmp).tab(dmp.indent + lvl).write(f"0x{int(val):x}"))


def byte_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render a byte as hex followed by its character when printable, 0x61 ('a')."""
    if not isinstance(val, int) or isinstance(val, bool):
        return _usage_error(dmp, lvl)
    code = int(val)
    text = f"0x{code:02x}"
    if is_printable_char(code):
        text += f" ('{chr(code)}')"
    return str(Printer(dmp).tab(dmp.indent + lvl).write(text))


def complex_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    if not isinstance(val, complex):
        return _usage_error(dmp, lvl)
    return str(Printer(dmp).tab(dmp.indent + lvl).write(str(val)))


def nil_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    return str(Printer(dmp).tab(dmp.indent + lvl).write(VAL_NIL))


def error_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render an exception as its quoted message."""
    if not isinstance(val, BaseException):
        return _usage_error(dmp, lvl)
    return str(Printer(dmp).tab(dmp.indent + lvl).write(quote(str(val))))


def other_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render values of unknown kind, enum members as Type.NAME."""
    if isinstance(val, Enum):
        text = f"{type(val).__name__}.{val.name}"
    else:
        text = repr(val)
    if dmp.compact:
        text = text.replace(" ", "")
    return str(Printer(dmp).tab(dmp.indent + lvl).write(text))


def raw_pointer_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render a raw pointer, the address is masked unless ptr_addr is set."""
    prn = Printer(dmp).tab(dmp.indent + lvl)
    if kinds.kind_of(val) != Kind.RAW_POINTER:
        return str(prn.write(VAL_ERR_USAGE))
    addr = kinds.raw_address(val)
    if dmp.ptr_addr:
        return str(prn.write(f"<0x{addr:x}>"))
    return str(prn.write(address(val, False)))


def chan_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render a queue as (TYPE)(<addr>)."""
    prn = Printer(dmp).tab(dmp.indent + lvl)
    if kinds.kind_of(val) != Kind.CHAN:
        return str(prn.write(VAL_ERR_USAGE))
    name = type_name(type(val))
    return str(prn.write(f"({name})({address(val, dmp.ptr_addr)})"))


def func_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render a callable as <func>(<addr>)."""
    prn = Printer(dmp).tab(dmp.indent + lvl)
    if kinds.kind_of(val) != Kind.FUNC:
        return str(prn.write(VAL_ERR_USAGE))
    target = getattr(val, "__func__", val)
    return str(prn.write(f"{VAL_FUNC}({address(target, dmp.ptr_addr)})"))


def pointer_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render the referent of a weak reference, nil when it is dead."""
    target = val()
    if target is None:
        return nil_dumper(dmp, lvl, None)
    return dmp.value(target, lvl)


def _type_prefix(dmp: "Dump", val: Any) -> str:
    if not dmp.print_type:
        return ""
    return type_name(type(val), dmp.use_any)


def _items(dmp: "Dump", lvl: int, prefix: str, values: list) -> str:
    prn = Printer(dmp).tab(dmp.indent + lvl)
    num = len(values)
    prn.write(prefix).write("{").nli(num)

    sub_dmp = dmp.derive(print_type=False)
    for idx, item in enumerate(values):
        last = idx == num - 1
        prn.write(sub_dmp.value(item, lvl + 1))
        prn.comma(last).sep(last).nl()

    if num > 0:
        prn.tab(dmp.indent + lvl)
    return str(prn.write("}"))


def sequence_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render lists and tuples."""
    if not isinstance(val, (list, tuple)):
        return _usage_error(dmp, lvl)
    return _items(dmp, lvl, _type_prefix(dmp, val), list(val))


def bytes_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render bytes and bytearray as a sequence of bytes."""
    if not isinstance(val, (bytes, bytearray)):
        return _usage_error(dmp, lvl)
    return _items(dmp, lvl, _type_prefix(dmp, val), [Byte(b) for b in val])


def sorted_by_dump(dmp: "Dump", values: Any) -> list:
    """Sort values by their flat rendering, stable for equal renderings."""
    flat = dmp.derive(flat=True, compact=False, indent=0, print_type=True)
    return sorted(values, key=flat.any)


def set_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render sets with elements sorted by their rendering."""
    if not isinstance(val, (set, frozenset)):
        return _usage_error(dmp, lvl)
    return _items(dmp, lvl, _type_prefix(dmp, val), sorted_by_dump(dmp, val))


def map_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render a mapping with keys sorted by their rendering."""
    prn = Printer(dmp).tab(dmp.indent + lvl)
    if kinds.kind_of(val) != Kind.MAP:
        return str(prn.write(VAL_ERR_USAGE))

    keys = sorted_by_dump(dmp, val.keys())
    num = len(keys)
    prn.write(_type_prefix(dmp, val)).write("{").nli(num)

    sub_dmp = dmp.derive(print_type=False)
    for idx, key in enumerate(keys):
        last = idx == num - 1
        prn.write(sub_dmp.value(key, lvl + 1))
        prn.write(":").space()
        prn.write(sub_dmp.value(val[key], lvl + 1).lstrip(" \t"))
        prn.comma(last).sep(last).nl()

    if num > 0:
        prn.tab(dmp.indent + lvl)
    return str(prn.write("}"))


def struct_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render exported fields (all fields with print_private) as Name: value."""
    prn = Printer(dmp).tab(dmp.indent + lvl)
    if kinds.kind_of(val) != Kind.STRUCT:
        return str(prn.write(VAL_ERR_USAGE))

    names = [
        name for name in kinds.struct_fields(val)
        if dmp.print_private or kinds.is_exported(name)
    ]
    num = len(names)
    prefix = type(val).__name__ if dmp.print_type else ""
    prn.write(prefix).write("{").nli(num)

    sub_dmp = dmp.derive(print_type=True, quote_strings=True)
    for idx, name in enumerate(names):
        last = idx == num - 1
        prn.tab(dmp.indent + lvl + 1)
        prn.write(name).write(":").space()
        fld = kinds.field_value(val, name)
        if fld is kinds.MISSING:
            sub = VAL_INVALID
        else:
            sub = sub_dmp.value(fld, lvl + 1).lstrip(" \t")
        prn.write(sub)
        prn.comma(last).sep(last).nl()

    if num > 0:
        prn.tab(dmp.indent + lvl)
    return str(prn.write("}"))


# Time values.

def _rfc3339(val: Any) -> str:
    if isinstance(val, datetime):
        text = val.strftime("%Y-%m-%dT%H:%M:%S")
    elif isinstance(val, time):
        text = val.strftime("%H:%M:%S")
    else:
        return val.isoformat()

    if val.microsecond:
        text += f".{val.microsecond:06d}".rstrip("0")

    offset = val.utcoffset()
    if offset is None:
        return text
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return text + f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _unix(val: Any) -> int:
    if isinstance(val, datetime):
        if val.tzinfo is None:
            return calendar.timegm(val.timetuple())
        return calendar.timegm(val.utctimetuple())
    if isinstance(val, date):
        return calendar.timegm(val.timetuple())
    raise TypeError(f"cannot convert {type(val).__name__} to a Unix timestamp")


def _is_time(val: Any) -> bool:
    return isinstance(val, (date, time))


def time_dumper_fmt(fmt: str) -> Dumper:
    """Build a dumper rendering time values with a strftime pattern."""
    def dumper(dmp: "Dump", lvl: int, val: Any) -> str:
        if not _is_time(val):
            return _usage_error(dmp, lvl)
        text = _rfc3339(val) if fmt == TIME_AS_RFC3339 else val.strftime(fmt)
        return simple_dumper(dmp, lvl, text)
    return dumper


def time_dumper_unix(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render a date or datetime as Unix seconds, naive values are taken as UTC."""
    if not isinstance(val, date):
        return _usage_error(dmp, lvl)
    return simple_dumper(dmp, lvl, _unix(val))


def time_dumper_literal(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render a time value as its Python literal."""
    if not _is_time(val):
        return _usage_error(dmp, lvl)
    text = repr(val)
    if dmp.compact:
        text = text.replace(" ", "")
    return str(Printer(dmp).tab(dmp.indent + lvl).write(text))


def get_time_dumper(fmt: str) -> Dumper:
    """
    Get the dumper for a time format.

    Args:
        fmt: "" (RFC3339 with fractional seconds), "<unix>", "<go-str>"
            or a strftime pattern

    Returns:
        Dumper function
    """
    if fmt == TIME_AS_UNIX:
        return time_dumper_unix
    if fmt == TIME_AS_LITERAL:
        return time_dumper_literal
    return time_dumper_fmt(fmt)


def duration_dumper_string(dmp: "Dump", lvl: int, val: Any) -> str:
    if not isinstance(val, timedelta):
        return _usage_error(dmp, lvl)
    return simple_dumper(dmp, lvl, str(val))


def duration_dumper_seconds(dmp: "Dump", lvl: int, val: Any) -> str:
    if not isinstance(val, timedelta):
        return _usage_error(dmp, lvl)
    return simple_dumper(dmp, lvl, val.total_seconds())


def get_duration_dumper(fmt: str) -> Dumper:
    """Get the dumper for a duration format: "" or "<seconds>"."""
    if fmt == DURATION_AS_SECONDS:
        return duration_dumper_seconds
    return duration_dumper_string


def zone_name(val: tzinfo) -> str:
    """Name of a time zone, the IANA key when it has one."""
    key = getattr(val, "key", None)
    if key:
        return key
    if isinstance(val, timezone):
        return val.tzname(None)
    return val.tzname(None) or str(val)


def zone_dumper(dmp: "Dump", lvl: int, val: Any) -> str:
    """Render a time zone as its name."""
    if not isinstance(val, tzinfo):
        return _usage_error(dmp, lvl)
    return simple_dumper(dmp, lvl, zone_name(val))


# Renderers for each kind, used when no type dumper matches.
KIND_DUMPERS: dict[Kind, Dumper] = {
    Kind.NIL: nil_dumper,
    Kind.BOOL: simple_dumper,
    Kind.BYTE: byte_dumper,
    Kind.INT: simple_dumper,
    Kind.FLOAT: simple_dumper,
    Kind.COMPLEX: complex_dumper,
    Kind.STRING: simple_dumper,
    Kind.BYTES: bytes_dumper,
    Kind.ERROR: error_dumper,
    Kind.POINTER: pointer_dumper,
    Kind.RAW_POINTER: raw_pointer_dumper,
    Kind.CHAN: chan_dumper,
    Kind.FUNC: func_dumper,
    Kind.MAP: map_dumper,
    Kind.STRUCT: struct_dumper,
    Kind.SLICE: sequence_dumper,
    Kind.ARRAY: sequence_dumper,
    Kind.SET: set_dumper,
    Kind.OTHER: other_dumper,
}
