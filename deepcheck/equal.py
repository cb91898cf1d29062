"""Deep structural comparison of two values."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from . import kinds
from .dumpers import (
    byte_dumper,
    chan_dumper,
    func_dumper,
    raw_pointer_dumper,
    sorted_by_dump,
)
from .models import CONTAINER_KINDS, PRIMITIVE_KINDS, Byte, Kind
from .notice import Notice, join
from .options import Options, default_options
from .utils import type_name

LOGGER = logging.getLogger(__name__)

HEADER_EQUAL = "expected values to be equal"
HEADER_NOT_EQUAL = "expected values not to be equal"
HEADER_CANNOT_COMPARE = "cannot compare values"

_SEQUENCE_TRAILS = {
    Kind.SLICE: "slice",
    Kind.ARRAY: "array",
    Kind.BYTES: "bytes",
}


def _effective(options: Optional[Options], overrides: dict) -> Options:
    if options is None:
        ops = default_options(**overrides)
    elif overrides:
        ops = replace(options, **overrides)
    else:
        ops = options
    if Byte not in ops.dumper.dumpers:
        ops = replace(ops, dumper=ops.dumper.with_dumper(Byte, byte_dumper))
    return ops


def equal(want: Any, have: Any, options: Optional[Options] = None, **overrides: Any) -> Optional[Notice]:
    """
    Deeply compare two values.

    Args:
        want: The expected value
        have: The actual value
        options: Comparison options, default_options() when not given
        **overrides: Options fields to change for this comparison

    Returns:
        None when the values are equal, otherwise a Notice (possibly the
        tail of a chain of notices, one per mismatch)
    """
    ops = _effective(options, overrides)
    return _deep_equal(want, have, ops, set())


def not_equal(want: Any, have: Any, options: Optional[Options] = None, **overrides: Any) -> Optional[Notice]:
    """
    Check that two values are not deeply equal.

    Returns:
        None when the values differ, otherwise a Notice
    """
    ops = _effective(options, overrides)
    if _deep_equal(want, have, ops, set()) is None:
        return equal_error(want, have, ops).set_header(HEADER_NOT_EQUAL)
    return None


def equal_error(want: Any, have: Any, ops: Options) -> Notice:
    """
    Build the notice describing two unequal values.

    Type rows are added when both values are set and their types differ;
    the diff row when the renderings produce one and the types match.
    """
    msg = Notice(HEADER_EQUAL).set_trail(ops.trail)
    typed = want is not None and have is not None
    if typed and type(want) is not type(have):
        msg.append("want type", "%s", type_name(type(want)))
        msg.append("have type", "%s", type_name(type(have)))

    want_str, have_str, diff = ops.dumper.diff(want, have)
    msg.want("%s", want_str).have("%s", have_str)

    if diff and typed and isinstance(have, type(want)):
        msg.append("diff", "%s", diff)
    return msg


def _type_error(want: Any, have: Any, ops: Options) -> Notice:
    return (
        Notice(HEADER_EQUAL)
        .set_trail(ops.trail)
        .append("want type", "%s", type_name(type(want)))
        .append("have type", "%s", type_name(type(have)))
    )


def _len_error(want: Any, have: Any, ops: Options) -> Notice:
    return (
        equal_error(want, have, ops)
        .prepend("have len", "%d", len(have))
        .prepend("want len", "%d", len(want))
    )


def _cannot_compare(ops: Options) -> Notice:
    return (
        Notice(HEADER_CANNOT_COMPARE)
        .set_trail(ops.trail)
        .append("cause", "%s", "value cannot be used without raising")
        .append("hint", "%s", "use skip_trails or skip_unexported option to skip this field")
    )


def _key_string(ops: Options, key: Any) -> str:
    flat = ops.dumper.derive(flat=True, compact=False, indent=0)
    return flat.any(key)


def _deep_equal(want: Any, have: Any, ops: Options, visited: set, exported: bool = True) -> Optional[Notice]:
    if ops.trail in ops.skip_trails:
        ops.skipped()
        return None

    if not exported and ops.skip_unexported:
        ops.skipped()
        return None

    if want is None and have is None:
        ops.log_trail()
        return None

    if want is None or have is None:
        ops.log_trail()
        return equal_error(want, have, ops)

    wkind = kinds.kind_of(want)
    if type(want) is not type(have):
        hkind = kinds.kind_of(have)
        if ops.cmp_base_types and wkind == hkind and wkind in PRIMITIVE_KINDS:
            return _deep_equal(
                kinds.base_value(want, wkind),
                kinds.base_value(have, hkind),
                ops,
                visited,
            )
        ops.log_trail()
        return _type_error(want, have, ops)

    if wkind in CONTAINER_KINDS:
        key = (id(want), id(have), type(want))
        if key in visited:
            return None
        visited.add(key)

    checker = ops.trail_checkers.get(ops.trail)
    if checker is not None:
        LOGGER.debug("Using custom checker for trail: %s", ops.trail)
        ops.log_trail()
        return checker(want, have, ops)

    checker = ops.type_checkers.get(type(want))
    if checker is not None:
        LOGGER.debug("Using custom checker for type: %s", type_name(type(want)))
        ops.log_trail()
        return checker(want, have, ops)

    return _KIND_CHECKS.get(wkind, _check_other)(want, have, ops, visited)


def _check_struct(want: Any, have: Any, ops: Options, visited: set) -> Optional[Notice]:
    names = kinds.struct_fields(want)
    for name in kinds.struct_fields(have):
        if name not in names:
            names.append(name)

    type_label = type(want).__name__
    err = None
    for name in names:
        fld_ops = ops.struct_trail(type_label, name)
        wfld = kinds.field_value(want, name)
        hfld = kinds.field_value(have, name)
        exported = kinds.is_exported(name)
        if wfld is kinds.MISSING and hfld is kinds.MISSING:
            fld_ops.log_trail()
            continue
        if wfld is kinds.MISSING or hfld is kinds.MISSING:
            if not exported and fld_ops.skip_unexported:
                fld_ops.skipped()
                continue
            fld_ops.log_trail()
            e = equal_error(
                None if wfld is kinds.MISSING else wfld,
                None if hfld is kinds.MISSING else hfld,
                fld_ops,
            )
        else:
            e = _deep_equal(wfld, hfld, fld_ops, visited, exported)
        if e is not None:
            err = join(err, e)
    return err


def _check_sequence(want: Any, have: Any, ops: Options, visited: set) -> Optional[Notice]:
    if len(want) != len(have):
        ops.log_trail()
        return _len_error(want, have, ops)

    kind = kinds.kind_of(want)
    if kind != Kind.ARRAY and want is have:
        ops.log_trail()
        return None

    if kind == Kind.BYTES:
        want = [Byte(b) for b in want]
        have = [Byte(b) for b in have]

    label = _SEQUENCE_TRAILS[kind]
    err = None
    for idx, (witem, hitem) in enumerate(zip(want, have)):
        e = _deep_equal(witem, hitem, ops.arr_trail(label, idx), visited)
        if e is not None:
            err = join(err, e)
    return err


def _check_map(want: Any, have: Any, ops: Options, visited: set) -> Optional[Notice]:
    if len(want) != len(have):
        ops.log_trail()
        return _len_error(want, have, ops)

    if want is have:
        ops.log_trail()
        return None

    keyed = sorted(((_key_string(ops, key), key) for key in want.keys()), key=lambda kv: kv[0])

    err = None
    for key_str, key in keyed:
        key_ops = ops.map_trail(key_str)
        if key not in have:
            key_ops.log_trail()
            e = equal_error(want[key], None, key_ops)
        else:
            e = _deep_equal(want[key], have[key], key_ops, visited)
        if e is not None:
            err = join(err, e)
    return err


def _check_set(want: Any, have: Any, ops: Options, visited: set) -> Optional[Notice]:
    if len(want) != len(have):
        ops.log_trail()
        return _len_error(want, have, ops)

    if want is have:
        ops.log_trail()
        return None

    # Maps each element of have to itself so hash-equal elements can be paired.
    lookup = {item: item for item in have}
    err = None
    for item in sorted_by_dump(ops.dumper, want):
        item_ops = ops.set_trail(_key_string(ops, item))
        match = lookup.get(item, kinds.MISSING)
        if match is kinds.MISSING:
            item_ops.log_trail()
            e = equal_error(item, None, item_ops)
        else:
            e = _deep_equal(item, match, item_ops, visited)
        if e is not None:
            err = join(err, e)
    return err


def _check_pointer(want: Any, have: Any, ops: Options, visited: set) -> Optional[Notice]:
    wref, href = want(), have()
    if wref is None and href is None:
        ops.log_trail()
        return None
    if wref is None or href is None:
        ops.log_trail()
        return equal_error(want, have, ops)
    return _deep_equal(wref, href, ops, visited)


def _check_primitive(want: Any, have: Any, ops: Options, visited: set) -> Optional[Notice]:
    ops.log_trail()
    if want == have:
        return None
    return equal_error(want, have, ops)


def _check_error(want: Any, have: Any, ops: Options, visited: set) -> Optional[Notice]:
    ops.log_trail()
    if want is have:
        return None
    try:
        same = want.args == have.args
    except Exception:
        return _cannot_compare(ops)
    if same:
        return None
    return equal_error(want, have, ops)


def _check_identity(dumper):
    def check(want: Any, have: Any, ops: Options, visited: set) -> Optional[Notice]:
        ops.log_trail()
        if kinds.same_func(want, have):
            return None
        return (
            Notice(HEADER_EQUAL)
            .set_trail(ops.trail)
            .want("%s", dumper(ops.dumper, 0, want))
            .have("%s", dumper(ops.dumper, 0, have))
        )
    return check


def _check_raw_pointer(want: Any, have: Any, ops: Options, visited: set) -> Optional[Notice]:
    ops.log_trail()
    if kinds.raw_address(want) == kinds.raw_address(have):
        return None
    return (
        Notice(HEADER_EQUAL)
        .set_trail(ops.trail)
        .want("%s", raw_pointer_dumper(ops.dumper, 0, want))
        .have("%s", raw_pointer_dumper(ops.dumper, 0, have))
    )


def _check_other(want: Any, have: Any, ops: Options, visited: set) -> Optional[Notice]:
    ops.log_trail()
    try:
        same = bool(want == have)
    except Exception:
        return _cannot_compare(ops)
    if same:
        return None
    return equal_error(want, have, ops)


_KIND_CHECKS = {
    Kind.STRUCT: _check_struct,
    Kind.SLICE: _check_sequence,
    Kind.ARRAY: _check_sequence,
    Kind.BYTES: _check_sequence,
    Kind.MAP: _check_map,
    Kind.SET: _check_set,
    Kind.POINTER: _check_pointer,
    Kind.BOOL: _check_primitive,
    Kind.BYTE: _check_primitive,
    Kind.INT: _check_primitive,
    Kind.FLOAT: _check_primitive,
    Kind.COMPLEX: _check_primitive,
    Kind.STRING: _check_primitive,
    Kind.ERROR: _check_error,
    Kind.CHAN: _check_identity(chan_dumper),
    Kind.FUNC: _check_identity(func_dumper),
    Kind.RAW_POINTER: _check_raw_pointer,
    Kind.OTHER: _check_other,
}
