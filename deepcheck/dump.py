"""Configurable pretty-printer producing diff-friendly value renderings."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional

from . import kinds
from .config import SETTINGS
from .dumpers import (
    KIND_DUMPERS,
    VAL_NIL,
    VAL_MAX_NESTING,
    Dumper,
    get_duration_dumper,
    get_time_dumper,
    zone_dumper,
)
from .exceptions import RegistrationError
from .lcs import diff_lines
from .unified import to_unified
from .utils import is_multiline, type_name, unquote

LOGGER = logging.getLogger(__name__)

# Process-wide type dumpers, copied into every Dump.
_TYPE_DUMPERS: dict[type, Dumper] = {}
_LOCK = threading.Lock()


def register_type_dumper(typ: type, dumper: Dumper) -> None:
    """
    Globally register a dumper for a type.

    Args:
        typ: The exact type the dumper renders
        dumper: The dumper function

    Raises:
        RegistrationError: When the dumper is None or the type already has one
    """
    name = type_name(typ)
    if dumper is None:
        raise RegistrationError(name, "dumper must not be None")
    with _LOCK:
        if typ in _TYPE_DUMPERS:
            raise RegistrationError(name, "type dumper already registered")
        _TYPE_DUMPERS[typ] = dumper
    LOGGER.info("Registering type dumper for: %s", name)


@dataclass
class Dump:
    """
    Value rendering configuration.

    Usage:
        dmp = Dump(flat=True)
        dmp.any([1, 2])  # list{1, 2}
    """
    flat: bool = False
    flat_strings: int = field(default_factory=lambda: SETTINGS.dump_flat_strings)
    compact: bool = False
    ptr_addr: bool = False
    time_format: str = field(default_factory=lambda: SETTINGS.dump_time_format)
    duration_format: str = field(default_factory=lambda: SETTINGS.dump_duration_format)
    print_type: bool = True
    print_private: bool = False
    use_any: bool = True
    max_depth: int = field(default_factory=lambda: SETTINGS.dump_depth)
    indent: int = field(default_factory=lambda: SETTINGS.dump_indent)
    tab_width: int = field(default_factory=lambda: SETTINGS.dump_tab_width)
    dumpers: dict[type, Dumper] = field(default_factory=dict)
    # Quote strings regardless of flat_strings, set for struct fields.
    quote_strings: bool = field(default=False, repr=False)

    def __post_init__(self):
        merged = dict(_TYPE_DUMPERS)
        for typ, dumper in self.dumpers.items():
            glob = _TYPE_DUMPERS.get(typ)
            if glob is not None and glob is not dumper:
                LOGGER.warning("Overwriting the global type dumper for: %s", type_name(typ))
            merged[typ] = dumper
        self.dumpers = merged

    def derive(self, **changes: Any) -> "Dump":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def with_dumper(self, typ: type, dumper: Dumper) -> "Dump":
        """Return a copy rendering typ with dumper."""
        dumpers = dict(self.dumpers)
        dumpers[typ] = dumper
        return replace(self, dumpers=dumpers)

    def _builtin_dumper(self, val: Any) -> Optional[Dumper]:
        if isinstance(val, (datetime, date, time)):
            return get_time_dumper(self.time_format)
        if isinstance(val, timedelta):
            return get_duration_dumper(self.duration_format)
        if isinstance(val, tzinfo):
            return zone_dumper
        return None

    def dumper_for(self, val: Any) -> Dumper:
        """
        Find the dumper for a value.

        Registered type dumpers win, then the time, duration and zone
        renderers, then the renderer for the kind of the value.
        """
        dumper = self.dumpers.get(type(val))
        if dumper is not None:
            return dumper
        dumper = self._builtin_dumper(val)
        if dumper is not None:
            return dumper
        return KIND_DUMPERS[kinds.kind_of(val)]

    def value(self, val: Any, level: int = 0) -> str:
        """Render a value at a nesting level."""
        if level > self.max_depth:
            return VAL_MAX_NESTING
        return self.dumper_for(val)(self, level, val)

    def any(self, val: Any) -> str:
        """Render a value."""
        return self.value(val, 0)

    def _for_diff(self, val: Any) -> str:
        dmp = replace(self, flat=False, flat_strings=0, compact=False)
        return unquote(dmp.value(val))

    def diff(self, want: Any, have: Any) -> tuple[str, str, str]:
        """
        Render both values and diff their renderings.

        A diff is produced only when the renderings differ, neither is nil
        and at least one of them spans multiple lines. Lines prefixed with
        "-" come from have, lines prefixed with "+" from want.

        Args:
            want: The expected value
            have: The actual value

        Returns:
            Tuple of (want rendering, have rendering, unified diff)
        """
        want_str = self.value(want)
        have_str = self.value(have)
        if want_str == have_str:
            return want_str, have_str, ""

        if want_str == VAL_NIL or have_str == VAL_NIL:
            return want_str, have_str, ""

        want_ml = is_multiline(want_str)
        have_ml = is_multiline(have_str)
        if want_ml != have_ml:
            dmp = replace(self, flat=False, flat_strings=0)
            if want_ml:
                have_str = dmp.value(have)
            else:
                want_str = dmp.value(want)

        want_diff = self._for_diff(want)
        have_diff = self._for_diff(have)
        if not is_multiline(want_diff) and not is_multiline(have_diff):
            return want_str, have_str, ""

        have_lines = have_diff.split("\n")
        want_lines = want_diff.split("\n")
        edits = diff_lines(have_lines, want_lines)
        unified = to_unified("want", "have", have_lines, want_lines, edits, 2)
        return want_str, have_str, unified.ctx_string().rstrip("\n")
