"""Comparison options, the global type checker registry and trail builders."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timedelta, tzinfo
from typing import Any, Callable, Optional

from .config import SETTINGS
from .dump import Dump
from .exceptions import RegistrationError
from .utils import type_name

LOGGER = logging.getLogger(__name__)

# Suffix added to trails which were skipped.
SKIPPED = " <skipped>"

# Compares want and have, returns None when they match.
Checker = Callable[[Any, Any, "Options"], Optional[BaseException]]

# Process-wide type checkers, copied into every default_options() result.
_TYPE_CHECKERS: dict[type, Checker] = {}
_LOCK = threading.Lock()


def register_type_checker(typ: type, checker: Checker) -> None:
    """
    Globally register a checker for a type.

    Args:
        typ: The exact type the checker compares
        checker: The checker function

    Raises:
        RegistrationError: When the checker is None or the type already has one
    """
    name = type_name(typ)
    if checker is None:
        raise RegistrationError(name, "type checker must not be None")
    with _LOCK:
        if typ in _TYPE_CHECKERS:
            raise RegistrationError(name, "cannot overwrite an existing type checker")
        _TYPE_CHECKERS[typ] = checker
    LOGGER.info("Registering type checker for: %s", name)


@dataclass
class Options:
    """
    Configuration of a single comparison.

    Options are treated as immutable: every step of a comparison works on a
    copy made with dataclasses.replace, only trail_log is shared.
    """
    dumper: Dump = field(default_factory=Dump)
    time_format: str = field(default_factory=lambda: SETTINGS.parse_time_format)
    zone: Optional[tzinfo] = None
    recent: timedelta = field(default_factory=lambda: SETTINGS.recent)
    trail: str = ""
    trail_log: Optional[list[str]] = None
    type_checkers: dict[type, Checker] = field(default_factory=dict)
    trail_checkers: dict[str, Checker] = field(default_factory=dict)
    skip_trails: list[str] = field(default_factory=list)
    skip_unexported: bool = False
    cmp_base_types: bool = False
    now: Callable[[], datetime] = datetime.now

    def with_trail(self, trail: str) -> "Options":
        return replace(self, trail=trail)

    def log_trail(self) -> "Options":
        """Record the current trail in trail_log, empty trails are not recorded."""
        if self.trail_log is not None and self.trail:
            self.trail_log.append(self.trail)
        return self

    def struct_trail(self, type_name: str, field_name: str) -> "Options":
        """
        Extend the trail with a struct field.

        The type name starts the trail only when the trail is empty.

        Args:
            type_name: Name of the struct type, may be empty
            field_name: Name of the field

        Returns:
            Options with the extended trail
        """
        left = self.trail
        if type_name and not self.trail:
            left = type_name
        if left and field_name:
            return self.with_trail(f"{left}.{field_name}")
        if not left and field_name:
            return self.with_trail(field_name)
        return self.with_trail(left)

    def arr_trail(self, kind: str, idx: int) -> "Options":
        """Extend the trail with a sequence index, <kind>[idx] for empty trails."""
        nxt = self.trail
        if not nxt and kind:
            nxt = f"<{kind}>"
        return self.with_trail(f"{nxt}[{idx}]")

    def map_trail(self, key: str) -> "Options":
        """Extend the trail with a rendered mapping key."""
        nxt = self.trail or "map"
        if nxt.endswith("]"):
            nxt += "map"
        return self.with_trail(f"{nxt}[{key}]")

    def set_trail(self, key: str) -> "Options":
        """Extend the trail with a rendered set element."""
        nxt = self.trail or "<set>"
        return self.with_trail(f"{nxt}[{key}]")

    def skipped(self) -> "Options":
        """Log the current trail as skipped."""
        return self.with_trail(self.trail + SKIPPED).log_trail()


def default_options(**overrides: Any) -> Options:
    """
    Build options with defaults and the global type checkers.

    Args:
        **overrides: Options field values; type_checkers are merged on top
            of the global ones and skip_trails accept any iterable

    Returns:
        New Options instance
    """
    known = {f.name for f in fields(Options)}
    for name in overrides:
        if name not in known:
            raise TypeError(f"unknown option: {name}")

    checkers = dict(_TYPE_CHECKERS)
    for typ, checker in (overrides.pop("type_checkers", None) or {}).items():
        if typ in _TYPE_CHECKERS:
            LOGGER.warning("Overwriting the global type checker for: %s", type_name(typ))
        checkers[typ] = checker

    if "skip_trails" in overrides:
        overrides["skip_trails"] = list(overrides["skip_trails"])
    if "trail_checkers" in overrides:
        overrides["trail_checkers"] = dict(overrides["trail_checkers"])

    return Options(type_checkers=checkers, **overrides)


def field_name(ops: Options, type_name: str) -> Callable[[str], Options]:
    """
    Build a helper extending the trail with fields of a struct type.

    Meant for custom checkers comparing struct fields one by one:

        fld = field_name(ops, "TRec")
        err = equal(want.name, have.name, fld("name"))
    """
    def build(name: str) -> Options:
        return ops.struct_trail(type_name, name)
    return build
