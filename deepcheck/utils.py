"""Utility functions for deepcheck."""

from __future__ import annotations

import json
import re
from datetime import timedelta
from typing import Any

# Placeholder used in place of memory addresses.
VAL_ADDR = "<addr>"

_DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
}


def parse_duration(duration_str: str) -> timedelta:
    """
    Parse a duration string like '500ms', '5s', '1m', '1h', '1d' into a timedelta.

    Args:
        duration_str: Duration string (e.g., '10s', '1.5m', '2h')

    Returns:
        timedelta object
    """
    if not duration_str:
        return timedelta(0)

    pattern = r'^(\d+(?:\.\d+)?)\s*(ms|[smhd])$'
    match = re.match(pattern, duration_str.strip().lower())

    if not match:
        raise ValueError(f"Invalid duration format: {duration_str}")

    return float(match.group(1)) * _DURATION_UNITS[match.group(2)]


def type_name(typ: type, use_any: bool = False) -> str:
    """
    Get a friendly name for a type.

    Builtins use their bare name (int, str, list); other types are
    prefixed with the last segment of their module (mymod.MyType).

    Args:
        typ: The type to name
        use_any: Render `object` as `any`

    Returns:
        The type name
    """
    if typ is object and use_any:
        return "any"
    module = getattr(typ, "__module__", "") or ""
    qualname = getattr(typ, "__qualname__", None) or getattr(typ, "__name__", repr(typ))
    if module == "builtins":
        return qualname
    return f"{module.rsplit('.', 1)[-1]}.{qualname}"


def quote(text: str) -> str:
    """Render a string as a double-quoted, escaped literal."""
    return json.dumps(text, ensure_ascii=False)


def unquote(text: str) -> str:
    """Strip the outer quotes of a literal produced by quote()."""
    if len(text) < 2 or text[0] != '"' or text[-1] != '"':
        return text
    try:
        result = json.loads(text)
    except ValueError:
        return text
    return result if isinstance(result, str) else text


def format_float(value: float) -> str:
    """Format a float using the shortest representation that round-trips."""
    return repr(float(value))


def format_bool(value: bool) -> str:
    """Format a boolean as `true` or `false`."""
    return "true" if value else "false"


def is_printable_char(code: int) -> bool:
    """Check if a byte value is a printable ASCII character."""
    return 32 <= code <= 126


def address(obj: Any, reveal: bool) -> str:
    """Return the identity of an object as hex, or the placeholder."""
    if not reveal:
        return VAL_ADDR
    return f"<0x{id(obj):x}>"


def is_multiline(text: str) -> bool:
    """Check if text spans more than one line."""
    return "\n" in text
