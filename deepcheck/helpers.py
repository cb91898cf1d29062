"""Helpers shared by checks built on top of equal."""

from __future__ import annotations

import traceback
import weakref
from typing import Any, Callable, Optional


def is_nil(value: Any) -> tuple[bool, bool]:
    """
    Check if a value is nil.

    None is nil. A dead weak reference is a wrapped nil: the reference
    object exists but points at nothing.

    Returns:
        Tuple of (is nil, is wrapped nil)
    """
    if value is None:
        return True, False
    if isinstance(value, weakref.ref) and value() is None:
        return True, True
    return False, False


def will_panic(fn: Callable[[], Any]) -> tuple[Optional[BaseException], str]:
    """
    Call fn and capture the exception it raises.

    Interrupts (KeyboardInterrupt, SystemExit) are never captured.

    Returns:
        Tuple of (raised exception, formatted traceback), (None, "") when
        fn returns normally
    """
    try:
        fn()
    except (KeyboardInterrupt, SystemExit):
        raise
    except BaseException as exc:
        return exc, traceback.format_exc()
    return None, ""
