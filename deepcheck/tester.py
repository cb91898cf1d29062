"""Bridge between checks and the hosting test runner."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from .equal import equal, not_equal
from .options import Options


@runtime_checkable
class T(Protocol):
    """The subset of a test runner used to report failures."""

    def error(self, *args: Any) -> None: ...

    def errorf(self, format: str, *args: Any) -> None: ...

    def fatal(self, *args: Any) -> None: ...

    def fatalf(self, format: str, *args: Any) -> None: ...

    def helper(self) -> None: ...

    def failed(self) -> bool: ...


class Spy:
    """
    Test runner double recording reported errors and failures.

    Usage:
        spy = Spy().capture()
        assert_equal(spy, 42, 44)
        assert spy.reported_error
        print(spy.output())
    """

    def __init__(self):
        self.helper_called = False
        self.reported_error = False
        self.triggered_failure = False
        self.messages: Optional[list[str]] = None

    def capture(self) -> "Spy":
        """Start collecting messages."""
        self.messages = []
        return self

    def _record(self, text: str) -> None:
        if self.messages is not None:
            self.messages.append(text + "\n")

    def helper(self) -> None:
        self.helper_called = True

    def error(self, *args: Any) -> None:
        self.reported_error = True
        self._record(" ".join(str(arg) for arg in args))

    def errorf(self, format: str, *args: Any) -> None:
        self.reported_error = True
        self._record(format % args if args else format)

    def fatal(self, *args: Any) -> None:
        self.triggered_failure = True
        self._record(" ".join(str(arg) for arg in args))

    def fatalf(self, format: str, *args: Any) -> None:
        self.triggered_failure = True
        self._record(format % args if args else format)

    def failed(self) -> bool:
        return self.reported_error or self.triggered_failure

    def output(self) -> str:
        """All captured messages as one string."""
        return "".join(self.messages or [])


def assert_equal(t: T, want: Any, have: Any, options: Optional[Options] = None, **overrides: Any) -> bool:
    """
    Report an error to t when want and have are not deeply equal.

    Returns:
        True when the values are equal
    """
    t.helper()
    err = equal(want, have, options, **overrides)
    if err is not None:
        t.errorf("%s", str(err))
        return False
    return True


def assert_not_equal(t: T, want: Any, have: Any, options: Optional[Options] = None, **overrides: Any) -> bool:
    """
    Report an error to t when want and have are deeply equal.

    Returns:
        True when the values differ
    """
    t.helper()
    err = not_equal(want, have, options, **overrides)
    if err is not None:
        t.errorf("%s", str(err))
        return False
    return True
