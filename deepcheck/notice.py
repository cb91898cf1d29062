"""Structured, chainable failure messages."""

from __future__ import annotations

import functools
from typing import Any, Callable, Iterator, Optional

from .exceptions import DeepCheckError, ERR_NOTICE
from .models import Row

TRAIL = "trail"
MULTI_HEADER = "multiple expectations violated"


def indent(n: int, text: str, char: str = " ") -> str:
    """
    Indent lines of text with n characters.

    Text is indented only when it has more than one line; empty lines are
    left untouched.
    """
    if not text:
        return ""
    lines = text.split("\n")
    if len(lines) == 1:
        return text
    prefix = char * n
    return "\n".join(prefix + line if line else line for line in lines)


def pad(name: str, width: int) -> str:
    """Left pad a name with spaces to the requested width."""
    return name.rjust(width)


def _format_row(name: str, value: str, width: int) -> str:
    name = pad(name, width)
    idx = value.find("\n")
    if idx < 0:
        return f"  {name}: {value}"
    value = indent(len(name) + 4, value)
    if idx == 0:
        return f"  {name}:{value}"
    return f"  {name}:\n{value}"


def _find_notice(err: Optional[BaseException]) -> Optional["Notice"]:
    """First Notice on the __cause__ chain of err, err itself included."""
    seen = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, Notice):
            return err
        seen.add(id(err))
        err = err.__cause__
    return None


class Notice(DeepCheckError):
    """
    A failure message with a header and named rows.

    Notices link into a doubly-linked chain; rendering any node of the chain
    renders the whole chain starting at its head.

    Usage:
        msg = Notice("expected values to be equal").set_trail("T.Int")
        msg.want("%d", 42).have("%d", 44)
        print(msg)
    """

    def __init__(self, header: str = "", *args: Any):
        if args:
            header = header % args
        super().__init__(header)
        self.header = header
        self.trail = ""
        self.rows: list[Row] = []
        self.meta: dict[str, Any] = {}
        self._err: BaseException = ERR_NOTICE
        self._prev: Optional[Notice] = None
        self._next: Optional[Notice] = None

    @classmethod
    def from_error(cls, err: BaseException, prefix: Optional[str] = None) -> "Notice":
        """
        Promote an exception to a notice.

        Notices, including a notice found on the __cause__ chain of err, are
        returned unchanged (apart from the optional header prefix); other
        exceptions are wrapped in a new notice.

        Args:
            err: The exception to promote
            prefix: Optional prefix rendered as "[prefix] header"

        Returns:
            A Notice instance
        """
        found = _find_notice(err)
        if found is not None:
            if prefix:
                found.header = f"[{prefix}] {found.header}"
            return found

        header = "assertion error"
        if prefix:
            header = f"[{prefix}] {header}"
        msg = cls(header).wrap(err)
        if str(err):
            msg.append("cause", "%s", str(err))
        return msg

    # Header, trail and wrapped error.

    def set_header(self, header: str, *args: Any) -> "Notice":
        if args:
            header = header % args
        self.header = header
        return self

    def set_trail(self, trail: str) -> "Notice":
        """Set the trail, an empty trail leaves the notice unchanged."""
        if trail:
            self.trail = trail
        return self

    def wrap(self, err: BaseException) -> "Notice":
        self._err = err
        self.__cause__ = err
        return self

    def unwrap(self) -> BaseException:
        return self._err

    def is_(self, target: Any) -> bool:
        """
        Check the wrapped error chain for a target.

        Args:
            target: An exception instance (matched by identity) or an
                exception class (matched with isinstance)

        Returns:
            True if any error on the unwrap chain matches
        """
        err: Optional[BaseException] = self._err
        seen = set()
        while err is not None and id(err) not in seen:
            seen.add(id(err))
            if err is target:
                return True
            if isinstance(target, type) and isinstance(err, target):
                return True
            err = err.unwrap() if isinstance(err, Notice) else err.__cause__
        return False

    # Rows.

    def _index(self, name: str) -> int:
        for idx, row in enumerate(self.rows):
            if row.name == name:
                return idx
        return -1

    def append(self, name: str, format: str, *args: Any) -> "Notice":
        """
        Append a row, or replace the value of an existing row in place.

        Args:
            name: Row name
            format: printf-style format of the value
            *args: Format arguments

        Returns:
            self
        """
        idx = self._index(name)
        if idx >= 0:
            self.rows[idx].format = format
            self.rows[idx].args = args
            return self
        self.rows.append(Row(name, format, args))
        return self

    def prepend(self, name: str, format: str, *args: Any) -> "Notice":
        """Insert a row before all others (after the trail), or replace it in place."""
        idx = self._index(name)
        if idx >= 0:
            self.rows[idx].format = format
            self.rows[idx].args = args
            return self
        self.rows.insert(0, Row(name, format, args))
        return self

    def append_row(self, *rows: Row) -> "Notice":
        for row in rows:
            self.append(row.name, row.format, *row.args)
        return self

    def remove(self, name: str) -> "Notice":
        if name == TRAIL:
            self.trail = ""
        self.rows = [row for row in self.rows if row.name != name]
        return self

    def want(self, format: str, *args: Any) -> "Notice":
        return self.append("want", format, *args)

    def have(self, format: str, *args: Any) -> "Notice":
        return self.append("have", format, *args)

    def row(self, name: str) -> Optional[Row]:
        """Get a row by name, None if it does not exist."""
        idx = self._index(name)
        return self.rows[idx] if idx >= 0 else None

    # Metadata.

    def meta_set(self, key: str, value: Any) -> "Notice":
        self.meta[key] = value
        return self

    def meta_lookup(self, key: str) -> tuple[Any, bool]:
        if key in self.meta:
            return self.meta[key], True
        return None, False

    # Chain.

    @property
    def prev(self) -> Optional["Notice"]:
        return self._prev

    @property
    def next(self) -> Optional["Notice"]:
        return self._next

    def chain(self, prev: Optional["Notice"]) -> "Notice":
        """Link this notice after prev."""
        self._prev = prev
        if prev is not None:
            prev._next = self
        return self

    def head(self) -> "Notice":
        node = self
        while node._prev is not None:
            node = node._prev
        return node

    def tail(self) -> "Notice":
        node = self
        while node._next is not None:
            node = node._next
        return node

    def walk(self) -> Iterator["Notice"]:
        """Iterate over the chain starting at this notice."""
        node: Optional[Notice] = self
        while node is not None:
            yield node
            node = node._next

    def chain_len(self) -> int:
        return sum(1 for _ in self.head().walk())

    # Rendering.

    def _lines(self, width: int) -> list[str]:
        lines = []
        if self.trail:
            lines.append(_format_row(TRAIL, self.trail, width))
        for row in self.rows:
            lines.append(_format_row(row.name, row.value(), width))
        return lines

    def error(self) -> str:
        """Render the entire chain starting at its head."""
        nodes = list(self.head().walk())
        multi = len(nodes) > 1

        width = len("error") if multi else 0
        for node in nodes:
            if node.trail:
                width = max(width, len(TRAIL))
            for row in node.rows:
                width = max(width, len(row.name))

        if not multi:
            lines = nodes[0]._lines(width)
            if not lines:
                return nodes[0].header
            return nodes[0].header + ":\n" + "\n".join(lines)

        lines = [MULTI_HEADER + ":"]
        for idx, node in enumerate(nodes):
            if idx > 0:
                lines.append(pad("---", width + 4))
            if node.header:
                lines.append(_format_row("error", node.header, width))
            lines.extend(node._lines(width))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.error()

    def to_dict(self) -> dict:
        return {
            "header": self.header,
            "trail": self.trail,
            "rows": [row.to_dict() for row in self.rows],
        }


def from_error(err: BaseException, prefix: Optional[str] = None) -> Notice:
    """Promote an exception to a notice, see Notice.from_error."""
    return Notice.from_error(err, prefix)


def join(*errs: Optional[BaseException]) -> Optional[Notice]:
    """
    Link errors into one notice chain in argument order.

    Arguments which already belong to a chain are spliced in whole. None
    arguments are skipped.

    Returns:
        The tail of the chain, None when there was nothing to join
    """
    tail: Optional[Notice] = None
    for err in errs:
        if err is None:
            continue
        msg = Notice.from_error(err)
        first = msg.head()
        if tail is not None:
            if first is tail.head():
                continue
            tail._next = first
            first._prev = tail
        tail = msg.tail()
    return tail


def trail_cmp(a: Notice, b: Notice) -> int:
    """Order notices by trail."""
    if a.trail < b.trail:
        return -1
    if a.trail > b.trail:
        return 1
    return 0


def sort_notices(head: Optional[Notice], cmp: Callable[[Notice, Notice], int]) -> Optional[Notice]:
    """
    Sort a notice chain in place, keeping the order of equal elements.

    Args:
        head: Any node of the chain, sorting starts at its head
        cmp: Comparator returning -1, 0 or 1

    Returns:
        The new tail of the chain
    """
    if head is None:
        return None

    nodes = sorted(head.head().walk(), key=functools.cmp_to_key(cmp))
    prev = None
    for node in nodes:
        node._prev = prev
        node._next = None
        if prev is not None:
            prev._next = node
        prev = node
    return prev
