"""Text builder used by dumpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .dump import Dump


class Printer:
    """Accumulates dumper output honouring flat and compact settings."""

    def __init__(self, dmp: "Dump"):
        self.dmp = dmp
        self._parts: list[str] = []

    def write(self, text: str) -> "Printer":
        self._parts.append(text)
        return self

    def tab(self, level: int) -> "Printer":
        """Write indentation for a level, nothing in flat mode."""
        if not self.dmp.flat and level > 0:
            self._parts.append(" " * (level * self.dmp.tab_width))
        return self

    def nl(self) -> "Printer":
        """Write a newline, nothing in flat mode."""
        if not self.dmp.flat:
            self._parts.append("\n")
        return self

    def nli(self, count: int) -> "Printer":
        """Write a newline if there are items to follow."""
        if count > 0:
            self.nl()
        return self

    def comma(self, last: bool) -> "Printer":
        """Write an item terminator, flat mode omits it after the last item."""
        if not self.dmp.flat or not last:
            self._parts.append(",")
        return self

    def sep(self, last: bool) -> "Printer":
        """Write the space between flat items."""
        if self.dmp.flat and not self.dmp.compact and not last:
            self._parts.append(" ")
        return self

    def space(self) -> "Printer":
        if not self.dmp.compact:
            self._parts.append(" ")
        return self

    def __str__(self) -> str:
        return "".join(self._parts)
