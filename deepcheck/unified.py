"""Unified diff output for line edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from .lcs import diff_lines
from .models import Edit

DEFAULT_CONTEXT_LINES = 3


class OpKind(Enum):
    DELETE = "-"
    INSERT = "+"
    EQUAL = " "


@dataclass
class Line:
    kind: OpKind
    content: str


@dataclass
class Hunk:
    """Contiguous group of edits with surrounding context lines."""
    from_line: int
    to_line: int
    lines: list[Line] = field(default_factory=list)

    def counts(self) -> tuple[int, int]:
        """Number of lines the hunk spans in the before and after text."""
        from_count = to_count = 0
        for line in self.lines:
            if line.kind == OpKind.DELETE:
                from_count += 1
            elif line.kind == OpKind.INSERT:
                to_count += 1
            else:
                from_count += 1
                to_count += 1
        return from_count, to_count

    def header(self) -> str:
        from_count, to_count = self.counts()
        return f"@@ {_range('-', self.from_line, from_count)} {_range('+', self.to_line, to_count)} @@"


def _range(sign: str, line: int, count: int) -> str:
    if count > 1:
        return f"{sign}{line},{count}"
    if line == 1 and count == 0:
        return f"{sign}0,0"
    return f"{sign}{line}"


@dataclass
class Unified:
    """A unified diff: labels of both sides and the hunks."""
    from_label: str
    to_label: str
    hunks: list[Hunk] = field(default_factory=list)

    def _render(self, missing_newline: str) -> str:
        parts = []
        for hunk in self.hunks:
            parts.append(hunk.header() + "\n")
            for line in hunk.lines:
                parts.append(line.kind.value + line.content)
                if not line.content.endswith("\n"):
                    parts.append(missing_newline)
        return "".join(parts)

    def ctx_string(self) -> str:
        """Render the hunks without the ---/+++ file headers."""
        if not self.hunks:
            return ""
        return self._render("\n")

    def __str__(self) -> str:
        if not self.hunks:
            return ""
        header = f"--- {self.from_label}\n+++ {self.to_label}\n"
        return header + self._render("\n\\ No newline at end of file\n")


def _add_equal(hunk: Hunk, lines: Sequence[str], start: int, end: int) -> int:
    delta = 0
    for idx in range(start, end):
        if idx < 0:
            continue
        if idx >= len(lines):
            return delta
        hunk.lines.append(Line(OpKind.EQUAL, lines[idx]))
        delta += 1
    return delta


def to_unified(
    from_label: str,
    to_label: str,
    before: Sequence[str],
    after: Sequence[str],
    edits: list[Edit],
    context: int = DEFAULT_CONTEXT_LINES,
) -> Unified:
    """
    Group line edits into hunks.

    Args:
        from_label: Label of the before side
        to_label: Label of the after side
        before: Lines before the edits
        after: Lines the replacements are taken from
        edits: Line edits, as returned by diff_lines
        context: Number of unchanged lines around each change

    Returns:
        Unified diff
    """
    u = Unified(from_label, to_label)
    if not edits:
        return u

    gap = context * 2
    hunk = None
    last = 0
    # Lines inserted minus lines deleted by the edits seen so far.
    offset = 0

    for edit in edits:
        start, end = edit.start, edit.end
        if hunk is not None and start == last:
            pass
        elif hunk is not None and start <= last + gap:
            _add_equal(hunk, before, last, start)
        else:
            if hunk is not None:
                _add_equal(hunk, before, last, last + context)
                u.hunks.append(hunk)
            hunk = Hunk(from_line=start + 1, to_line=start + offset + 1)
            delta = _add_equal(hunk, before, start - context, start)
            hunk.from_line -= delta
            hunk.to_line -= delta

        last = start
        for idx in range(start, end):
            hunk.lines.append(Line(OpKind.DELETE, before[idx]))
            last += 1
        for idx in range(edit.repl_start, edit.repl_end):
            hunk.lines.append(Line(OpKind.INSERT, after[idx]))
        offset += (edit.repl_end - edit.repl_start) - (end - start)

    if hunk is not None:
        _add_equal(hunk, before, last, last + context)
        u.hunks.append(hunk)
    return u


def unified(from_label: str, to_label: str, before: str, after: str, context: int = DEFAULT_CONTEXT_LINES) -> str:
    """Unified diff between two texts, with file headers."""
    a = before.splitlines(keepends=True)
    b = after.splitlines(keepends=True)
    return str(to_unified(from_label, to_label, a, b, diff_lines(a, b), context))
