"""Longest common subsequence using Myers' forward, backward and two-sided algorithms.

Sequences are anything indexable with a length: str, bytes, lists of runes
or lists of lines. The edit graph for sequences A and B has a vertex for
each (x, y), 0 <= x <= len(A), 0 <= y <= len(B); a path from (0, 0) to
(len(A), len(B)) with the fewest non-diagonal steps gives the shortest edit
script. Diagonals k = x - y are labelled with the furthest x reached after
D non-diagonal steps.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Sequence

from .models import Diag, Edit

# Number of edits considered before settling for an approximate answer.
MAX_DIFFS = 100

# Limit used for limit <= 0.
_INFINITY = 1 << 25


class Direction(Enum):
    """Placement of a proposed diagonal relative to an existing one."""
    EMPTY = "empty"
    LEFT_DOWN = "leftdown"
    RIGHT_UP = "rightup"
    BAD = "bad"


def sort_diags(lcs: list[Diag]) -> list[Diag]:
    """Sort by x, longer diagonals first."""
    lcs.sort(key=lambda d: (d.x, -d.length))
    return lcs


def valid(lcs: list[Diag]) -> bool:
    """Check that consecutive diagonals do not overlap."""
    for prev, cur in zip(lcs, lcs[1:]):
        if prev.x + prev.length > cur.x:
            return False
        if prev.y + prev.length > cur.y:
            return False
    return True


def overlap(exist: Diag, prop: Diag) -> tuple[Direction, Diag]:
    """
    Trim a proposed diagonal so it does not overlap an existing one.

    Returns:
        Tuple of (direction of the trimmed diagonal, trimmed diagonal)
    """
    x, y, length = prop.x, prop.y, prop.length

    if x <= exist.x < x + length:
        length -= x + length - exist.x
        if length <= 0:
            return Direction.EMPTY, Diag(x, y, length)

    if exist.x <= x < exist.x + exist.length:
        delta = exist.x + exist.length - x
        length -= delta
        if length <= 0:
            return Direction.EMPTY, Diag(x, y, length)
        x += delta
        y += delta

    if y <= exist.y < y + length:
        length -= y + length - exist.y
        if length <= 0:
            return Direction.EMPTY, Diag(x, y, length)

    if exist.y <= y < exist.y + exist.length:
        delta = exist.y + exist.length - y
        length -= delta
        if length <= 0:
            return Direction.EMPTY, Diag(x, y, length)
        x += delta
        y += delta

    trimmed = Diag(x, y, length)
    if x + length <= exist.x and y + length <= exist.y:
        return Direction.LEFT_DOWN, trimmed
    if exist.x + exist.length <= x and exist.y + exist.length <= y:
        return Direction.RIGHT_UP, trimmed
    return Direction.BAD, trimmed


def fix(lcs: list[Diag]) -> list[Diag]:
    """
    Make a list of diagonals consistent.

    Longest diagonals are kept first; later ones are trimmed against those
    already accepted and dropped when they conflict.
    """
    if not lcs:
        return []

    lcs = sorted(lcs, key=lambda d: d.length, reverse=True)
    accepted = [lcs[0]]
    for prop in lcs[1:]:
        direction = Direction.EMPTY
        nxt = prop
        for exist in accepted:
            direction, nxt = overlap(exist, nxt)
            if direction in (Direction.EMPTY, Direction.BAD):
                break
        if nxt.length > 0 and direction != Direction.BAD:
            accepted.append(nxt)

    return sort_diags(accepted)


def _prepend(lcs: list[Diag], x: int, y: int) -> list[Diag]:
    if lcs:
        first = lcs[0]
        if first.x == x + 1 and first.y == y + 1:
            first.x, first.y = x, y
            first.length += 1
            return lcs
    lcs.insert(0, Diag(x, y, 1))
    return lcs


def _append(lcs: list[Diag], x: int, y: int) -> list[Diag]:
    if lcs:
        last = lcs[-1]
        if last.x + last.length == x and last.y + last.length == y:
            last.length += 1
            return lcs
    lcs.append(Diag(x, y, 1))
    return lcs


def ok(d: int, k: int) -> bool:
    """Check that (d, k) addresses a label: d >= 0 and -d <= k <= d."""
    return d >= 0 and -d <= k <= d


def to_edits(lcs: list[Diag], alen: int, blen: int) -> list[Edit]:
    """Convert the gaps between diagonals into edits."""
    edits = []
    pa = pb = 0
    for d in lcs:
        if pa < d.x or pb < d.y:
            edits.append(Edit(pa, d.x, pb, d.y))
        pa = d.x + d.length
        pb = d.y + d.length
    if pa < alen or pb < blen:
        edits.append(Edit(pa, alen, pb, blen))
    return edits


class _Label:
    """Triangular storage of x values indexed by (D, k), k + D even."""

    def __init__(self, limit: int):
        size = (limit + 1) * (limit + 2) // 2 if limit < 100 else 0
        self._data = [0] * size

    @staticmethod
    def _index(d: int, k: int) -> int:
        return d * (d + 1) // 2 + (k + d) // 2

    def get(self, d: int, k: int) -> int:
        idx = self._index(d, k)
        if idx < len(self._data):
            return self._data[idx]
        return 0

    def set(self, d: int, k: int, x: int) -> None:
        idx = self._index(d, k)
        if idx >= len(self._data):
            self._data.extend([0] * (idx + 1 - len(self._data)))
        self._data[idx] = x


def common_prefix_len(a: Sequence, ai: int, aj: int, b: Sequence, bi: int, bj: int) -> int:
    """Length of the common prefix of a[ai:aj] and b[bi:bj]."""
    n = min(aj - ai, bj - bi)
    i = 0
    while i < n and a[ai + i] == b[bi + i]:
        i += 1
    return i


def common_suffix_len(a: Sequence, ai: int, aj: int, b: Sequence, bi: int, bj: int) -> int:
    """Length of the common suffix of a[ai:aj] and b[bi:bj]."""
    n = min(aj - ai, bj - bi)
    i = 0
    while i < n and a[aj - 1 - i] == b[bj - 1 - i]:
        i += 1
    return i


class EditGraph:
    """Edit graph state shared by the forward, backward and two-sided searches."""

    def __init__(self, a: Sequence, b: Sequence, limit: int):
        self.a = a
        self.b = b
        self.vf = _Label(limit)
        self.vb = _Label(limit)
        self.limit = limit
        self.lx = 0
        self.ly = 0
        self.ux = len(a)
        self.uy = len(b)
        self.delta = len(a) - len(b)

    # Forward search.

    def look_forward(self, k: int, relx: int) -> int:
        """Follow the snake on diagonal k starting at relx."""
        rely = relx - k
        x, y = relx + self.lx, rely + self.ly
        if x < self.ux and y < self.uy:
            x += common_prefix_len(self.a, x, self.ux, self.b, y, self.uy)
        return x

    def set_forward(self, d: int, k: int, relx: int) -> None:
        x = self.look_forward(k, relx)
        self.vf.set(d, k, x - self.lx)

    def get_forward(self, d: int, k: int) -> int:
        return self.vf.get(d, k)

    def fdone(self, d: int, k: int) -> tuple[bool, list[Diag]]:
        x = self.vf.get(d, k)
        y = x - k
        if x == self.ux and y == self.uy:
            return True, self.forward_lcs(d, k)
        return False, []

    def forward_lcs(self, d: int, k: int) -> list[Diag]:
        """Backtrack from label (d, k) to the origin collecting diagonals."""
        ans: list[Diag] = []
        x = self.get_forward(d, k)
        while x != 0 or x - k != 0:
            if ok(d - 1, k - 1) and x - 1 == self.get_forward(d - 1, k - 1):
                d, k, x = d - 1, k - 1, x - 1
                continue
            if ok(d - 1, k + 1) and x == self.get_forward(d - 1, k + 1):
                d, k = d - 1, k + 1
                continue
            y = x - k
            ans = _prepend(ans, x + self.lx - 1, y + self.ly - 1)
            x -= 1
        return ans

    def _forward_step(self, d: int) -> None:
        self.set_forward(d + 1, -(d + 1), self.get_forward(d, -d))
        self.set_forward(d + 1, d + 1, self.get_forward(d, d) + 1)
        for k in range(-d + 1, d, 2):
            lookv = self.look_forward(k, self.get_forward(d, k - 1) + 1)
            lookh = self.look_forward(k, self.get_forward(d, k + 1))
            self.set_forward(d + 1, k, lookv if lookv > lookh else lookh)

    def _best_forward(self) -> int:
        kmax = -self.limit - 1
        diagmax = -1
        for k in range(-self.limit, self.limit + 1, 2):
            x = self.get_forward(self.limit, k)
            y = x - k
            if x + y > diagmax and x <= self.ux and y <= self.uy:
                diagmax, kmax = x + y, k
        return kmax

    # Backward search.

    def look_backward(self, k: int, relx: int) -> int:
        """Follow the snake backwards on diagonal k starting at relx."""
        rely = relx - (k + self.delta)
        x, y = relx + self.lx, rely + self.ly
        if x > 0 and y > 0:
            x -= common_suffix_len(self.a, 0, x, self.b, 0, y)
        return x

    def set_backward(self, d: int, k: int, relx: int) -> None:
        x = self.look_backward(k, relx)
        self.vb.set(d, k, x - self.lx)

    def get_backward(self, d: int, k: int) -> int:
        return self.vb.get(d, k)

    def bdone(self, d: int, k: int) -> tuple[bool, list[Diag]]:
        x = self.vb.get(d, k)
        y = x - (k + self.delta)
        if x == 0 and y == 0:
            return True, self.backward_lcs(d, k)
        return False, []

    def backward_lcs(self, d: int, k: int) -> list[Diag]:
        """Backtrack from label (d, k) to the far corner collecting diagonals."""
        ans: list[Diag] = []
        x = self.get_backward(d, k)
        while x != self.ux or x - (k + self.delta) != self.uy:
            if ok(d - 1, k - 1) and x == self.get_backward(d - 1, k - 1):
                d, k = d - 1, k - 1
                continue
            if ok(d - 1, k + 1) and x + 1 == self.get_backward(d - 1, k + 1):
                d, k, x = d - 1, k + 1, x + 1
                continue
            y = x - (k + self.delta)
            ans = _append(ans, x + self.lx, y + self.ly)
            x += 1
        return ans

    def _backward_step(self, d: int) -> None:
        self.set_backward(d + 1, -(d + 1), self.get_backward(d, -d) - 1)
        self.set_backward(d + 1, d + 1, self.get_backward(d, d))
        for k in range(-d + 1, d, 2):
            lookv = self.look_backward(k, self.get_backward(d, k - 1))
            lookh = self.look_backward(k, self.get_backward(d, k + 1) - 1)
            self.set_backward(d + 1, k, lookv if lookv < lookh else lookh)

    def _best_backward(self) -> int:
        kmax = -self.limit - 1
        diagmin = _INFINITY
        for k in range(-self.limit, self.limit + 1, 2):
            x = self.get_backward(self.limit, k)
            y = x - (k + self.delta)
            if x + y < diagmin and x >= 0 and y >= 0:
                diagmin, kmax = x + y, k
        return kmax

    # Two-sided search.

    def two_done(self, df: int, db: int) -> tuple[int, bool]:
        """Check whether the forward and backward frontiers meet."""
        if (df + db + self.delta) % 2 != 0:
            return 0, False
        kmin = max(-df, -db + self.delta)
        kmax = min(df, db + self.delta)
        for k in range(kmin, kmax + 1, 2):
            x = self.vf.get(df, k)
            u = self.vb.get(db, k - self.delta)
            if u <= x:
                for l in range(k, kmax + 1, 2):
                    x = self.vf.get(df, l)
                    y = x - l
                    u = self.vb.get(db, l - self.delta)
                    v = u - l
                    if x == u or u == 0 or v == 0 or y == self.uy or x == self.ux:
                        return l, True
                return k, True
        return 0, False

    def two_lcs(self, df: int, db: int, kf: int) -> list[Diag]:
        """Join the forward and backward paths meeting on diagonal kf."""
        x = self.vf.get(df, kf)
        y = x - kf
        kb = kf - self.delta
        u = self.vb.get(db, kb)
        v = u - kf

        if x == u:
            return sort_diags(self.forward_lcs(df, kf) + self.backward_lcs(db, kb))

        if u > 0 and ok(df - 1, u - 1 - v) and self.vf.get(df - 1, u - 1 - v) == u - 1:
            return sort_diags(self.forward_lcs(df - 1, u - 1 - v) + self.backward_lcs(db, kb))

        if v > 0 and ok(df - 1, u - (v - 1)) and self.vf.get(df - 1, u - (v - 1)) == u:
            return sort_diags(self.forward_lcs(df - 1, u - (v - 1)) + self.backward_lcs(db, kb))

        if u == 0 or v == 0 or x == self.ux or y == self.uy:
            if u == 0 or v == 0:
                return self.backward_lcs(db, kb)
            return self.forward_lcs(df, kf)

        kb1 = x + 1 - y - self.delta
        if x + 1 <= self.ux and ok(db - 1, kb1) and self.vb.get(db - 1, kb1) == x + 1:
            return sort_diags(self.backward_lcs(db - 1, kb + 1) + self.forward_lcs(df, kf))

        kb1 = x - (y + 1) - self.delta
        if y + 1 <= self.uy and ok(db - 1, kb1) and self.vb.get(db - 1, kb1) == x:
            return sort_diags(self.backward_lcs(db - 1, kb - 1) + self.forward_lcs(df, kf))

        # Unlikely: rerun the forward search in the rectangle left of the meeting point.
        lcs = self.backward_lcs(db, kb)
        oldx, oldy = self.ux, self.uy
        self.ux, self.uy = u, v
        lcs = lcs + forward(self)
        self.ux, self.uy = oldx, oldy
        return sort_diags(lcs)


def forward(e: EditGraph) -> list[Diag]:
    """Myers' forward search, approximate once the limit is reached."""
    e.set_forward(0, 0, e.lx)
    done, ans = e.fdone(0, 0)
    if done:
        return ans

    for d in range(e.limit):
        e.set_forward(d + 1, -(d + 1), e.get_forward(d, -d))
        done, ans = e.fdone(d + 1, -(d + 1))
        if done:
            return ans
        e.set_forward(d + 1, d + 1, e.get_forward(d, d) + 1)
        done, ans = e.fdone(d + 1, d + 1)
        if done:
            return ans
        for k in range(-d + 1, d, 2):
            lookv = e.look_forward(k, e.get_forward(d, k - 1) + 1)
            lookh = e.look_forward(k, e.get_forward(d, k + 1))
            e.set_forward(d + 1, k, lookv if lookv > lookh else lookh)
            done, ans = e.fdone(d + 1, k)
            if done:
                return ans

    return e.forward_lcs(e.limit, e._best_forward())


def backward(e: EditGraph) -> list[Diag]:
    """Myers' backward search, approximate once the limit is reached."""
    e.set_backward(0, 0, e.ux)
    done, ans = e.bdone(0, 0)
    if done:
        return ans

    for d in range(e.limit):
        e.set_backward(d + 1, -(d + 1), e.get_backward(d, -d) - 1)
        done, ans = e.bdone(d + 1, -(d + 1))
        if done:
            return ans
        e.set_backward(d + 1, d + 1, e.get_backward(d, d))
        done, ans = e.bdone(d + 1, d + 1)
        if done:
            return ans
        for k in range(-d + 1, d, 2):
            lookv = e.look_backward(k, e.get_backward(d, k - 1))
            lookh = e.look_backward(k, e.get_backward(d, k + 1) - 1)
            e.set_backward(d + 1, k, lookv if lookv < lookh else lookh)
            done, ans = e.bdone(d + 1, k)
            if done:
                return ans

    kmax = e._best_backward()
    if kmax < -e.limit:
        return []
    return e.backward_lcs(e.limit, kmax)


def two_sided(e: EditGraph) -> list[Diag]:
    """
    Run the forward and backward searches until they meet.

    When the limit is reached first, the best forward and backward partial
    paths are combined and made consistent with fix().
    """
    e.set_forward(0, 0, e.lx)
    e.set_backward(0, 0, e.ux)

    for d in range(e.limit):
        kf, done = e.two_done(d, d)
        if done:
            return e.two_lcs(d, d, kf)
        e._forward_step(d)
        kf, done = e.two_done(d + 1, d)
        if done:
            return e.two_lcs(d + 1, d, kf)
        e._backward_step(d)

    lcs: list[Diag] = []
    kmax = e._best_forward()
    if kmax >= -e.limit:
        lcs = e.forward_lcs(e.limit, kmax)
    kmax = e._best_backward()
    if kmax >= -e.limit:
        lcs = lcs + e.backward_lcs(e.limit, kmax)
    return fix(lcs)


Algorithm = Callable[[EditGraph], list]


def compute(a: Sequence, b: Sequence, algo: Algorithm = two_sided, limit: int = MAX_DIFFS // 2) -> tuple[list[Edit], list[Diag]]:
    """
    Compute the edits turning a into b.

    Args:
        a: The sequence before
        b: The sequence after
        algo: Search algorithm: forward, backward or two_sided
        limit: Maximal number of edit steps to search, <= 0 for no limit

    Returns:
        Tuple of (edits, longest common subsequence as diagonals)
    """
    if limit <= 0:
        limit = _INFINITY
    e = EditGraph(a, b, limit)
    lcs = algo(e)
    return to_edits(lcs, len(a), len(b)), lcs


def _diff(a: Sequence, b: Sequence) -> list[Edit]:
    edits, _ = compute(a, b, two_sided, MAX_DIFFS // 2)
    return edits


def diff_strings(a: str, b: str) -> list[Edit]:
    """Edits between two strings, offsets index characters."""
    return _diff(a, b)


def diff_bytes(a: bytes, b: bytes) -> list[Edit]:
    """Edits between two byte strings."""
    return _diff(a, b)


def diff_runes(a: Sequence[str], b: Sequence[str]) -> list[Edit]:
    """Edits between two sequences of characters."""
    return _diff(list(a), list(b))


def diff_lines(a: Sequence[str], b: Sequence[str]) -> list[Edit]:
    """Edits between two sequences of lines, offsets index lines."""
    return _diff(list(a), list(b))


def apply_edits(a: Sequence, b: Sequence, edits: list[Edit]) -> list:
    """
    Apply edits to a, taking replacements from b.

    Returns:
        The edited sequence as a list
    """
    result: list = []
    last = 0
    for edit in edits:
        result.extend(a[last:edit.start])
        result.extend(b[edit.repl_start:edit.repl_end])
        last = edit.end
    result.extend(a[last:])
    return result
