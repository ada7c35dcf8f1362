"""Board and conflict primitives shared by both search engines.

Two encodings are used across the project:

- a collection of ``(row, col)`` positions, which is what the engines record
  in their traces and what ``conflict_count`` audits;
- the column encoding ``board[col] = row`` used internally by hill climbing,
  scored by ``board_conflicts``.

Column collisions are never counted: both engines keep at most one queen per
column by construction. A conflict is a pair of queens sharing a row or lying
on the same diagonal (``|drow| == |dcol|``).
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional, Sequence

from .types import InvalidInput, Position, RunStatus, Step

# Upper bound on N accepted by the engines; overridable via settings/config.
MAX_BOARD_SIZE = 200


def validate_size(size: int, max_size: Optional[int] = None) -> int:
    """Return ``size`` unchanged or raise ``InvalidInput``.

    ``bool`` is rejected even though it subclasses ``int``.
    """
    limit = MAX_BOARD_SIZE if max_size is None else max_size
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidInput(f"Board size must be an integer, got {size!r}")
    if size < 1:
        raise InvalidInput(f"Board size must be >= 1, got {size}")
    if size > limit:
        raise InvalidInput(f"Board size {size} exceeds the supported maximum of {limit}")
    return size


def conflict_count(state: Iterable[Position]) -> int:
    """Count attacking pairs (shared row or diagonal) in O(N^2).

    Works on any collection of positions and does not assume the
    one-queen-per-column invariant, so it can audit arbitrary snapshots.
    """
    queens = list(state)
    count = 0
    for i in range(len(queens)):
        r1, c1 = queens[i]
        for j in range(i + 1, len(queens)):
            r2, c2 = queens[j]
            if r1 == r2 or abs(r1 - r2) == abs(c1 - c2):
                count += 1
    return count


def board_conflicts(board: Sequence[int]) -> int:
    """Count attacking pairs for ``board[col] = row`` in O(N).

    Counts occurrences per row and per diagonal with hash maps, then sums
    ``k*(k-1)/2`` over every bucket holding ``k > 1`` queens.
    """
    row_count: Counter[int] = Counter()
    diag1: Counter[int] = Counter()
    diag2: Counter[int] = Counter()

    for column, row in enumerate(board):
        row_count[row] += 1
        diag1[row - column] += 1
        diag2[row + column] += 1

    def _pairs(counter: Counter[int]) -> int:
        total = 0
        for count in counter.values():
            if count > 1:
                total += count * (count - 1) // 2
        return total

    return _pairs(row_count) + _pairs(diag1) + _pairs(diag2)


def board_to_step(board: Sequence[int]) -> Step:
    """Snapshot a column-encoded board as an immutable tuple of positions."""
    return tuple((row, column) for column, row in enumerate(board))


def step_to_board(step: Step, size: int) -> List[int]:
    """Inverse of ``board_to_step``; unfilled columns are ``-1``."""
    board = [-1] * size
    for row, column in step:
        board[column] = row
    return board


def render_board(step: Step, size: int) -> str:
    """Render a snapshot as text rows, 'Q' for a queen and '.' for an empty cell."""
    occupied = set(step)
    rows = []
    for row in range(size):
        rows.append(" ".join("Q" if (row, column) in occupied else "." for column in range(size)))
    return "\n".join(rows)


def is_valid_solution(board: Sequence[int]) -> bool:
    """Return True if ``board[col] = row`` is a complete, attack-free placement.

    Contract
    - Input: sequence of length N (0-based rows)
    - Valid if: all 0 <= row < N and no pair of queens attacks another
    """
    n = len(board)
    if n == 0:
        return False
    for row in board:
        if isinstance(row, bool) or not isinstance(row, int):
            return False
        if row < 0 or row >= n:
            return False
    return board_conflicts(board) == 0


class Occupancy:
    """O(1) column and diagonal membership tracking for backtracking.

    Arrays are allocated once per search and mutated in place:

    - ``columns[col]``
    - ``diagonals[row + col]`` (range ``[0, 2N-2]``)
    - ``anti_diagonals[row - col + N - 1]`` (range ``[0, 2N-2]``)
    """

    __slots__ = ("size", "columns", "diagonals", "anti_diagonals")

    def __init__(self, size: int):
        self.size = size
        self.columns = [False] * size
        self.diagonals = [False] * (2 * size - 1)
        self.anti_diagonals = [False] * (2 * size - 1)

    def column_occupied(self, col: int) -> bool:
        return self.columns[col]

    def diagonal_occupied(self, row: int, col: int) -> bool:
        return self.diagonals[row + col]

    def anti_diagonal_occupied(self, row: int, col: int) -> bool:
        return self.anti_diagonals[row - col + self.size - 1]

    def is_free(self, row: int, col: int) -> bool:
        return not (
            self.columns[col]
            or self.diagonals[row + col]
            or self.anti_diagonals[row - col + self.size - 1]
        )

    def _mark(self, row: int, col: int, value: bool) -> None:
        self.columns[col] = value
        self.diagonals[row + col] = value
        self.anti_diagonals[row - col + self.size - 1] = value

    def place(self, row: int, col: int) -> None:
        self._mark(row, col, True)

    def remove(self, row: int, col: int) -> None:
        self._mark(row, col, False)


def abort_status(start: float, now: float, time_limit: Optional[float], cancel) -> Optional[RunStatus]:
    """Return the status to stop with, or None to keep searching.

    ``cancel`` is any object exposing ``is_set()`` (e.g. ``threading.Event``);
    it takes precedence over the time limit.
    """
    if cancel is not None and cancel.is_set():
        return RunStatus.CANCELLED
    if time_limit is not None and (now - start) > time_limit:
        return RunStatus.TIMEOUT
    return None
