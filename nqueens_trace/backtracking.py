"""Traced depth-first backtracking for the N-Queens problem.

Entry point
-----------
- bt_nqueens_trace(size, time_limit=None, cancel=None): place one queen per
    row, rows in order 0..N-1, columns tried 0..N-1 within a row, and record
    every placement and every retraction as a board snapshot.

The result is a ``SolveResult`` whose trace replays the search exactly: two
consecutive steps always differ by a single queen added or removed.

Implementation overview
-----------------------
- State: ``queens`` is the list of placed ``(row, col)`` positions; its length
    is the current row. It doubles as the explicit DFS stack, so the search is
    iterative and unaffected by Python's recursion limit.
- Constraint tracking: an ``Occupancy`` instance holds the column, diagonal
    (``row+col``) and anti-diagonal (``row-col+N-1``) masks, allocated once per
    call and mutated in place. Snapshots are copied into tuples only when a
    step is recorded.
- Backtracking: when a row has no legal column left, the previous queen is
    removed, the shorter state is recorded, and scanning resumes at the next
    column of the previous row.

Contract (public API)
---------------------
- Input: ``1 <= size <= MAX_BOARD_SIZE``; otherwise ``InvalidInput`` is raised
    and nothing is recorded.
- Output: ``SolveResult(trace, metrics)``.
    - ``metrics.success`` is True once all N rows hold a queen.
    - ``metrics.status`` is ``SOLVED``, ``NO_SOLUTION`` (N in {2, 3}: the full
      dead-end exploration is in the trace), or ``CANCELLED``/``TIMEOUT``.
    - ``metrics.backtracks`` counts removals; ``metrics.max_depth`` is the
      deepest row index reached (equal to the largest step size);
      ``metrics.visited_states`` equals the trace length.
- Determinism: results are deterministic for equal inputs and the solution is
    the first one in increasing column order (N=4 gives
    ``[(0, 1), (1, 3), (2, 0), (3, 2)]``).
"""

from __future__ import annotations

from time import perf_counter
from typing import List, Optional

from .types import Metrics, Position, RunStatus, SolveResult, Trace
from .utils import Occupancy, abort_status, validate_size


def bt_nqueens_trace(
    size: int,
    time_limit: Optional[float] = None,
    cancel=None,
    max_size: Optional[int] = None,
) -> SolveResult:
    """Find the first solution via traced iterative backtracking.

    Parameters
    ----------
    size : int
        Board dimension N (N >= 1).
    time_limit : float | None
        Optional wall-clock time limit in seconds.
    cancel : object | None
        Optional cancellation flag exposing ``is_set()``; checked once per row
        attempt.
    max_size : int | None
        Board size limit; defaults to ``utils.MAX_BOARD_SIZE``.

    Returns
    -------
    SolveResult
        Trace of every placement and removal plus structural metrics.
    """
    validate_size(size, max_size)

    occupancy = Occupancy(size)
    queens: List[Position] = []
    trace: Trace = []
    backtracks = 0
    max_depth = 0

    row = 0
    column = 0
    start = perf_counter()

    while True:
        status = abort_status(start, perf_counter(), time_limit, cancel)
        if status is not None:
            break

        if row == size:
            status = RunStatus.SOLVED
            break

        placed = False
        while column < size:
            if occupancy.is_free(row, column):
                occupancy.place(row, column)
                queens.append((row, column))
                trace.append(tuple(queens))
                placed = True
                break
            column += 1

        if placed:
            # Descend and restart column scanning on the next row.
            row += 1
            max_depth = max(max_depth, row)
            column = 0
            continue

        if row == 0:
            status = RunStatus.NO_SOLUTION
            break

        # Row exhausted; retract the previous queen and try its next column.
        row -= 1
        previous_row, previous_column = queens.pop()
        occupancy.remove(previous_row, previous_column)
        backtracks += 1
        trace.append(tuple(queens))
        column = previous_column + 1

    elapsed_ms = (perf_counter() - start) * 1000.0
    metrics = Metrics(
        runtime_ms=elapsed_ms,
        steps_count=len(trace),
        visited_states=len(trace),
        success=status is RunStatus.SOLVED,
        status=status,
        backtracks=backtracks,
        max_depth=max_depth,
    )
    return SolveResult(trace=trace, metrics=metrics)
