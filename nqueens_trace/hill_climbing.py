"""Steepest-ascent hill climbing with random restarts for N-Queens.

The configuration is a length-N list ``board[col] = row``, so two queens never
share a column and only row and diagonal conflicts are scored. Each climbing
step evaluates every single-column move (``N*(N-1)`` neighbors) and adopts the
best one. Equal-score (sideways) moves are accepted when enabled, up to a
limit, to cross plateaus.

A restart stops when:
- the board reaches zero conflicts (success);
- every neighbor is strictly worse (``FailureReason.STUCK``);
- more than ``sideways_limit`` consecutive sideways moves were taken, or the
  per-restart step budget ran out (``FailureReason.PLATEAU``);
- the chosen state was already seen in the recent window
  (``FailureReason.CYCLE``).

Failed restarts append an empty step to the trace as a boundary marker and
the search starts over from a fresh random board, for at most
``max_restarts + 1`` attempts.

Cycle window
------------
Recently adopted states are kept in a set. When the set grows beyond
``cycle_window_size`` it is cleared and reseeded with the current state only.
This is an approximate recurrence detector: cycles whose period spans a reset
are not detected.

Determinism
-----------
Randomness only seeds the initial board of each restart and always comes from
the ``rng`` argument (a ``random.Random``) or from ``random.Random(seed)``;
the module-level generator is never touched. Equal seeds give identical
traces and metrics (apart from ``runtime_ms``).
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from time import perf_counter
from typing import List, Optional, Set, Tuple

from .types import FailureReason, InvalidInput, Metrics, RunStatus, SolveResult, Trace
from .utils import abort_status, board_conflicts, board_to_step, validate_size


@dataclass(frozen=True)
class HCConfig:
    """Hill-climbing knobs; all values have working defaults."""

    max_restarts: int = 100
    allow_sideways: bool = True
    max_steps_per_restart: int = 3000
    sideways_limit: int = 200
    cycle_window_size: int = 100

    def __post_init__(self) -> None:
        for name in ("max_restarts", "max_steps_per_restart", "sideways_limit"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidInput(f"{name} must be a non-negative integer, got {value!r}")
        if not isinstance(self.allow_sideways, bool):
            raise InvalidInput(f"allow_sideways must be a bool, got {self.allow_sideways!r}")
        if isinstance(self.cycle_window_size, bool) or not isinstance(self.cycle_window_size, int) or self.cycle_window_size < 1:
            raise InvalidInput(f"cycle_window_size must be a positive integer, got {self.cycle_window_size!r}")


@dataclass
class _RunState:
    """Mutable accumulators shared by all restarts of one invocation."""

    trace: Trace = field(default_factory=list)
    trend: List[int] = field(default_factory=list)
    visited: int = 0


def _random_board(size: int, rng: random.Random) -> List[int]:
    return [rng.randrange(size) for _ in range(size)]


def _best_neighbor(board: List[int], current: int, allow_sideways: bool, state: _RunState) -> Tuple[Optional[Tuple[int, int]], int]:
    """Scan all single-column moves and return ``(move, conflicts)``.

    ``move`` is ``(column, row)`` or None when no neighbor was accepted. A
    strictly lower score always replaces the running best; an equal score
    replaces it only with sideways moves enabled, so a strictly better
    neighbor later in the scan still wins over an earlier tie.
    """
    size = len(board)
    best_move: Optional[Tuple[int, int]] = None
    best_conflicts = current

    for column in range(size):
        original_row = board[column]
        for row in range(size):
            if row == original_row:
                continue
            board[column] = row
            candidate = board_conflicts(board)
            state.visited += 1
            if candidate < best_conflicts or (allow_sideways and candidate == best_conflicts):
                best_move = (column, row)
                best_conflicts = candidate
        board[column] = original_row

    return best_move, best_conflicts


def _climb_once(
    size: int,
    config: HCConfig,
    rng: random.Random,
    state: _RunState,
    start: float,
    time_limit: Optional[float],
    cancel,
) -> Tuple[bool, Optional[FailureReason], Optional[RunStatus]]:
    """Run a single restart; return ``(solved, failure_reason, abort_status)``."""
    board = _random_board(size, rng)
    current = board_conflicts(board)
    state.trace.append(board_to_step(board))
    state.trend.append(current)

    steps = 0
    sideways = 0
    recent: Set[Tuple[int, ...]] = set()

    while current > 0 and steps < config.max_steps_per_restart:
        status = abort_status(start, perf_counter(), time_limit, cancel)
        if status is not None:
            return False, None, status
        steps += 1

        move, best = _best_neighbor(board, current, config.allow_sideways, state)
        if move is None:
            return False, FailureReason.STUCK, None

        if best == current:
            sideways += 1
            if sideways > config.sideways_limit:
                return False, FailureReason.PLATEAU, None
        else:
            sideways = 0

        column, row = move
        candidate = board.copy()
        candidate[column] = row
        key = tuple(candidate)
        if key in recent:
            return False, FailureReason.CYCLE, None
        recent.add(key)
        if len(recent) > config.cycle_window_size:
            recent.clear()
            recent.add(key)

        board = candidate
        current = best
        state.trace.append(board_to_step(board))
        state.trend.append(current)

    if current == 0:
        return True, None, None
    # Step budget spent while still wandering: classify with plateaus.
    return False, FailureReason.PLATEAU, None


def hc_nqueens_trace(
    size: int,
    config: Optional[HCConfig] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    time_limit: Optional[float] = None,
    cancel=None,
    max_size: Optional[int] = None,
) -> SolveResult:
    """Run restart-driven steepest-ascent hill climbing and trace every move.

    Parameters
    ----------
    size : int
        Board dimension N (N >= 1).
    config : HCConfig | None
        Search knobs; defaults to ``HCConfig()``.
    rng : random.Random | None
        Random source for initial boards. Takes precedence over ``seed``.
    seed : int | None
        Used to build ``random.Random(seed)`` when ``rng`` is not given.
    time_limit : float | None
        Optional wall-clock time limit in seconds.
    cancel : object | None
        Optional cancellation flag exposing ``is_set()``; checked before each
        restart and each climbing step.
    max_size : int | None
        Board size limit; defaults to ``utils.MAX_BOARD_SIZE``.

    Returns
    -------
    SolveResult
        Trace of initial boards, accepted moves and empty restart markers,
        plus behavioral metrics. ``metrics.failure_reason`` is set iff the
        restart budget was exhausted.

    Raises
    ------
    InvalidInput
        For an out-of-range ``size`` or an invalid ``config``.
    """
    validate_size(size, max_size)
    if config is None:
        config = HCConfig()
    if rng is None:
        rng = random.Random(seed)

    state = _RunState()
    restarts = 0
    failure_reason: Optional[FailureReason] = None
    status: Optional[RunStatus] = None
    start = perf_counter()

    for _ in range(config.max_restarts + 1):
        status = abort_status(start, perf_counter(), time_limit, cancel)
        if status is not None:
            break
        solved, reason, status = _climb_once(size, config, rng, state, start, time_limit, cancel)
        if status is not None:
            break
        if solved:
            status = RunStatus.SOLVED
            failure_reason = None
            break
        failure_reason = reason
        restarts += 1
        state.trace.append(())
    else:
        status = RunStatus.EXHAUSTED

    if status is not RunStatus.EXHAUSTED:
        # Aborted and solved runs carry no exhaustion reason.
        failure_reason = None

    elapsed_ms = (perf_counter() - start) * 1000.0
    metrics = Metrics(
        runtime_ms=elapsed_ms,
        steps_count=len(state.trace),
        visited_states=state.visited,
        success=status is RunStatus.SOLVED,
        status=status,
        conflict_trend=tuple(state.trend),
        restarts=restarts,
        failure_reason=failure_reason,
    )
    return SolveResult(trace=state.trace, metrics=metrics)
