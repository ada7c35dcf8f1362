"""Shared result vocabulary for the N-Queens search engines.

Both engines return a ``SolveResult`` made of a ``trace`` (ordered list of
immutable board snapshots) and a ``Metrics`` value object. The shapes here are
plain so that consumers (UI replay, benchmark harness, tests) can
read them without importing engine internals.

Representation
--------------
- ``Position`` is a ``(row, col)`` tuple.
- ``Step`` is a tuple of positions; tuples are immutable, so every recorded
  snapshot is an independent value that later search moves cannot alter.
- ``Trace`` is a list of steps, append-only while a run is in progress.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

Position = Tuple[int, int]
Step = Tuple[Position, ...]
Trace = List[Step]


class InvalidInput(ValueError):
    """Raised when a board size or engine configuration is out of range."""


class FailureReason(str, Enum):
    """Why the final hill-climbing restart stopped without a solution."""

    PLATEAU = "plateau"
    CYCLE = "cycle"
    STUCK = "stuck"


class RunStatus(str, Enum):
    """Overall outcome of a single engine invocation."""

    SOLVED = "solved"
    NO_SOLUTION = "no_solution"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Metrics:
    """Run summary finalized once per invocation.

    Attributes
    ----------
    runtime_ms : float
        Wall-clock duration of the whole call in milliseconds.
    steps_count : int
        Length of the trace.
    visited_states : int
        Backtracking: trace length. Hill climbing: neighbor evaluations
        accumulated across all restarts.
    conflict_trend : tuple[int, ...]
        Conflict count of each accepted hill-climbing state, concatenated
        across restarts. Empty for backtracking.
    success : bool
        True when a conflict-free full placement was reached.
    status : RunStatus
        Finer-grained outcome, distinguishes no-solution from exhausted budget
        and aborted runs.
    backtracks, max_depth : int
        Backtracking counters (0 for hill climbing).
    restarts : int
        Failed hill-climbing attempts preceding success or exhaustion.
    failure_reason : FailureReason | None
        Set only for an exhausted hill-climbing run.
    """

    runtime_ms: float
    steps_count: int
    visited_states: int
    success: bool
    status: RunStatus
    conflict_trend: Tuple[int, ...] = ()
    backtracks: int = 0
    max_depth: int = 0
    restarts: int = 0
    failure_reason: Optional[FailureReason] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly mapping using consumer-facing key names."""
        return {
            "runtimeMs": self.runtime_ms,
            "stepsCount": self.steps_count,
            "visitedStates": self.visited_states,
            "conflictTrend": list(self.conflict_trend),
            "success": self.success,
            "status": self.status.value,
            "restarts": self.restarts,
            "backtracks": self.backtracks,
            "maxDepth": self.max_depth,
            "failureReason": self.failure_reason.value if self.failure_reason else None,
        }


@dataclass(frozen=True)
class SolveResult:
    """Engine output: the replayable trace and its metrics."""

    trace: Trace
    metrics: Metrics

    @property
    def final_step(self) -> Step:
        """Last recorded snapshot, or an empty step for an empty trace."""
        return self.trace[-1] if self.trace else ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "steps": [[list(position) for position in step] for step in self.trace],
            "metrics": self.metrics.to_dict(),
        }
