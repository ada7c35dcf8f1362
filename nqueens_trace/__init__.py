"""Traced N-Queens search engines."""

from typing import Any

from .backtracking import bt_nqueens_trace
from .hill_climbing import HCConfig, hc_nqueens_trace
from .types import FailureReason, InvalidInput, Metrics, Position, RunStatus, SolveResult, Step, Trace
from .utils import board_conflicts, conflict_count, is_valid_solution

ALGORITHMS = {
    "BT": bt_nqueens_trace,
    "HC": hc_nqueens_trace,
}


def solve(algorithm: str, size: int, **kwargs: Any) -> SolveResult:
    """Dispatch to an engine by label ("BT" or "HC")."""
    try:
        engine = ALGORITHMS[algorithm.upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown algorithm '{algorithm}'. Allowed: {', '.join(ALGORITHMS)}") from exc
    return engine(size, **kwargs)


__all__ = [
    "bt_nqueens_trace",
    "hc_nqueens_trace",
    "HCConfig",
    "solve",
    "ALGORITHMS",
    "conflict_count",
    "board_conflicts",
    "is_valid_solution",
    "FailureReason",
    "InvalidInput",
    "Metrics",
    "Position",
    "RunStatus",
    "SolveResult",
    "Step",
    "Trace",
]
