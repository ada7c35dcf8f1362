"""Typed result shapes and statistics helpers for the benchmark pipeline.

Defines ``TypedDict`` structures for experiment outputs and provides utilities
to compute aggregate statistics across per-run records.
"""
from __future__ import annotations

import statistics
from collections import Counter
from typing import Any, Dict, List, Optional, TypedDict

from ..types import SolveResult


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class BTEntry(TypedDict):
    solution_found: bool
    status: str
    steps: int
    backtracks: int
    max_depth: int
    time: float


class HCRecord(TypedDict):
    seed: int
    success: bool
    status: str
    steps: int
    evals: int
    restarts: int
    final_conflicts: int
    failure_reason: Optional[str]
    time: float
    timeout: bool


class HCResultEntry(TypedDict, total=False):
    success_rate: float
    timeout_rate: float
    failure_rate: float
    total_runs: int
    successes: int
    failures: int
    timeouts: int
    failure_reasons: Dict[str, int]
    success_steps: StatsSummary
    success_evals: StatsSummary
    success_restarts: StatsSummary
    success_time: StatsSummary
    failure_final_conflicts: StatsSummary
    all_steps: StatsSummary
    all_evals: StatsSummary
    all_restarts: StatsSummary
    all_time: StatsSummary
    raw_runs: List[HCRecord]


class ExperimentResults(TypedDict):
    BT: Dict[int, BTEntry]
    HC: Dict[int, HCResultEntry]


_METRICS = ["time", "steps", "evals", "restarts", "final_conflicts"]


class ProgressPrinter:
    """Minimal, stdout-only progress reporter for long-running loops.

    Parameters
    ----------
    total : int
        Total number of items expected. Values <= 0 are coerced to 1 to
        avoid division by zero when reporting percentages.
    label : str
        Short label printed in front of the progress counters.
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label

    def update(self, index: int, detail: str = "") -> None:
        """Print a single-line progress update to stdout."""
        percent = (index / self.total) * 100
        suffix = f" - {detail}" if detail else ""
        print(f"[{self.label}] {index}/{self.total} ({percent:.0f}%)" + suffix)


def bt_entry_from_result(result: SolveResult) -> BTEntry:
    """Flatten a backtracking result into a CSV/plot friendly record."""
    metrics = result.metrics
    return {
        "solution_found": metrics.success,
        "status": metrics.status.value,
        "steps": metrics.steps_count,
        "backtracks": metrics.backtracks,
        "max_depth": metrics.max_depth,
        "time": metrics.runtime_ms / 1000.0,
    }


def hc_record_from_result(result: SolveResult, seed: int) -> HCRecord:
    """Flatten a hill-climbing result into a per-run record."""
    metrics = result.metrics
    trend = metrics.conflict_trend
    return {
        "seed": seed,
        "success": metrics.success,
        "status": metrics.status.value,
        "steps": metrics.steps_count,
        "evals": metrics.visited_states,
        "restarts": metrics.restarts,
        "final_conflicts": trend[-1] if trend else 0,
        "failure_reason": metrics.failure_reason.value if metrics.failure_reason else None,
        "time": metrics.runtime_ms / 1000.0,
        "timeout": metrics.status.value == "timeout",
    }


def compute_detailed_statistics(values: List[float], label: str = "") -> StatsSummary:
    """Compute summary statistics for a numeric sequence.

    Parameters
    ----------
    values : List[float]
        Numeric values to summarize.
    label : str, optional
        Carried for debugging contexts; not used in calculations.

    Returns
    -------
    StatsSummary
        count, mean, median, std (population), min, max, q25, q75 and range.
        When ``values`` is empty, all numeric fields are ``None`` and
        ``count`` is 0 to keep CSV/plot generation consistent.
    """
    if not values:
        return {
            "count": 0,
            "mean": None,
            "median": None,
            "std": None,
            "min": None,
            "max": None,
            "q25": None,
            "q75": None,
            "range": None,
        }

    sorted_vals = sorted(values)
    n = len(values)

    min_val = min(values)
    max_val = max(values)
    q25 = sorted_vals[n // 4] if n >= 4 else min_val
    q75 = sorted_vals[3 * n // 4] if n >= 4 else max_val

    return {
        "count": n,
        "mean": statistics.mean(values),
        "median": statistics.median(values),
        "std": statistics.pstdev(values) if n > 1 else 0,
        "min": min_val,
        "max": max_val,
        "q25": q25,
        "q75": q75,
        "range": max_val - min_val,
    }


def compute_grouped_statistics(
    results_list: List[Dict[str, Any]], success_key: str = "success"
) -> Dict[str, Any]:
    """Aggregate metrics by outcome groups (success, failure, timeout).

    Returns rates (``success_rate``, ``timeout_rate``, ``failure_rate``),
    counters, a ``failure_reasons`` histogram, and ``<group>_<metric>``
    summaries for every metric present among
    ``["time", "steps", "evals", "restarts", "final_conflicts"]``.
    """
    successes = [r for r in results_list if r.get(success_key, False)]
    timeouts = [r for r in results_list if r.get("timeout", False)]
    failures = [r for r in results_list if not r.get(success_key, False) and not r.get("timeout", False)]
    total = len(results_list)

    stats: Dict[str, Any] = {
        "total_runs": total,
        "successes": len(successes),
        "failures": len(failures),
        "timeouts": len(timeouts),
        "success_rate": len(successes) / total if total else 0,
        "timeout_rate": len(timeouts) / total if total else 0,
        "failure_rate": len(failures) / total if total else 0,
        "failure_reasons": dict(Counter(r["failure_reason"] for r in failures if r.get("failure_reason"))),
    }

    for group, records in (("all", results_list), ("success", successes), ("timeout", timeouts), ("failure", failures)):
        for metric in _METRICS:
            if any(metric in r for r in records):
                values = [r[metric] for r in records if metric in r]
                stats[f"{group}_{metric}"] = compute_detailed_statistics(values, f"{group}_{metric}")

    return stats
