"""Visualization utilities for benchmark outputs.

Overview
--------
Plotting helpers that generate PNG charts from aggregated experiment results
and from single hill-climbing runs. The module degrades gracefully: if the
plotting stack (matplotlib/numpy, optionally seaborn) is unavailable, public
functions print a short message and return ``None`` so upstream pipelines can
continue.

Chart map
---------
- 01_success_rate_vs_N.png: BT solution found (0/1) and HC success rate vs N.
- 02_time_vs_N_log_scale.png: BT time and mean HC time of successful runs.
- 03_logical_cost_vs_N.png: BT trace length vs mean HC neighbor evaluations.
- 04_hc_failure_reasons_vs_N.png: stacked plateau/cycle/stuck counts per N.
- conflict_trend_N{N}.png: conflicts of every accepted HC state for one run,
    with dashed lines at restart boundaries.
"""
from __future__ import annotations

import os
from typing import Any, List, Optional, cast

from . import settings

try:
    import matplotlib.pyplot as plt  # type: ignore
    import numpy as np  # type: ignore
    _PLOTS_AVAILABLE = True
except Exception:
    plt = cast(Any, None)  # type: ignore
    np = cast(Any, None)  # type: ignore
    _PLOTS_AVAILABLE = False

try:
    import seaborn as sns  # type: ignore
except Exception:
    sns = None  # type: ignore

from .stats import ExperimentResults
from ..types import SolveResult

_REASONS = ("plateau", "cycle", "stuck")


def _apply_style() -> None:
    if sns is not None:
        sns.set_theme(style="whitegrid")


def _save(fname: str, label: str) -> str:
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved {label}: {fname}")
    return fname


def plot_comprehensive_analysis(results: ExperimentResults, N_values: List[int], out_dir: str) -> List[str]:
    """Generate the per-N comparison charts (01..04).

    Parameters
    ----------
    results : ExperimentResults
        Aggregated per-N summaries for BT/HC.
    N_values : List[int]
        Ordered list of N values to display on the x-axis.
    out_dir : str
        Destination directory; created if missing.

    Returns
    -------
    List[str]
        Paths of the written images (empty when plotting is unavailable).
    """
    if not _PLOTS_AVAILABLE:
        print("Plotting skipped: matplotlib not installed.")
        return []
    os.makedirs(out_dir, exist_ok=True)
    _apply_style()
    suffix = settings.filename_suffix()
    written: List[str] = []

    bt = [results.get("BT", {}).get(N) for N in N_values]
    hc = [results.get("HC", {}).get(N, {}) for N in N_values]
    has_bt = any(bt)
    has_hc = any(entry.get("total_runs", 0) > 0 for entry in hc)

    bt_sr = [1.0 if entry and entry["solution_found"] else 0.0 for entry in bt]
    hc_sr = [float(entry.get("success_rate", 0.0) or 0.0) for entry in hc]

    plt.figure(figsize=(10, 6))
    if has_bt:
        plt.plot(N_values, bt_sr, marker="o", linewidth=2, label="Backtracking")
    if has_hc:
        plt.plot(N_values, hc_sr, marker="s", linewidth=2, label="Hill climbing")
    plt.xlabel("N (board size)")
    plt.ylabel("Success rate")
    plt.title("Success Rate vs Problem Size")
    plt.ylim(-0.05, 1.05)
    plt.xticks(N_values)
    plt.legend()
    written.append(_save(os.path.join(out_dir, f"01_success_rate_vs_N{suffix}.png"), "success-rate chart"))

    bt_time = [max(entry["time"], 1e-6) if entry else 1e-6 for entry in bt]
    hc_time = [max(float(entry.get("success_time", {}).get("mean") or 0.0), 1e-6) for entry in hc]

    plt.figure(figsize=(10, 6))
    if has_bt:
        plt.semilogy(N_values, bt_time, marker="o", linewidth=2, label="Backtracking")
    if has_hc:
        plt.semilogy(N_values, hc_time, marker="s", linewidth=2, label="Hill climbing (successful runs)")
    plt.xlabel("N (board size)")
    plt.ylabel("Time [s] (log scale)")
    plt.title("Execution Time vs Problem Size")
    plt.xticks(N_values)
    plt.legend()
    written.append(_save(os.path.join(out_dir, f"02_time_vs_N_log_scale{suffix}.png"), "execution-time chart"))

    bt_steps = [max(entry["steps"], 1) if entry else 1 for entry in bt]
    hc_evals = [max(float(entry.get("all_evals", {}).get("mean") or 0.0), 1.0) for entry in hc]

    plt.figure(figsize=(10, 6))
    if has_bt:
        plt.semilogy(N_values, bt_steps, marker="o", linewidth=2, label="BT visited states")
    if has_hc:
        plt.semilogy(N_values, hc_evals, marker="s", linewidth=2, label="HC neighbor evaluations (mean)")
    plt.xlabel("N (board size)")
    plt.ylabel("Logical cost (log scale)")
    plt.title("Logical Cost vs Problem Size")
    plt.xticks(N_values)
    plt.legend()
    written.append(_save(os.path.join(out_dir, f"03_logical_cost_vs_N{suffix}.png"), "logical-cost chart"))

    if has_hc:
        positions = np.arange(len(N_values))
        bottom = np.zeros(len(N_values))
        plt.figure(figsize=(10, 6))
        for reason in _REASONS:
            counts = np.array([entry.get("failure_reasons", {}).get(reason, 0) for entry in hc], dtype=float)
            plt.bar(positions, counts, bottom=bottom, label=reason)
            bottom += counts
        plt.xticks(positions, [str(N) for N in N_values])
        plt.xlabel("N (board size)")
        plt.ylabel("Failed runs")
        plt.title("Hill-Climbing Failure Reasons")
        plt.legend()
        written.append(_save(os.path.join(out_dir, f"04_hc_failure_reasons_vs_N{suffix}.png"), "failure-reason chart"))

    return written


def plot_conflict_trend(result: SolveResult, out_dir: str, size: Optional[int] = None) -> Optional[str]:
    """Plot the conflict trend of one hill-climbing run.

    Restart boundaries (empty trace steps) are drawn as dashed vertical lines
    between the last state of one attempt and the first state of the next.
    """
    if not _PLOTS_AVAILABLE:
        print("Plotting skipped: matplotlib not installed.")
        return None
    trend = np.asarray(result.metrics.conflict_trend, dtype=float)
    if trend.size == 0:
        print("Plotting skipped: empty conflict trend.")
        return None
    os.makedirs(out_dir, exist_ok=True)
    _apply_style()

    boundaries: List[float] = []
    accepted = 0
    for step in result.trace:
        if step:
            accepted += 1
        elif accepted < trend.size:
            boundaries.append(accepted - 0.5)

    plt.figure(figsize=(12, 5))
    plt.plot(np.arange(trend.size), trend, linewidth=1.5, label="conflicts")
    for x in boundaries:
        plt.axvline(x, color="grey", linestyle="--", linewidth=0.8)
    plt.xlabel("Accepted state")
    plt.ylabel("Conflicting pairs")
    label = f"N={size}" if size else "hill climbing"
    plt.title(f"Conflict Trend ({label}, restarts={result.metrics.restarts})")
    plt.legend()
    name = f"conflict_trend_N{size}{settings.filename_suffix()}.png" if size else f"conflict_trend{settings.filename_suffix()}.png"
    return _save(os.path.join(out_dir, name), "conflict-trend chart")


def plot_and_save(results: ExperimentResults, N_values: List[int], out_dir: str) -> List[str]:
    """Convenience wrapper used by the CLI pipeline."""
    return plot_comprehensive_analysis(results, N_values, out_dir)
