"""Experiment runners for the backtracking (BT) and hill-climbing (HC) engines.

These routines execute repeatable batches of runs over a set of board sizes.
Backtracking is deterministic, so it runs once per N. Hill climbing runs
``runs_hc`` times per N, run ``i`` seeded with ``base_seed + i`` so that a
batch is reproducible in both the sequential and the parallel runner.

Outputs are structured dictionaries suitable for CSV export and plotting.
Validation hooks optionally audit every trace against its metrics.
"""
from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from . import settings
from .stats import (
    ExperimentResults,
    HCRecord,
    HCResultEntry,
    ProgressPrinter,
    bt_entry_from_result,
    compute_grouped_statistics,
    hc_record_from_result,
)
from ..audit import audit_backtracking_trace, audit_hill_climbing_trace
from .. import utils
from ..backtracking import bt_nqueens_trace
from ..hill_climbing import HCConfig, hc_nqueens_trace


# Reusable workers -----------------------------------------------------------

def run_single_hc_experiment(params: Tuple[int, Dict[str, Any], int, Optional[float], bool, int]) -> HCRecord:
    """Worker wrapper to invoke a single HC run (for parallel mapping).

    The board size limit travels in ``params`` because spawned workers
    re-import ``utils`` and would otherwise see its default.
    """
    N, config_fields, seed, time_limit, validate, max_size = params
    result = hc_nqueens_trace(N, HCConfig(**config_fields), seed=seed, time_limit=time_limit, max_size=max_size)
    if validate:
        raise_on_problems(audit_hill_climbing_trace(result, N), f"HC N={N} seed={seed}")
    return hc_record_from_result(result, seed)


def raise_on_problems(problems: List[str], context: str) -> None:
    """Raise ``AssertionError`` listing audit violations, if any."""
    if problems:
        raise AssertionError(f"{context} failed validation: " + "; ".join(problems))


def _hc_entry(runs: List[HCRecord]) -> HCResultEntry:
    """Shape grouped statistics into the per-N HC entry."""
    hc_stats = compute_grouped_statistics(list(runs), "success")
    entry: Any = {
        key: hc_stats[key]
        for key in (
            "success_rate",
            "timeout_rate",
            "failure_rate",
            "total_runs",
            "successes",
            "failures",
            "timeouts",
            "failure_reasons",
        )
    }
    for key in (
        "success_steps",
        "success_evals",
        "success_restarts",
        "success_time",
        "failure_final_conflicts",
        "all_steps",
        "all_evals",
        "all_restarts",
        "all_time",
    ):
        entry[key] = hc_stats.get(key, {})
    entry["raw_runs"] = list(runs)
    return entry


def _run_bt(N: int, bt_time_limit: Optional[float], validate: bool, max_size: int) -> Dict[str, Any]:
    result = bt_nqueens_trace(N, time_limit=bt_time_limit, max_size=max_size)
    if validate:
        raise_on_problems(audit_backtracking_trace(result, N), f"BT N={N}")
    return bt_entry_from_result(result)


# Sequential runner ----------------------------------------------------------

def run_experiments(
    N_values: List[int],
    runs_hc: int,
    hc_config: Optional[HCConfig] = None,
    base_seed: int = 0,
    bt_time_limit: Optional[float] = None,
    hc_time_limit: Optional[float] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
    include_bt: bool = True,
    include_hc: bool = True,
    max_size: Optional[int] = None,
) -> ExperimentResults:
    """Run the BT and HC batches sequentially for every N in ``N_values``.

    ``max_size`` defaults to the current ``utils.MAX_BOARD_SIZE``.
    """
    config = hc_config or HCConfig()
    limit = utils.MAX_BOARD_SIZE if max_size is None else max_size
    results: Any = {"BT": {}, "HC": {}}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None

    for index, N in enumerate(N_values, start=1):
        try:
            if progress:
                progress.update(index, f"N={N}")
            enabled = "+".join(name for name, flag in (("BT", include_bt), ("HC", include_hc)) if flag) or "NONE"
            print(f"=== (Final) N = {N}, {enabled} ===")

            if include_bt:
                results["BT"][N] = _run_bt(N, bt_time_limit, validate, limit)

            if include_hc:
                hc_runs: List[HCRecord] = []
                for run in range(runs_hc):
                    seed = base_seed + run
                    hc_runs.append(run_single_hc_experiment((N, asdict(config), seed, hc_time_limit, validate, limit)))
                results["HC"][N] = _hc_entry(hc_runs)
        except KeyboardInterrupt:
            print("\nInterrupted by user (sequential). Returning partial results...")
            break

    return results


# Parallel runner ------------------------------------------------------------

def run_experiments_parallel(
    N_values: List[int],
    runs_hc: int,
    hc_config: Optional[HCConfig] = None,
    base_seed: int = 0,
    bt_time_limit: Optional[float] = None,
    hc_time_limit: Optional[float] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
    include_bt: bool = True,
    include_hc: bool = True,
    workers: Optional[int] = None,
    max_size: Optional[int] = None,
    mp_context=None,
) -> ExperimentResults:
    """Parallel version of ``run_experiments`` using a process pool.

    Each HC run is an independent engine invocation with its own seed, so
    the records match the sequential runner for the same ``base_seed``
    (apart from wall-clock times).
    ``mp_context`` is passed to the executor to choose the start method.
    """
    config = hc_config or HCConfig()
    limit = utils.MAX_BOARD_SIZE if max_size is None else max_size
    results: Any = {"BT": {}, "HC": {}}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None
    max_workers = workers or settings.NUM_PROCESSES

    for index, N in enumerate(N_values, start=1):
        if progress:
            progress.update(index, f"N={N}")
        try:
            enabled = "+".join(name for name, flag in (("BT", include_bt), ("HC", include_hc)) if flag) or "NONE"
            print(f"=== (Final Parallel) N = {N}, {enabled} ===")

            if include_bt:
                results["BT"][N] = _run_bt(N, bt_time_limit, validate, limit)

            if include_hc:
                print(f"  Running {runs_hc} HC runs in parallel...")
                params = [
                    (N, asdict(config), base_seed + run, hc_time_limit, validate, limit)
                    for run in range(runs_hc)
                ]
                with ProcessPoolExecutor(max_workers=max_workers, mp_context=mp_context) as executor:
                    hc_runs = list(executor.map(run_single_hc_experiment, params))
                results["HC"][N] = _hc_entry(hc_runs)
        except KeyboardInterrupt:
            print("\nInterrupted by user (parallel). Returning partial results...")
            break

    return results
