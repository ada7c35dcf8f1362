"""Command-line interface and high-level pipelines for the N-Queens tracer.

This module wires together configuration loading, single traced runs, and the
benchmark pipeline (sequential or parallel). It isolates I/O, argument
parsing, and progress reporting from the engines so that the rest of the
codebase remains easy to test programmatically.
"""
from __future__ import annotations

import argparse
import tempfile
from dataclasses import replace
from pathlib import Path
from time import perf_counter
from typing import List, Optional, Tuple

from . import settings
from .experiments import raise_on_problems, run_experiments, run_experiments_parallel
from .plots import plot_and_save, plot_conflict_trend
from .reporting import save_raw_data_to_csv, save_results_to_csv
from config_manager import ConfigManager
from nqueens_trace import utils
from nqueens_trace.audit import audit_backtracking_trace, audit_hill_climbing_trace
from nqueens_trace.backtracking import bt_nqueens_trace
from nqueens_trace.hill_climbing import HCConfig, hc_nqueens_trace
from nqueens_trace.types import SolveResult
from nqueens_trace.utils import conflict_count, render_board, step_to_board


# ------------- Utils --------------------------------------------------------

# Boards up to this size are also printed as ASCII grids
_ASCII_BOARD_LIMIT = 20


def parse_algorithm_filters(alg_args: Optional[List[str]]):
    """Normalize algorithm filter CLI inputs into a list of labels.

    Accepts repeated flags and comma-separated lists. Valid values: BT, HC.
    Returns None when no filter is provided (meaning all are enabled).
    """
    if not alg_args:
        return None
    selected: List[str] = []
    valid = {"BT", "HC"}
    for entry in alg_args:
        for token in entry.split(","):
            token = token.strip().upper()
            if token:
                if token not in valid:
                    raise ValueError(f"Unknown algorithm '{token}'. Allowed: BT, HC")
                selected.append(token)
    unique = list(dict.fromkeys(selected))  # preserve order, remove dups
    return unique or None


def current_hc_config() -> HCConfig:
    """Build an ``HCConfig`` from the active ``settings`` values."""
    return HCConfig(
        max_restarts=settings.HC_MAX_RESTARTS,
        allow_sideways=settings.HC_ALLOW_SIDEWAYS,
        max_steps_per_restart=settings.HC_MAX_STEPS_PER_RESTART,
        sideways_limit=settings.HC_SIDEWAYS_LIMIT,
        cycle_window_size=settings.HC_CYCLE_WINDOW_SIZE,
    )


def apply_configuration(config_path: str) -> Tuple[ConfigManager, HCConfig]:
    """Load configuration and apply it to ``settings`` in place.

    Returns the ``ConfigManager`` used and the effective ``HCConfig``.
    """
    config_mgr = ConfigManager(config_path)

    experiment_settings = config_mgr.get_experiment_settings()
    if experiment_settings:
        settings.N_VALUES = [int(n) for n in experiment_settings.get("N_values", settings.N_VALUES)]
        settings.RUNS_HC_FINAL = int(experiment_settings.get("runs_hc_final", settings.RUNS_HC_FINAL))
        settings.BASE_SEED = int(experiment_settings.get("base_seed", settings.BASE_SEED))
        settings.OUT_DIR = experiment_settings.get("output_dir", settings.OUT_DIR)

    timeout_settings = config_mgr.get_timeout_settings()
    if timeout_settings:
        settings.set_timeouts(
            bt_timeout=timeout_settings.get("bt_timeout", settings.BT_TIME_LIMIT),
            hc_timeout=timeout_settings.get("hc_timeout", settings.HC_TIME_LIMIT),
        )

    hc_settings = config_mgr.get_hill_climbing_settings()
    if hc_settings:
        settings.HC_MAX_RESTARTS = int(hc_settings.get("max_restarts", settings.HC_MAX_RESTARTS))
        settings.HC_ALLOW_SIDEWAYS = bool(hc_settings.get("allow_sideways", settings.HC_ALLOW_SIDEWAYS))
        settings.HC_MAX_STEPS_PER_RESTART = int(hc_settings.get("max_steps_per_restart", settings.HC_MAX_STEPS_PER_RESTART))
        settings.HC_SIDEWAYS_LIMIT = int(hc_settings.get("sideways_limit", settings.HC_SIDEWAYS_LIMIT))
        settings.HC_CYCLE_WINDOW_SIZE = int(hc_settings.get("cycle_window_size", settings.HC_CYCLE_WINDOW_SIZE))

    settings.MAX_BOARD_SIZE = int(config_mgr.get_max_board_size(settings.MAX_BOARD_SIZE))
    utils.MAX_BOARD_SIZE = settings.MAX_BOARD_SIZE

    return config_mgr, current_hc_config()


def describe_result(label: str, size: int, result: SolveResult) -> None:
    """Print a short human-readable summary of one run."""
    metrics = result.metrics
    print(f"[{label}] N={size} status={metrics.status.value} success={metrics.success}")
    print(f"  runtime={metrics.runtime_ms:.2f}ms steps={metrics.steps_count} visited={metrics.visited_states}")
    if label == "BT":
        print(f"  backtracks={metrics.backtracks} max_depth={metrics.max_depth}")
    else:
        reason = metrics.failure_reason.value if metrics.failure_reason else "-"
        print(f"  restarts={metrics.restarts} failure_reason={reason} trend_len={len(metrics.conflict_trend)}")
    final = result.final_step
    if final:
        print(f"  final board (col -> row): {step_to_board(final, size)} conflicts={conflict_count(final)}")
        if size <= _ASCII_BOARD_LIMIT:
            print(render_board(final, size))


# ------------- Pipelines ----------------------------------------------------

def main_solve(
    size: int,
    algorithms: Optional[List[str]],
    hc_config: HCConfig,
    seed: Optional[int],
    validate: bool = False,
    plot: bool = False,
) -> None:
    """Run one traced search per selected engine and report its metrics."""
    for label in algorithms or ["BT", "HC"]:
        if label == "BT":
            result = bt_nqueens_trace(size, time_limit=settings.BT_TIME_LIMIT)
            if validate:
                raise_on_problems(audit_backtracking_trace(result, size), f"BT N={size}")
        else:
            result = hc_nqueens_trace(size, hc_config, seed=seed, time_limit=settings.HC_TIME_LIMIT)
            if validate:
                raise_on_problems(audit_hill_climbing_trace(result, size), f"HC N={size}")
            if plot:
                plot_conflict_trend(result, settings.OUT_DIR, size)
        describe_result(label, size, result)


def main_bench(
    mode: str,
    algorithms: Optional[List[str]],
    hc_config: HCConfig,
    validate: bool = False,
) -> None:
    """Run the benchmark batches, export CSVs and charts."""
    include_bt = algorithms is None or "BT" in algorithms
    include_hc = algorithms is None or "HC" in algorithms
    start = perf_counter()

    runner = run_experiments_parallel if mode == "parallel" else run_experiments
    if mode == "parallel":
        print(f"\nStarting parallel pipeline with {settings.NUM_PROCESSES} worker processes")

    results = runner(
        settings.N_VALUES,
        runs_hc=settings.RUNS_HC_FINAL,
        hc_config=hc_config,
        base_seed=settings.BASE_SEED,
        bt_time_limit=settings.BT_TIME_LIMIT,
        hc_time_limit=settings.HC_TIME_LIMIT,
        progress_label=f"Benchmark ({mode})",
        validate=validate,
        include_bt=include_bt,
        include_hc=include_hc,
        max_size=settings.MAX_BOARD_SIZE,
    )

    print("Generating charts and CSV reports...")
    save_results_to_csv(results, settings.N_VALUES, settings.OUT_DIR)
    if include_hc:
        save_raw_data_to_csv(results, settings.N_VALUES, settings.OUT_DIR)
    plot_and_save(results, settings.N_VALUES, settings.OUT_DIR)

    total_time = perf_counter() - start
    print(f"\nBenchmark completed in {total_time:.1f}s")


# ------------- Quick regression -------------------------------------------

def run_quick_regression_tests() -> None:
    """Execute a fast, deterministic smoke test for BT/HC at N=8.

    Verifies that:
    - Backtracking finds a valid solution and its trace passes the audit.
    - Hill climbing succeeds under a fixed seed and its trace passes the audit.
    - The benchmark pipeline produces a non-empty CSV in a temporary folder.
    """
    print("Running quick regression tests (N=8) for both engines...")

    bt = bt_nqueens_trace(8, time_limit=5.0)
    if not bt.metrics.success:
        raise AssertionError("Backtracking failed to find a solution for N=8.")
    raise_on_problems(audit_backtracking_trace(bt, 8), "BT N=8")
    print(f"  [BT] solution found, steps={bt.metrics.steps_count}, backtracks={bt.metrics.backtracks}")

    hc = hc_nqueens_trace(8, HCConfig(), seed=42, time_limit=5.0)
    if not hc.metrics.success:
        raise AssertionError("Hill climbing did not succeed for N=8 with deterministic seed.")
    raise_on_problems(audit_hill_climbing_trace(hc, 8), "HC N=8")
    print(f"  [HC] solution found, restarts={hc.metrics.restarts}, evals={hc.metrics.visited_states}")

    results = run_experiments(
        [8],
        runs_hc=3,
        base_seed=42,
        bt_time_limit=5.0,
        hc_time_limit=5.0,
        progress_label="Quick regression experiments",
        validate=True,
    )

    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(save_results_to_csv(results, [8], tmpdir))
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Results CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser():
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Traced N-Queens search: single runs and benchmarks.")
    parser.add_argument("--config", default=None, help="Path to configuration file (e.g. config.json). Defaults are used when omitted.")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests (N=8) and exit.")
    parser.add_argument("--validate", action="store_true", help="Audit every trace against its metrics (extra assertions).")
    parser.add_argument(
        "--alg",
        "-a",
        action="append",
        help="Filter engines to execute: BT, HC (comma-separated or multiple flags). Default: both.",
    )
    sub = parser.add_subparsers(dest="command")

    solve = sub.add_parser("solve", help="Run one traced search and print its metrics.")
    solve.add_argument("n", type=int, help="Board size N.")
    solve.add_argument("--seed", type=int, default=None, help="Seed for the hill-climbing random source.")
    solve.add_argument("--max-restarts", type=int, default=None)
    solve.add_argument("--no-sideways", action="store_true", help="Disable sideways (equal-score) moves.")
    solve.add_argument("--plot", action="store_true", help="Save the hill-climbing conflict trend chart.")

    bench = sub.add_parser("bench", help="Run the benchmark over the configured N values.")
    bench.add_argument(
        "--mode",
        choices=["sequential", "parallel"],
        default="parallel",
        help="Execution mode for hill-climbing batches (default: parallel).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to the chosen pipeline."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.quick_test:
        run_quick_regression_tests()
        return

    try:
        alg_filter = parse_algorithm_filters(args.alg)
        if args.config:
            _, hc_config = apply_configuration(args.config)
        else:
            hc_config = current_hc_config()
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc

    try:
        if args.command == "solve":
            overrides = {}
            if args.max_restarts is not None:
                overrides["max_restarts"] = args.max_restarts
            if args.no_sideways:
                overrides["allow_sideways"] = False
            if overrides:
                hc_config = replace(hc_config, **overrides)
            main_solve(args.n, alg_filter, hc_config, args.seed, validate=args.validate, plot=args.plot)
        elif args.command == "bench":
            main_bench(args.mode, alg_filter, hc_config, validate=args.validate)
        else:
            parser.print_help()
    except KeyboardInterrupt:
        print("\nExecution interrupted by user. Cleaning up workers...")
        raise SystemExit(130) from None
    except ValueError as exc:
        print(f"Execution error: {exc}")
        raise SystemExit(1) from exc
