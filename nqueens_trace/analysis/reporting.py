"""CSV export utilities for experiment outputs (aggregates and raw runs).

These helpers materialize concise per-N summaries as well as full per-run raw
data for downstream analysis or spreadsheet inspection. Column names follow
lowercase snake_case with subsystem prefixes (``bt_*``, ``hc_*``).
"""
from __future__ import annotations

import csv
import os
from typing import List

from . import settings
from .stats import ExperimentResults

_FAILURE_REASONS = ("plateau", "cycle", "stuck")


def save_results_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write compact per-N aggregate metrics for BT/HC to CSV.

    Returns the path of the written file.
    """
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"results{settings.filename_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "bt_solution_found",
            "bt_status",
            "bt_steps",
            "bt_backtracks",
            "bt_max_depth",
            "bt_time_seconds",
            "hc_success_rate",
            "hc_timeout_rate",
            "hc_failure_rate",
            "hc_total_runs",
            "hc_success_steps_mean",
            "hc_success_evals_mean",
            "hc_success_restarts_mean",
            "hc_success_time_mean",
            "hc_success_time_median",
            "hc_failure_final_conflicts_mean",
            *(f"hc_failures_{reason}" for reason in _FAILURE_REASONS),
        ])

        for N in N_values:
            bt = results.get("BT", {}).get(N)
            hc = results.get("HC", {}).get(N, {})
            reasons = hc.get("failure_reasons", {})
            writer.writerow([
                N,
                int(bt["solution_found"]) if bt else "",
                bt["status"] if bt else "",
                bt["steps"] if bt else "",
                bt["backtracks"] if bt else "",
                bt["max_depth"] if bt else "",
                bt["time"] if bt else "",
                hc.get("success_rate", 0.0),
                hc.get("timeout_rate", 0.0),
                hc.get("failure_rate", 0.0),
                hc.get("total_runs", 0),
                hc.get("success_steps", {}).get("mean", ""),
                hc.get("success_evals", {}).get("mean", ""),
                hc.get("success_restarts", {}).get("mean", ""),
                hc.get("success_time", {}).get("mean", ""),
                hc.get("success_time", {}).get("median", ""),
                hc.get("failure_final_conflicts", {}).get("mean", ""),
                *(reasons.get(reason, 0) for reason in _FAILURE_REASONS),
            ])

    print(f"CSV saved: {filename}")
    return filename


def save_raw_data_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write one row per hill-climbing run (long format)."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"raw_hc_runs{settings.filename_suffix()}.csv")
    fields = ["n", "seed", "success", "status", "steps", "evals", "restarts", "final_conflicts", "failure_reason", "time"]

    with open(filename, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fields, extrasaction="ignore")
        writer.writeheader()
        for N in N_values:
            for run in results.get("HC", {}).get(N, {}).get("raw_runs", []):
                row = dict(run)
                row["n"] = N
                row["success"] = int(run["success"])
                row["failure_reason"] = run["failure_reason"] or ""
                writer.writerow(row)

    print(f"Raw HC data saved: {filename}")
    return filename

