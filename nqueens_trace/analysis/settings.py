"""Global settings and timeouts for the benchmark pipeline.

This module centralizes tunable constants used across the orchestration code.
Values can be overridden at runtime via the configuration loader in
`nqueens_trace.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

import multiprocessing
from datetime import datetime
from typing import List, Optional

# Board sizes to evaluate (in ascending order) for scalability analysis
N_VALUES: List[int] = [4, 8, 12, 16, 20]

# Number of independent hill-climbing runs per N (one seed per run)
RUNS_HC_FINAL: int = 20

# Seed of the first hill-climbing run; run i uses BASE_SEED + i
BASE_SEED: int = 12345

# Hill-climbing defaults (mirrored by HCConfig)
HC_MAX_RESTARTS: int = 100
HC_ALLOW_SIDEWAYS: bool = True
HC_MAX_STEPS_PER_RESTART: int = 3000
HC_SIDEWAYS_LIMIT: int = 200
HC_CYCLE_WINDOW_SIZE: int = 100

# Largest board accepted by the engines
MAX_BOARD_SIZE: int = 200

# Backtracking time limit in seconds (None = no limit)
BT_TIME_LIMIT: Optional[float] = 60.0

# Hill-climbing time limit per run in seconds (None = no limit)
HC_TIME_LIMIT: Optional[float] = 60.0

# Output directory for CSV and charts
OUT_DIR: str = "results_nqueens_trace"

# Number of worker processes to use (leave one core for the OS)
NUM_PROCESSES: int = max(1, multiprocessing.cpu_count() - 1)

# When True, results and plots include a datestamp suffix (e.g., _20251113-142530)
DATE_IN_FILENAMES: bool = True

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")


def set_timeouts(
        bt_timeout: Optional[float] = 60.0,
        hc_timeout: Optional[float] = 60.0,
) -> None:
        """Configure per-run timeouts for both engines.

        Parameters
        - bt_timeout: Backtracking limit in seconds (None disables the limit).
        - hc_timeout: Hill-climbing limit in seconds (None disables).

        Side effects
        - Updates module-level globals and prints a concise summary to stdout to
            make the active limits explicit at run start.
        """
        global BT_TIME_LIMIT, HC_TIME_LIMIT
        BT_TIME_LIMIT = bt_timeout
        HC_TIME_LIMIT = hc_timeout

        print("Timeout settings configured:")
        print(f"   - BT: {BT_TIME_LIMIT}s" if BT_TIME_LIMIT else "   - BT: unlimited")
        print(f"   - HC: {HC_TIME_LIMIT}s" if HC_TIME_LIMIT else "   - HC: unlimited")


def filename_suffix() -> str:
    """Return the ``_<RUN_ID>`` suffix when date stamping is enabled."""
    return f"_{RUN_ID}" if DATE_IN_FILENAMES else ""
