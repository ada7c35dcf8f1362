"""Quick regression tests for the N-Queens trace orchestrator."""

import contextlib
import io
from pathlib import Path
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nqueens_trace.analysis import cli


class QuickRegressionTests(unittest.TestCase):
    """Verify that the lightweight regression checks pass."""

    def test_engines_and_csv_generation(self):
        """Ensure BT, HC, trace audits, and CSV export succeed for N=8."""
        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer):
            cli.run_quick_regression_tests()
        self.assertIn("Quick regression tests passed.", buffer.getvalue())

    def test_quick_test_flag(self):
        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer):
            cli.main(["--quick-test"])
        self.assertIn("[BT] solution found", buffer.getvalue())


if __name__ == "__main__":
    unittest.main()
