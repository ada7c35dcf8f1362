"""Behavioral tests for the restart-driven hill-climbing engine."""

from dataclasses import replace
from pathlib import Path
import random
import sys
import threading
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nqueens_trace import FailureReason, HCConfig, InvalidInput, RunStatus, conflict_count, hc_nqueens_trace
from nqueens_trace.audit import audit_hill_climbing_trace, split_restarts


def _without_runtime(metrics):
    return replace(metrics, runtime_ms=0.0)


class HillClimbingDeterminismTests(unittest.TestCase):
    """Seeded runs must be reproducible."""

    def test_same_seed_same_trace_and_metrics(self):
        first = hc_nqueens_trace(8, HCConfig(), seed=2024)
        second = hc_nqueens_trace(8, HCConfig(), seed=2024)
        self.assertEqual(first.trace, second.trace)
        self.assertEqual(_without_runtime(first.metrics), _without_runtime(second.metrics))

    def test_injected_rng_matches_seed(self):
        by_seed = hc_nqueens_trace(8, seed=7)
        by_rng = hc_nqueens_trace(8, rng=random.Random(7))
        self.assertEqual(by_seed.trace, by_rng.trace)

    def test_global_random_state_untouched(self):
        random.seed(99)
        before = random.getstate()
        hc_nqueens_trace(6, seed=3)
        self.assertEqual(random.getstate(), before)


class HillClimbingOutcomeTests(unittest.TestCase):
    """Success, failure classification and restart bookkeeping."""

    def test_n8_default_config_solves(self):
        for seed in range(5):
            with self.subTest(seed=seed):
                result = hc_nqueens_trace(8, seed=seed)
                self.assertTrue(result.metrics.success)
                self.assertIs(result.metrics.status, RunStatus.SOLVED)
                self.assertIsNone(result.metrics.failure_reason)
                self.assertEqual(len(result.final_step), 8)
                self.assertEqual(conflict_count(result.final_step), 0)
                self.assertEqual(result.metrics.conflict_trend[-1], 0)
                self.assertEqual(audit_hill_climbing_trace(result, 8), [])

    def test_n1_is_solved_by_the_initial_board(self):
        result = hc_nqueens_trace(1, seed=0)
        self.assertTrue(result.metrics.success)
        self.assertEqual(result.trace, [((0, 0),)])
        self.assertEqual(result.metrics.conflict_trend, (0,))
        self.assertEqual(result.metrics.visited_states, 0)
        self.assertEqual(result.metrics.restarts, 0)

    def test_stuck_without_sideways(self):
        result = hc_nqueens_trace(2, HCConfig(max_restarts=3, allow_sideways=False), seed=1)
        self.assertFalse(result.metrics.success)
        self.assertIs(result.metrics.status, RunStatus.EXHAUSTED)
        self.assertIs(result.metrics.failure_reason, FailureReason.STUCK)
        self.assertEqual(result.metrics.restarts, 4)
        self.assertEqual(len(result.trace), 8)
        self.assertEqual(result.trace[1::2], [(), (), (), ()])
        self.assertEqual(result.metrics.visited_states, 8)
        self.assertEqual(len(result.metrics.conflict_trend), 4)

    def test_cycle_detected_on_tiny_board(self):
        result = hc_nqueens_trace(2, HCConfig(max_restarts=0), seed=5)
        self.assertIs(result.metrics.failure_reason, FailureReason.CYCLE)
        self.assertEqual(result.metrics.restarts, 1)
        self.assertEqual(result.trace[-1], ())

    def test_plateau_when_sideways_limit_exceeded(self):
        result = hc_nqueens_trace(2, HCConfig(max_restarts=1, sideways_limit=0), seed=5)
        self.assertIs(result.metrics.failure_reason, FailureReason.PLATEAU)

    def test_step_budget_exhaustion_is_plateau(self):
        result = hc_nqueens_trace(3, HCConfig(max_restarts=2, max_steps_per_restart=0), seed=5)
        self.assertIs(result.metrics.failure_reason, FailureReason.PLATEAU)
        self.assertEqual(result.metrics.visited_states, 0)

    def test_failure_reason_present_iff_failed(self):
        configs = [HCConfig(max_restarts=2), HCConfig(max_restarts=2, allow_sideways=False)]
        for n in (2, 3, 6, 8):
            for config in configs:
                for seed in range(3):
                    with self.subTest(n=n, config=config, seed=seed):
                        metrics = hc_nqueens_trace(n, config, seed=seed).metrics
                        if metrics.success:
                            self.assertIsNone(metrics.failure_reason)
                        else:
                            self.assertIn(metrics.failure_reason, set(FailureReason))

    def test_cycle_window_reset_forgets_older_states(self):
        # On N=2 every board scores 1, so sideways moves flip column 1 back and forth.
        result = hc_nqueens_trace(2, HCConfig(max_restarts=0, cycle_window_size=1, sideways_limit=10), seed=3)
        self.assertIs(result.metrics.failure_reason, FailureReason.PLATEAU)
        moves = result.trace[1:-1]
        self.assertEqual(len(moves), 10)
        self.assertEqual(moves[0::2], [moves[0]] * 5)
        self.assertEqual(moves[1::2], [result.trace[0]] * 5)

    def test_repeat_inside_cycle_window_is_a_cycle(self):
        result = hc_nqueens_trace(2, HCConfig(max_restarts=0, cycle_window_size=2, sideways_limit=10), seed=3)
        self.assertIs(result.metrics.failure_reason, FailureReason.CYCLE)
        self.assertEqual(len(result.trace), 4)
        self.assertEqual(result.trace[2], result.trace[0])

    def test_sideways_counter_resets_after_improvement(self):
        limit = 1
        config = HCConfig(max_restarts=25, sideways_limit=limit)
        most_sideways = 0
        for seed in range(8):
            result = hc_nqueens_trace(12, config, seed=seed)
            for segment in split_restarts(result.trace):
                scores = [conflict_count(step) for step in segment]
                flat = [after == before for before, after in zip(scores, scores[1:])]
                streak = 0
                for is_flat in flat:
                    streak = streak + 1 if is_flat else 0
                    self.assertLessEqual(streak, limit)
                most_sideways = max(most_sideways, sum(flat))
        self.assertGreater(most_sideways, limit)

    def test_restart_marker_count_matches_restarts(self):
        result = hc_nqueens_trace(3, HCConfig(max_restarts=5), seed=11)
        self.assertEqual(sum(1 for step in result.trace if not step), result.metrics.restarts)
        self.assertEqual(result.metrics.restarts, 6)
        self.assertEqual(len(split_restarts(result.trace)), 6)


class HillClimbingTraceTests(unittest.TestCase):
    """Trace shape and conflict-trend invariants."""

    def test_conflicts_never_increase_within_a_restart(self):
        config = HCConfig(max_restarts=10)
        for n in (5, 8, 10):
            for seed in range(4):
                with self.subTest(n=n, seed=seed):
                    result = hc_nqueens_trace(n, config, seed=seed)
                    for segment in split_restarts(result.trace):
                        scores = [conflict_count(step) for step in segment]
                        self.assertEqual(scores, sorted(scores, reverse=True))

    def test_strict_descent_without_sideways(self):
        config = HCConfig(max_restarts=5, allow_sideways=False)
        for seed in range(5):
            result = hc_nqueens_trace(8, config, seed=seed)
            for segment in split_restarts(result.trace):
                scores = [conflict_count(step) for step in segment]
                for before, after in zip(scores, scores[1:]):
                    self.assertLess(after, before)

    def test_every_state_has_one_queen_per_column(self):
        result = hc_nqueens_trace(8, seed=12)
        for step in result.trace:
            if step:
                self.assertEqual(sorted(col for _, col in step), list(range(8)))

    def test_trend_matches_accepted_states(self):
        result = hc_nqueens_trace(8, HCConfig(max_restarts=3), seed=4)
        accepted = [step for step in result.trace if step]
        self.assertEqual(list(result.metrics.conflict_trend), [conflict_count(step) for step in accepted])
        self.assertEqual(result.metrics.steps_count, len(result.trace))

    def test_visited_states_counts_every_neighbor(self):
        result = hc_nqueens_trace(6, HCConfig(max_restarts=0), seed=8)
        climbing_steps = len(result.trace) - 1 - result.metrics.restarts
        if not result.metrics.success:
            # The rejected final scan is counted even though nothing was adopted.
            climbing_steps += 1
        self.assertEqual(result.metrics.visited_states, climbing_steps * 6 * 5)


class HillClimbingInputTests(unittest.TestCase):
    """Input validation and abort handling."""

    def test_invalid_sizes_raise(self):
        for bad in (0, -3, 1.5, None):
            with self.subTest(size=bad):
                with self.assertRaises(InvalidInput):
                    hc_nqueens_trace(bad, seed=0)

    def test_invalid_config_raises(self):
        for kwargs in ({"max_restarts": -1}, {"cycle_window_size": 0}, {"sideways_limit": -5}, {"max_steps_per_restart": 2.5}, {"allow_sideways": 1}, {"allow_sideways": "no"}):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(InvalidInput):
                    HCConfig(**kwargs)

    def test_explicit_size_limit(self):
        with self.assertRaises(InvalidInput):
            hc_nqueens_trace(6, seed=0, max_size=5)
        self.assertTrue(hc_nqueens_trace(5, seed=0, max_size=5).metrics.success)

    def test_cancelled_run_has_no_failure_reason(self):
        event = threading.Event()
        event.set()
        result = hc_nqueens_trace(8, seed=0, cancel=event)
        self.assertIs(result.metrics.status, RunStatus.CANCELLED)
        self.assertFalse(result.metrics.success)
        self.assertIsNone(result.metrics.failure_reason)
        self.assertEqual(result.trace, [])

    def test_cancel_mid_climb_keeps_consistent_trace(self):
        class CancelAfter:
            def __init__(self, calls):
                self.calls = calls

            def is_set(self):
                self.calls -= 1
                return self.calls < 0

        result = hc_nqueens_trace(12, HCConfig(max_restarts=0), seed=3, cancel=CancelAfter(3))
        self.assertIn(result.metrics.status, (RunStatus.CANCELLED, RunStatus.SOLVED, RunStatus.EXHAUSTED))
        self.assertEqual(audit_hill_climbing_trace(result, 12), [])

    def test_metrics_to_dict_uses_consumer_keys(self):
        payload = hc_nqueens_trace(2, HCConfig(max_restarts=0), seed=1).metrics.to_dict()
        self.assertEqual(payload["failureReason"], "cycle")
        self.assertEqual(payload["status"], "exhausted")
        self.assertIsInstance(payload["conflictTrend"], list)
        for key in ("runtimeMs", "stepsCount", "visitedStates", "success", "restarts", "backtracks", "maxDepth"):
            self.assertIn(key, payload)


if __name__ == "__main__":
    unittest.main()
