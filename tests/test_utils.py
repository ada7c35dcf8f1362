"""Tests for the board and conflict primitives."""

from pathlib import Path
import sys
import threading
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nqueens_trace import solve
from nqueens_trace.types import InvalidInput, RunStatus
from nqueens_trace.utils import (
    Occupancy,
    abort_status,
    board_conflicts,
    board_to_step,
    conflict_count,
    is_valid_solution,
    render_board,
    step_to_board,
    validate_size,
)


class ConflictCountTests(unittest.TestCase):
    """Pairwise attack counting over positions and column encodings."""

    def test_empty_and_single(self):
        self.assertEqual(conflict_count([]), 0)
        self.assertEqual(conflict_count([(3, 3)]), 0)

    def test_row_and_diagonal_pairs(self):
        self.assertEqual(conflict_count([(0, 0), (0, 3)]), 1)
        self.assertEqual(conflict_count([(0, 0), (2, 2)]), 1)
        self.assertEqual(conflict_count([(0, 3), (3, 0)]), 1)
        self.assertEqual(conflict_count([(0, 0), (1, 2)]), 0)

    def test_column_collisions_are_not_counted(self):
        self.assertEqual(conflict_count([(0, 0), (5, 0)]), 0)

    def test_all_on_one_row(self):
        self.assertEqual(conflict_count([(0, c) for c in range(5)]), 10)

    def test_pure_and_repeatable(self):
        state = ((0, 1), (1, 3), (2, 0), (3, 3))
        first = conflict_count(state)
        conflict_count([(0, 0), (1, 1)])
        self.assertEqual(conflict_count(state), first)
        self.assertEqual(state, ((0, 1), (1, 3), (2, 0), (3, 3)))

    def test_generator_input(self):
        self.assertEqual(conflict_count((r, r) for r in range(4)), 6)

    def test_board_conflicts_agrees_with_pairwise(self):
        boards = [[0, 0, 0, 0], [1, 3, 0, 2], [0, 1, 2, 3], [3, 1, 1, 0, 4], [0, 4, 7, 5, 2, 6, 1, 3]]
        for board in boards:
            with self.subTest(board=board):
                self.assertEqual(board_conflicts(board), conflict_count(board_to_step(board)))


class BoardEncodingTests(unittest.TestCase):
    def test_round_trip_with_missing_columns(self):
        self.assertEqual(board_to_step([2, 0, 1]), ((2, 0), (0, 1), (1, 2)))
        self.assertEqual(step_to_board(((0, 1), (1, 3)), 4), [-1, 0, -1, 1])

    def test_render_board(self):
        self.assertEqual(render_board(((0, 1), (1, 0)), 2), ". Q\nQ .")
        self.assertEqual(render_board((), 2), ". .\n. .")

    def test_is_valid_solution(self):
        self.assertTrue(is_valid_solution([1, 3, 0, 2]))
        self.assertFalse(is_valid_solution([0, 1, 2, 3]))
        self.assertFalse(is_valid_solution([]))
        self.assertFalse(is_valid_solution([1, 3, 0, 4]))
        self.assertFalse(is_valid_solution([1, 3, 0, True]))


class OccupancyTests(unittest.TestCase):
    def test_place_and_remove(self):
        occupancy = Occupancy(4)
        self.assertEqual(len(occupancy.diagonals), 7)
        self.assertEqual(len(occupancy.anti_diagonals), 7)
        occupancy.place(1, 2)
        self.assertTrue(occupancy.column_occupied(2))
        self.assertTrue(occupancy.diagonal_occupied(0, 3))
        self.assertTrue(occupancy.anti_diagonal_occupied(2, 3))
        self.assertFalse(occupancy.is_free(3, 0))
        self.assertTrue(occupancy.is_free(3, 1))
        occupancy.remove(1, 2)
        self.assertTrue(all(occupancy.is_free(r, c) for r in range(4) for c in range(4)))

    def test_corner_indices_are_in_range(self):
        occupancy = Occupancy(5)
        occupancy.place(0, 4)
        occupancy.place(4, 0)
        self.assertTrue(occupancy.anti_diagonals[0])
        self.assertTrue(occupancy.anti_diagonals[8])
        self.assertTrue(occupancy.diagonals[4])


class ValidationTests(unittest.TestCase):
    def test_validate_size(self):
        self.assertEqual(validate_size(8), 8)
        self.assertEqual(validate_size(30, max_size=30), 30)
        with self.assertRaises(InvalidInput):
            validate_size(31, max_size=30)
        with self.assertRaises(InvalidInput):
            validate_size(0)

    def test_abort_status(self):
        event = threading.Event()
        self.assertIsNone(abort_status(0.0, 1.0, None, event))
        self.assertIs(abort_status(0.0, 2.0, 1.0, None), RunStatus.TIMEOUT)
        event.set()
        self.assertIs(abort_status(0.0, 2.0, 1.0, event), RunStatus.CANCELLED)

    def test_solve_dispatch(self):
        self.assertTrue(solve("bt", 4).metrics.success)
        self.assertTrue(solve("HC", 4, seed=0).metrics.success)
        with self.assertRaises(ValueError):
            solve("GA", 4)


if __name__ == "__main__":
    unittest.main()
