"""Tests for the conflict evaluator, scoring conventions and validators."""

from pathlib import Path
import random
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from genequeens.fitness import CONFLICTS, SAFE_PAIRS, get_objective
from genequeens.utils import (
    conflicts,
    conflicts_on2,
    format_placement,
    is_valid_solution,
    max_pairs,
    render_board,
    safe_pairs,
    validate_board_size,
    validate_positive,
    validate_probability,
)

SOLVED_4 = [1, 3, 0, 2]
SOLVED_8 = [0, 4, 7, 5, 2, 6, 1, 3]


class ConflictCountTests(unittest.TestCase):
    def test_canonical_four_queens_solution(self):
        self.assertEqual(conflicts(SOLVED_4), 0)
        self.assertEqual(safe_pairs(SOLVED_4), 6)

    def test_known_eight_queens_solution(self):
        self.assertEqual(conflicts(SOLVED_8), 0)
        self.assertEqual(safe_pairs(SOLVED_8), 28)

    def test_same_row_counts_every_pair(self):
        for n in range(4, 10):
            self.assertEqual(conflicts([0] * n), max_pairs(n))
            self.assertEqual(safe_pairs([0] * n), 0)

    def test_main_diagonal_counts_every_pair(self):
        self.assertEqual(conflicts([0, 1, 2, 3]), 6)
        self.assertEqual(conflicts([3, 2, 1, 0]), 6)

    def test_linear_and_pairwise_implementations_agree(self):
        rng = random.Random(2024)
        for n in range(4, 12):
            for _ in range(40):
                board = [rng.randrange(n) for _ in range(n)]
                self.assertEqual(conflicts(board), conflicts_on2(board), board)

    def test_score_is_invariant_under_reflections(self):
        rng = random.Random(11)
        for n in range(4, 10):
            for _ in range(20):
                board = [rng.randrange(n) for _ in range(n)]
                left_right = list(reversed(board))
                top_bottom = [n - 1 - row for row in board]
                self.assertEqual(conflicts(board), conflicts(left_right))
                self.assertEqual(conflicts(board), conflicts(top_bottom))


class ObjectiveTests(unittest.TestCase):
    def test_optimum_and_direction(self):
        self.assertEqual(CONFLICTS.optimum(8), 0)
        self.assertEqual(SAFE_PAIRS.optimum(8), 28)
        self.assertTrue(CONFLICTS.better(1, 2))
        self.assertFalse(CONFLICTS.better(2, 2))
        self.assertTrue(SAFE_PAIRS.better(27, 26))
        self.assertTrue(SAFE_PAIRS.is_optimal(6, 4))
        self.assertFalse(CONFLICTS.is_optimal(1, 4))

    def test_both_conventions_order_boards_identically(self):
        rng = random.Random(5)
        boards = [tuple(rng.randrange(8) for _ in range(8)) for _ in range(60)]
        by_conflicts = sorted(boards, key=lambda b: (CONFLICTS.rank_key(CONFLICTS(b)), b))
        by_safety = sorted(boards, key=lambda b: (SAFE_PAIRS.rank_key(SAFE_PAIRS(b)), b))
        self.assertEqual(by_conflicts, by_safety)

    def test_best_keeps_first_on_ties(self):
        items = [(0, 3), (1, 1), (2, 1)]
        self.assertEqual(CONFLICTS.best(items, key=lambda item: item[1]), (1, 1))
        self.assertEqual(SAFE_PAIRS.best(items, key=lambda item: item[1]), (0, 3))

    def test_lookup_by_label(self):
        self.assertIs(get_objective("conflicts"), CONFLICTS)
        self.assertIs(get_objective("safe_pairs"), SAFE_PAIRS)
        with self.assertRaises(ValueError):
            get_objective("F7")


class ValidationTests(unittest.TestCase):
    def test_is_valid_solution(self):
        self.assertTrue(is_valid_solution(SOLVED_4))
        self.assertTrue(is_valid_solution(SOLVED_8))
        self.assertFalse(is_valid_solution([0, 0, 0, 0]))
        self.assertFalse(is_valid_solution([1, 3, 0, 4]))
        self.assertFalse(is_valid_solution([]))

    def test_board_size_boundary(self):
        self.assertEqual(validate_board_size(4), 4)
        for bad in (3, 1, 0, -5, True, 4.0):
            with self.assertRaises(ValueError):
                validate_board_size(bad)

    def test_probability_and_positive(self):
        self.assertEqual(validate_probability(0.0, "rate"), 0.0)
        self.assertEqual(validate_probability(1.0, "rate"), 1.0)
        with self.assertRaises(ValueError):
            validate_probability(1.5, "rate")
        with self.assertRaises(ValueError):
            validate_probability(0.0, "rate", open_interval=True)
        with self.assertRaises(ValueError):
            validate_probability(1.0, "rate", open_interval=True)
        with self.assertRaises(ValueError):
            validate_positive(0, "temperature")
        self.assertEqual(validate_positive(0.5, "temperature"), 0.5)

    def test_non_finite_values_rejected(self):
        for bad in (float("nan"), float("inf"), float("-inf")):
            with self.assertRaises(ValueError):
                validate_positive(bad, "temperature")
            with self.assertRaises(ValueError):
                validate_probability(bad, "rate")


class RenderingTests(unittest.TestCase):
    def test_format_placement_lists_each_queen(self):
        lines = format_placement(SOLVED_4).splitlines()
        self.assertEqual(len(lines), 4)
        self.assertEqual(lines[0], "Queen1: Row 1 Column 0")
        self.assertEqual(lines[3], "Queen4: Row 2 Column 3")

    def test_render_board_grid(self):
        grid = render_board(SOLVED_4).splitlines()
        self.assertEqual(grid, [". . Q .", "Q . . .", ". . . Q", ". Q . ."])


if __name__ == "__main__":
    unittest.main()
