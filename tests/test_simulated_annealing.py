"""Tests for Simulated Annealing, its cooling schedules and acceptance rule."""

from pathlib import Path
import random
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from genequeens.simulated_annealing import (
    ExponentialCooling,
    GeometricCooling,
    accept,
    get_cooling_schedule,
    sa_nqueens,
)
from genequeens.utils import conflicts, is_valid_solution


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class CoolingTests(unittest.TestCase):
    def test_schedules_are_strictly_decreasing(self):
        for schedule in (ExponentialCooling(), GeometricCooling()):
            temperatures = [schedule(100.0, k, 8) for k in range(1, 200)]
            for previous, current in zip(temperatures, temperatures[1:]):
                self.assertLess(current, previous)

    def test_schedules_fall_below_floor(self):
        self.assertLess(ExponentialCooling()(100.0, 10_000, 8), 1e-7)
        self.assertLess(GeometricCooling(0.9)(100.0, 1_000, 8), 1e-7)

    def test_larger_boards_cool_faster(self):
        schedule = ExponentialCooling()
        self.assertLess(schedule(100.0, 50, 16), schedule(100.0, 50, 8))

    def test_schedule_lookup_and_validation(self):
        self.assertIsInstance(get_cooling_schedule("exponential"), ExponentialCooling)
        self.assertEqual(get_cooling_schedule("geometric", 0.9).alpha, 0.9)
        with self.assertRaises(ValueError):
            get_cooling_schedule("linear")
        with self.assertRaises(ValueError):
            GeometricCooling(1.0)
        with self.assertRaises(ValueError):
            ExponentialCooling(0)


class AcceptanceTests(unittest.TestCase):
    def test_improving_and_sideways_moves_always_accepted(self):
        rng = FixedRandom(0.999)
        self.assertTrue(accept(-3, 1e-9, rng))
        self.assertTrue(accept(0, 1e-9, rng))

    def test_worsening_moves_follow_metropolis(self):
        rng = FixedRandom(0.5)
        # exp(-1) ~ 0.37, exp(-0.1) ~ 0.90
        self.assertFalse(accept(1, 1.0, rng))
        self.assertTrue(accept(1, 10.0, rng))
        self.assertFalse(accept(1, 1e-9, FixedRandom(0.0)))


class SimulatedAnnealingTests(unittest.TestCase):
    def test_solved_start_needs_no_moves(self):
        result = sa_nqueens(4, initial=[1, 3, 0, 2], rng=random.Random(0))
        self.assertTrue(result.success)
        self.assertEqual(result.iterations, 0)
        self.assertEqual(result.placement, (1, 3, 0, 2))

    def test_solves_eight_queens_with_restarts(self):
        result = sa_nqueens(8, T0=100.0, max_restarts=100, rng=random.Random(3))
        self.assertTrue(result.success)
        self.assertTrue(is_valid_solution(list(result.placement)))

    def test_iteration_cap_signals_non_convergence(self):
        result = sa_nqueens(12, max_iter=50, initial=[0] * 12, rng=random.Random(7))
        self.assertLessEqual(result.iterations, 50)
        if result.success:
            self.assertTrue(is_valid_solution(list(result.placement)))
        else:
            self.assertGreater(result.best_conflicts, 0)
            self.assertEqual(result.best_conflicts, conflicts(result.placement))

    def test_cold_start_restarts_without_moves(self):
        # First temperature is already below the floor
        result = sa_nqueens(
            8,
            T0=1e-6,
            cooling=ExponentialCooling(rate=1.0),
            max_restarts=2,
            initial=[0] * 8,
            rng=random.Random(11),
        )
        self.assertEqual(result.iterations, 0)
        self.assertLessEqual(result.restarts, 2)
        if not result.success:
            self.assertEqual(result.restarts, 2)
            self.assertEqual(result.evaluations, 3)

    def test_time_limit_flags_timeout(self):
        result = sa_nqueens(8, time_limit=1e-9, initial=[0] * 8, rng=random.Random(5))
        self.assertFalse(result.success)
        self.assertTrue(result.timeout)

    def test_invalid_inputs(self):
        with self.assertRaises(ValueError):
            sa_nqueens(3)
        with self.assertRaises(ValueError):
            sa_nqueens(8, T0=0)
        with self.assertRaises(ValueError):
            sa_nqueens(8, epsilon=0)
        with self.assertRaises(ValueError):
            sa_nqueens(8, max_restarts=-1)

    def test_non_finite_settings_rejected(self):
        for bad in (float("nan"), float("inf")):
            with self.assertRaises(ValueError):
                sa_nqueens(8, T0=bad, max_iter=10)
            with self.assertRaises(ValueError):
                sa_nqueens(8, epsilon=bad, max_iter=10)
            with self.assertRaises(ValueError):
                sa_nqueens(8, time_limit=bad, max_iter=10)
            with self.assertRaises(ValueError):
                ExponentialCooling(bad)
            with self.assertRaises(ValueError):
                GeometricCooling(bad)


if __name__ == "__main__":
    unittest.main()
