"""Tests for the genetic operators, mate selection, termination and engine."""

from collections import Counter
from pathlib import Path
import random
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from genequeens.board import BoardState, random_placement
from genequeens.fitness import CONFLICTS, SAFE_PAIRS
from genequeens.genetic import (
    ConvergenceTermination,
    GeneticOptions,
    GoalTermination,
    SemiStochasticMostFitSelector,
    crossover,
    fittest,
    ga_nqueens,
    get_termination_policy,
    mutate,
    next_generation,
    population_fitness,
    queens_goal,
)
from genequeens.utils import conflicts, is_valid_solution


class CountingRandom(random.Random):
    """Random stream that counts ``randrange`` draws."""

    def __init__(self, seed=None):
        super().__init__(seed)
        self.draws = 0

    def randrange(self, *args, **kwargs):
        self.draws += 1
        return super().randrange(*args, **kwargs)


def _state(score, placement=(0, 1, 2, 3)):
    return BoardState(tuple(placement), score)


class CrossoverTests(unittest.TestCase):
    def test_children_swap_tails_at_every_index(self):
        a = (0, 1, 2, 3, 4, 5, 6, 7)
        b = (7, 6, 5, 4, 3, 2, 1, 0)
        for k in range(1, 7):
            child_a, child_b = crossover(a, b, index=k)
            self.assertEqual(child_a, a[:k] + b[k:])
            self.assertEqual(child_b, b[:k] + a[k:])

    def test_random_cut_keeps_genes_from_both_parents(self):
        rng = random.Random(13)
        a, b = (0,) * 8, (1,) * 8
        cuts = set()
        for _ in range(300):
            child_a, child_b = crossover(a, b, rng)
            cut = child_a.index(1)
            self.assertTrue(1 <= cut < 7)
            self.assertEqual(child_a, (0,) * cut + (1,) * (8 - cut))
            self.assertEqual(child_b, (1,) * cut + (0,) * (8 - cut))
            cuts.add(cut)
        self.assertEqual(cuts, set(range(1, 7)))

    def test_invalid_parents_or_index(self):
        with self.assertRaises(ValueError):
            crossover((0, 1, 2, 3), (0, 1, 2))
        with self.assertRaises(ValueError):
            crossover((0, 1), (1, 0))
        with self.assertRaises(ValueError):
            crossover((0, 1, 2, 3), (3, 2, 1, 0), index=0)
        with self.assertRaises(ValueError):
            crossover((0, 1, 2, 3), (3, 2, 1, 0), index=3)


class MutationTests(unittest.TestCase):
    def test_zero_rate_keeps_placement(self):
        placement = [3, 1, 4, 1, 5, 0, 2, 6]
        self.assertEqual(mutate(placement, 0.0, random.Random(1)), tuple(placement))
        self.assertEqual(placement, [3, 1, 4, 1, 5, 0, 2, 6])

    def test_full_rate_redraws_every_gene(self):
        rng = CountingRandom(2)
        child = mutate((0,) * 10, 1.0, rng)
        self.assertEqual(rng.draws, 10)
        self.assertEqual(len(child), 10)
        self.assertTrue(all(0 <= gene < 10 for gene in child))


class MateSelectionTests(unittest.TestCase):
    def setUp(self):
        self.rng = random.Random(0)
        self.pool = [_state(5), _state(9), _state(7), _state(3)]

    def test_single_individual_has_no_mate(self):
        selector = SemiStochasticMostFitSelector()
        self.assertEqual(selector.select_mate(0, [_state(1)], SAFE_PAIRS, self.rng), 0)

    def test_adjacent_rank_when_maximizing(self):
        selector = SemiStochasticMostFitSelector(random_probability=0.0)
        # Ranking fittest first: 1 (9), 2 (7), 0 (5), 3 (3)
        self.assertEqual(selector.select_mate(0, self.pool, SAFE_PAIRS, self.rng), 3)
        self.assertEqual(selector.select_mate(1, self.pool, SAFE_PAIRS, self.rng), 2)
        self.assertEqual(selector.select_mate(3, self.pool, SAFE_PAIRS, self.rng), 0)

    def test_adjacent_rank_when_minimizing(self):
        selector = SemiStochasticMostFitSelector(random_probability=0.0)
        # Ranking fewest conflicts first: 3, 0, 2, 1
        self.assertEqual(selector.select_mate(0, self.pool, CONFLICTS, self.rng), 2)
        self.assertEqual(selector.select_mate(1, self.pool, CONFLICTS, self.rng), 2)

    def test_ranking_is_limited_to_unpaired_pool(self):
        selector = SemiStochasticMostFitSelector(random_probability=0.0)
        # In the full pool 0 (5) pairs with 3 (3); once 3 is paired, with 2 (7)
        remaining = self.pool[:3]
        self.assertEqual(selector.select_mate(0, self.pool, SAFE_PAIRS, self.rng), 3)
        self.assertEqual(selector.select_mate(0, remaining, SAFE_PAIRS, self.rng), 2)

    def test_random_mate_is_never_self(self):
        selector = SemiStochasticMostFitSelector(random_probability=1.0)
        seen = set()
        for _ in range(300):
            mate = selector.select_mate(2, self.pool, SAFE_PAIRS, self.rng)
            self.assertNotEqual(mate, 2)
            seen.add(mate)
        self.assertEqual(seen, {0, 1, 3})

    def test_invalid_probability(self):
        with self.assertRaises(ValueError):
            SemiStochasticMostFitSelector(random_probability=1.5)


class GenerationTests(unittest.TestCase):
    def test_population_size_is_preserved(self):
        rng = random.Random(17)
        selector = SemiStochasticMostFitSelector()
        for size in (1, 2, 5, 10, 11):
            population = [random_placement(8, rng, SAFE_PAIRS) for _ in range(size)]
            offspring = next_generation(population, selector, 0.01, SAFE_PAIRS, rng)
            self.assertEqual(len(offspring), size)
            for child in offspring:
                self.assertEqual(child.score, SAFE_PAIRS(child.placement))

    def test_crossover_only_preserves_genes_per_column(self):
        rng = random.Random(23)
        population = [random_placement(8, rng, SAFE_PAIRS) for _ in range(12)]
        offspring = next_generation(population, SemiStochasticMostFitSelector(), 0.0, SAFE_PAIRS, rng)
        for column in range(8):
            before = Counter(board.placement[column] for board in population)
            after = Counter(board.placement[column] for board in offspring)
            self.assertEqual(before, after)

    def test_empty_population_rejected(self):
        with self.assertRaises(ValueError):
            next_generation([], SemiStochasticMostFitSelector(), 0.1, SAFE_PAIRS, random.Random(0))

    def test_fitness_helpers(self):
        population = [_state(2), _state(6), _state(6)]
        self.assertEqual(population_fitness(population), 14)
        self.assertIs(fittest(population, SAFE_PAIRS), population[1])
        self.assertIs(fittest(population, CONFLICTS), population[0])


class TerminationTests(unittest.TestCase):
    def test_convergence_stops_after_threshold_stale_generations(self):
        policy = ConvergenceTermination(threshold=3)
        population = [_state(3), _state(4)]
        policy.reset(population, SAFE_PAIRS)
        self.assertFalse(policy.should_stop(population, SAFE_PAIRS))
        self.assertFalse(policy.should_stop(population, SAFE_PAIRS))
        self.assertTrue(policy.should_stop(population, SAFE_PAIRS))
        self.assertEqual(policy.result([_state(0)]), population)

    def test_joint_improvement_resets_counter_and_snapshot(self):
        policy = ConvergenceTermination(threshold=2)
        policy.reset([_state(3), _state(4)], SAFE_PAIRS)
        self.assertFalse(policy.should_stop([_state(3), _state(4)], SAFE_PAIRS))

        better = [_state(5), _state(5)]
        self.assertFalse(policy.should_stop(better, SAFE_PAIRS))
        self.assertEqual(policy.counter, 0)
        self.assertEqual(policy.snapshot, better)

        # A fitter top with a worse total does not count
        self.assertFalse(policy.should_stop([_state(6), _state(0)], SAFE_PAIRS))
        self.assertEqual(policy.counter, 1)
        self.assertEqual(policy.snapshot, better)

    def test_goal_policy(self):
        policy = GoalTermination()
        solved = [BoardState.evaluate([1, 3, 0, 2], SAFE_PAIRS), BoardState.evaluate([0] * 4, SAFE_PAIRS)]
        unsolved = [BoardState.evaluate([0] * 4, SAFE_PAIRS)]
        self.assertTrue(queens_goal(solved))
        self.assertTrue(policy.should_stop(solved, SAFE_PAIRS))
        self.assertFalse(policy.should_stop(unsolved, SAFE_PAIRS))

    def test_policy_lookup(self):
        self.assertIsInstance(get_termination_policy("convergence", 4), ConvergenceTermination)
        self.assertIsInstance(get_termination_policy("goal"), GoalTermination)
        with self.assertRaises(ValueError):
            get_termination_policy("forever")
        with self.assertRaises(ValueError):
            ConvergenceTermination(0)


class GeneticEngineTests(unittest.TestCase):
    def test_goal_mode_solves_small_board(self):
        options = GeneticOptions(
            population_size=60,
            mutation_rate=0.1,
            max_generations=2000,
            termination=GoalTermination(),
        )
        result = ga_nqueens(5, options, rng=random.Random(42))
        self.assertTrue(result.success)
        self.assertTrue(is_valid_solution(list(result.placement)))
        self.assertEqual(result.best_conflicts, 0)

    def test_default_options_return_consistent_result(self):
        result = ga_nqueens(8, GeneticOptions(max_generations=50), rng=random.Random(6))
        self.assertLessEqual(result.iterations, 50)
        self.assertEqual(len(result.population), 50)
        self.assertEqual(result.success, result.best_conflicts == 0)
        self.assertEqual(result.best_conflicts, conflicts(result.placement))
        self.assertEqual(result.restarts, 0)

    def test_generation_cap_is_exhausted(self):
        options = GeneticOptions(
            population_size=4,
            mutation_rate=0.0,
            max_generations=3,
            termination=GoalTermination(),
        )
        result = ga_nqueens(12, options, rng=random.Random(1))
        if not result.success:
            self.assertEqual(result.iterations, 3)
            self.assertFalse(result.timeout)
        self.assertEqual(result.evaluations, 4 * (result.iterations + 1))

    def test_epochs_reseed_population(self):
        options = GeneticOptions(
            population_size=10,
            mutation_rate=0.05,
            max_generations=None,
            termination=ConvergenceTermination(1),
            max_epochs=3,
        )
        result = ga_nqueens(10, options, rng=random.Random(30))
        if result.success:
            self.assertTrue(is_valid_solution(list(result.placement)))
        else:
            self.assertEqual(result.restarts, 2)
        self.assertEqual(len(result.population), 10)

    def test_invalid_options(self):
        with self.assertRaises(ValueError):
            ga_nqueens(3)
        with self.assertRaises(ValueError):
            ga_nqueens(8, GeneticOptions(population_size=0))
        with self.assertRaises(ValueError):
            ga_nqueens(8, GeneticOptions(mutation_rate=1.5))
        with self.assertRaises(ValueError):
            ga_nqueens(8, GeneticOptions(max_epochs=0))


if __name__ == "__main__":
    unittest.main()
