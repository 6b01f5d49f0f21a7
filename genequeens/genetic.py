"""Genetic Algorithm solver for the N-Queens problem.

The representation is a ``BoardState`` whose placement is the genome
(``board[col] = row``) and whose score is the fitness under the configured
``Objective`` (by default ``SAFE_PAIRS``: the number of non-attacking pairs,
maximized at ``C(N, 2)``).

One generation
--------------
1. Every individual not yet paired picks a mate through a ``MateSelector``
   among the still-unpaired individuals. A lone individual keeps itself.
2. The pair exchanges genes through single-point crossover at a column
   drawn uniformly from ``[1, N - 1)``.
3. Each gene of each child is replaced by a uniformly random row with
   probability ``mutation_rate``.
4. The two children take the place of their parents, so the population size
   is preserved.

Termination
-----------
A ``TerminationPolicy`` decides when an epoch ends:

- ``ConvergenceTermination`` counts generations without a strictly fitter
  individual accompanied by a better population total and stops after
  ``threshold`` of them, handing back the last population snapshot that
  improved both.
- ``GoalTermination`` stops as soon as a predicate over the population holds
  (``queens_goal`` checks for a conflict-free board).

Independently of the policy a run stops with ``success=True`` as soon as an
optimal board is bred, and with ``success=False`` when ``max_generations`` or
``time_limit`` is exhausted. When an epoch ends without a solution and
``max_epochs`` allows it, a fresh random population is seeded.

Defaults (mutation rate 0.001, population 50, 1000 generations) follow De
Jong and Spears' parameter study; they are tunables, not constants of the
algorithm.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from time import perf_counter
from typing import Callable, List, Optional, Sequence, Tuple

from .board import BoardState, Placement, SearchResult, random_placement
from .fitness import SAFE_PAIRS, Objective
from .utils import conflicts, validate_board_size, validate_positive, validate_probability

logger = logging.getLogger(__name__)

DEFAULT_MUTATION_RATE = 0.001
DEFAULT_POPULATION_SIZE = 50
DEFAULT_MAX_GENERATIONS = 1000
DEFAULT_CONVERGENCE_THRESHOLD = 10
DEFAULT_RANDOM_MATE_PROBABILITY = 0.10


# Genetic operators ----------------------------------------------------------

def crossover(
    parent_a: Sequence[int],
    parent_b: Sequence[int],
    rng: Optional[random.Random] = None,
    index: Optional[int] = None,
) -> Tuple[Placement, Placement]:
    """Return the two children of a single-point crossover.

    Child A takes ``parent_a`` for columns ``< index`` and ``parent_b`` for
    the rest; child B is the mirror image. ``index`` is drawn uniformly from
    ``[1, N - 1)`` when not given.

    Raises
    ------
    ValueError
        If the parents differ in length, are too short to cut, or ``index``
        falls outside ``[1, N - 1)``.
    """
    if len(parent_a) != len(parent_b):
        raise ValueError(
            f"Parents differ in length: {len(parent_a)} vs {len(parent_b)}"
        )
    n = len(parent_a)
    if n < 3:
        raise ValueError(f"Crossover needs at least 3 genes, got {n}")
    if index is None:
        rng = rng if rng is not None else random.Random()
        index = rng.randrange(1, n - 1)
    elif not 1 <= index < n - 1:
        raise ValueError(f"Crossover index must be in [1, {n - 1}), got {index}")

    child_a = tuple(parent_a[:index]) + tuple(parent_b[index:])
    child_b = tuple(parent_b[:index]) + tuple(parent_a[index:])
    return child_a, child_b


def mutate(placement: Sequence[int], mutation_rate: float, rng: Optional[random.Random] = None) -> Placement:
    """Replace each gene with a random row with probability ``mutation_rate``.

    A rate of 0 returns the placement unchanged; a rate of 1 redraws every
    gene (a redraw may land on the same row).
    """
    rng = rng if rng is not None else random.Random()
    n = len(placement)
    return tuple(rng.randrange(n) if rng.random() < mutation_rate else gene for gene in placement)


# Mate selection -------------------------------------------------------------

class MateSelector(ABC):
    """Picks a partner for ``pool[index]`` among the unpaired individuals."""

    @abstractmethod
    def select_mate(
        self, index: int, pool: Sequence[BoardState], objective: Objective, rng: random.Random
    ) -> int:
        """Return the index of the mate in ``pool``; ``index`` itself means no mate."""


class SemiStochasticMostFitSelector(MateSelector):
    """Sexual selection: mate with the adjacent-ranked individual, sometimes at random.

    With probability ``random_probability`` a uniformly random other member
    of the pool is chosen. Otherwise the pool is ranked fittest first and the
    individual pairs with the next less fit one; the least fit individual
    pairs with its predecessor.

    The ranking covers only ``pool``, the individuals not yet paired in the
    current generation, so an individual's neighbour in rank can differ
    from its neighbour in the full population once earlier pairs are
    removed. This keeps every pairing inside the pool and the population
    size constant.
    """

    def __init__(self, random_probability: float = DEFAULT_RANDOM_MATE_PROBABILITY):
        self.random_probability = validate_probability(random_probability, "random_probability")

    def select_mate(
        self, index: int, pool: Sequence[BoardState], objective: Objective, rng: random.Random
    ) -> int:
        if not pool:
            raise ValueError("Cannot select a mate from an empty pool")
        if len(pool) == 1:
            return index

        if rng.random() < self.random_probability:
            mate = rng.randrange(len(pool) - 1)
            return mate + 1 if mate >= index else mate

        ranking = sorted(range(len(pool)), key=lambda i: objective.rank_key(pool[i].score))
        rank = ranking.index(index)
        if rank == len(ranking) - 1:
            return ranking[rank - 1]
        return ranking[rank + 1]


def next_generation(
    population: Sequence[BoardState],
    mate_selector: MateSelector,
    mutation_rate: float,
    objective: Objective,
    rng: random.Random,
) -> List[BoardState]:
    """Breed the next population; its size equals ``len(population)``."""
    if not population:
        raise ValueError("Population is empty")

    pool = list(population)
    offspring: List[BoardState] = []
    while pool:
        mate_index = mate_selector.select_mate(0, pool, objective, rng)
        if mate_index == 0:
            # No partner left for this individual; it survives unchanged
            offspring.append(pool.pop(0))
            continue
        mate = pool.pop(mate_index)
        individual = pool.pop(0)

        child_a, child_b = crossover(individual.placement, mate.placement, rng)
        offspring.append(BoardState.evaluate(mutate(child_a, mutation_rate, rng), objective))
        offspring.append(BoardState.evaluate(mutate(child_b, mutation_rate, rng), objective))
    return offspring


# Termination policies -------------------------------------------------------

def population_fitness(population: Sequence[BoardState]) -> float:
    """Return the total score of ``population``."""
    return sum(board.score for board in population)


def fittest(population: Sequence[BoardState], objective: Objective) -> BoardState:
    """Return the first individual holding the best score."""
    if not population:
        raise ValueError("Population is empty")
    return objective.best(population, key=lambda board: board.score)


def queens_goal(population: Sequence[BoardState]) -> bool:
    """Return True if any individual places its queens without conflicts."""
    return any(conflicts(board.placement) == 0 for board in population)


class TerminationPolicy(ABC):
    """Decides when an epoch of the genetic search ends."""

    def reset(self, population: Sequence[BoardState], objective: Objective) -> None:
        """Prepare for a new epoch starting from ``population``."""

    @abstractmethod
    def should_stop(self, population: Sequence[BoardState], objective: Objective) -> bool:
        """Inspect the latest generation and return True to end the epoch."""

    def result(self, population: Sequence[BoardState]) -> Sequence[BoardState]:
        """Population to hand back when the policy stops the epoch."""
        return population


class ConvergenceTermination(TerminationPolicy):
    """Stop after ``threshold`` generations without joint improvement.

    A generation counts as an improvement only when its fittest individual
    is strictly fitter than the best seen and the total population fitness is
    strictly better as well; that population becomes the snapshot.
    """

    def __init__(self, threshold: int = DEFAULT_CONVERGENCE_THRESHOLD):
        if threshold < 1:
            raise ValueError(f"Convergence threshold must be >= 1, got {threshold}")
        self.threshold = threshold
        self.counter = 0
        self.best_score: Optional[float] = None
        self.best_total: Optional[float] = None
        self.snapshot: List[BoardState] = []

    def reset(self, population: Sequence[BoardState], objective: Objective) -> None:
        self.counter = 0
        self.best_score = fittest(population, objective).score
        self.best_total = population_fitness(population)
        self.snapshot = list(population)

    def should_stop(self, population: Sequence[BoardState], objective: Objective) -> bool:
        if self.best_score is None or self.best_total is None:
            self.reset(population, objective)
            return False

        top = fittest(population, objective).score
        total = population_fitness(population)
        if objective.better(top, self.best_score) and objective.better(total, self.best_total):
            self.counter = 0
            self.best_score = top
            self.best_total = total
            self.snapshot = list(population)
        else:
            self.counter += 1
        return self.counter >= self.threshold

    def result(self, population: Sequence[BoardState]) -> Sequence[BoardState]:
        return self.snapshot or population


class GoalTermination(TerminationPolicy):
    """Stop as soon as ``predicate(population)`` holds."""

    def __init__(self, predicate: Callable[[Sequence[BoardState]], bool] = queens_goal):
        self.predicate = predicate

    def should_stop(self, population: Sequence[BoardState], objective: Objective) -> bool:
        return bool(self.predicate(population))


def get_termination_policy(mode: str, threshold: int = DEFAULT_CONVERGENCE_THRESHOLD) -> TerminationPolicy:
    """Return a termination policy by label (``"convergence"`` or ``"goal"``)."""
    if mode == "convergence":
        return ConvergenceTermination(threshold)
    if mode == "goal":
        return GoalTermination(queens_goal)
    raise ValueError(f"Unknown termination mode: {mode}")


# Engine ---------------------------------------------------------------------

@dataclass
class GeneticOptions:
    """Configuration of one genetic search.

    Attributes
    ----------
    population_size : int
        Individuals per generation (> 0).
    mutation_rate : float
        Per-gene mutation probability in ``[0, 1]``.
    max_generations : int | None
        Cap on generations across all epochs; None removes the cap.
    termination : TerminationPolicy
        Epoch-ending policy (convergence by default).
    mate_selector : MateSelector
        Pairing strategy.
    objective : Objective
        Fitness convention; ``SAFE_PAIRS`` by default.
    max_epochs : int
        Populations seeded at most (1 disables re-seeding).
    time_limit : float | None
        Optional wall-clock time limit in seconds.
    """

    population_size: int = DEFAULT_POPULATION_SIZE
    mutation_rate: float = DEFAULT_MUTATION_RATE
    max_generations: Optional[int] = DEFAULT_MAX_GENERATIONS
    termination: TerminationPolicy = field(default_factory=ConvergenceTermination)
    mate_selector: MateSelector = field(default_factory=SemiStochasticMostFitSelector)
    objective: Objective = SAFE_PAIRS
    max_epochs: int = 1
    time_limit: Optional[float] = None

    def validate(self) -> None:
        """Raise ValueError on any out-of-range setting."""
        if isinstance(self.population_size, bool) or not isinstance(self.population_size, int):
            raise ValueError(f"population_size must be an integer, got {self.population_size!r}")
        validate_positive(self.population_size, "population_size")
        validate_probability(self.mutation_rate, "mutation_rate")
        if self.max_generations is not None and self.max_generations < 0:
            raise ValueError(f"max_generations must be >= 0, got {self.max_generations}")
        if self.max_epochs < 1:
            raise ValueError(f"max_epochs must be >= 1, got {self.max_epochs}")
        if self.time_limit is not None:
            validate_positive(self.time_limit, "time_limit")


def ga_nqueens(
    size: int,
    options: Optional[GeneticOptions] = None,
    rng: Optional[random.Random] = None,
) -> SearchResult:
    """Run a Genetic Algorithm search for an N-Queens solution.

    Parameters
    ----------
    size : int
        Board dimension N (>= 4).
    options : GeneticOptions | None
        Engine configuration; defaults are used when omitted.
    rng : random.Random | None
        Random stream for the whole run; a fresh one is created when omitted.

    Returns
    -------
    SearchResult
        ``iterations`` is the number of generations bred, ``restarts`` the
        number of re-seeded epochs, ``population`` the population handed
        back by the last epoch (the policy snapshot when the policy stopped
        it) and ``placement`` the fittest board seen during the run.
    """
    validate_board_size(size)
    options = options if options is not None else GeneticOptions()
    options.validate()
    rng = rng if rng is not None else random.Random()
    objective = options.objective

    start = perf_counter()
    generation = 0
    evaluations = 0
    epochs = 0
    success = False
    timeout = False
    exhausted = False
    best: Optional[BoardState] = None
    returned: Sequence[BoardState] = ()

    while epochs < options.max_epochs and not (success or timeout or exhausted):
        epochs += 1
        if epochs > 1:
            logger.info("Insufficient improvement, seeding a new population (epoch %d)", epochs)

        population = [random_placement(size, rng, objective) for _ in range(options.population_size)]
        evaluations += len(population)
        options.termination.reset(population, objective)
        returned = population

        while True:
            leader = fittest(population, objective)
            if best is None or objective.better(leader.score, best.score):
                best = leader
            if objective.is_optimal(leader.score, size):
                success = True
                returned = population
                break
            if options.time_limit is not None and (perf_counter() - start) > options.time_limit:
                timeout = True
                returned = population
                break
            if options.max_generations is not None and generation >= options.max_generations:
                exhausted = True
                returned = population
                break

            generation += 1
            population = next_generation(
                population, options.mate_selector, options.mutation_rate, objective, rng
            )
            evaluations += len(population)
            returned = population

            if options.termination.should_stop(population, objective):
                leader = fittest(population, objective)
                if objective.better(leader.score, best.score):
                    best = leader
                success = objective.is_optimal(leader.score, size)
                if not success:
                    returned = options.termination.result(population)
                    logger.debug(
                        "Epoch %d ended after generation %d (best=%s)", epochs, generation, best.score
                    )
                break

    assert best is not None
    elapsed = perf_counter() - start
    best_conflicts = conflicts(best.placement)
    return SearchResult(
        success,
        generation,
        elapsed,
        best_conflicts,
        evaluations,
        timeout,
        best.placement,
        epochs - 1,
        tuple(returned),
    )
