"""N-Queens metaheuristic search engines."""

from .board import BoardState, SearchResult, neighbors, random_neighbor, random_placement
from .fitness import CONFLICTS, SAFE_PAIRS, Objective, get_objective
from .genetic import (
    ConvergenceTermination,
    GeneticOptions,
    GoalTermination,
    SemiStochasticMostFitSelector,
    crossover,
    ga_nqueens,
    mutate,
    queens_goal,
)
from .hill_climbing import ClimbState, hc_nqueens
from .simulated_annealing import ExponentialCooling, GeometricCooling, sa_nqueens
from .utils import conflicts, conflicts_on2, is_valid_solution, safe_pairs

__all__ = [
    "BoardState",
    "SearchResult",
    "random_placement",
    "neighbors",
    "random_neighbor",
    "Objective",
    "CONFLICTS",
    "SAFE_PAIRS",
    "get_objective",
    "hc_nqueens",
    "ClimbState",
    "ga_nqueens",
    "GeneticOptions",
    "ConvergenceTermination",
    "GoalTermination",
    "SemiStochasticMostFitSelector",
    "crossover",
    "mutate",
    "queens_goal",
    "sa_nqueens",
    "ExponentialCooling",
    "GeometricCooling",
    "conflicts",
    "conflicts_on2",
    "safe_pairs",
    "is_valid_solution",
]
