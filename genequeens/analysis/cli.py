"""Command-line interface and high-level pipelines for N-Queens searches.

This module wires together configuration loading, single-engine runs with a
rendered board, execution of experiment suites (sequential or parallel) and
the quick regression. It isolates I/O, argument parsing and progress
reporting from the core engines so that the rest of the codebase remains
easy to test programmatically.

Exit status
-----------
- 0: success (a solution was printed, or the pipeline completed).
- 1: invalid input or configuration.
- 2: a single search ended without a conflict-free board.
"""
from __future__ import annotations

import argparse
import logging
import random
import tempfile
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional

from . import settings
from .experiments import ALGORITHMS, run_experiments, run_experiments_parallel
from .plots import plot_and_save
from .reporting import save_raw_data_to_csv, save_results_to_csv
from config_manager import ConfigManager
from genequeens.board import SearchResult
from genequeens.fitness import get_objective
from genequeens.genetic import GeneticOptions, GoalTermination, SemiStochasticMostFitSelector, ga_nqueens, get_termination_policy
from genequeens.hill_climbing import hc_nqueens
from genequeens.simulated_annealing import get_cooling_schedule, sa_nqueens
from genequeens.utils import (
    format_placement,
    is_valid_solution,
    render_board,
    validate_board_size,
    validate_positive,
    validate_probability,
)

SEPARATOR = "-" * 80
TITLES = {"HC": "HILL CLIMBING SEARCH", "GA": "GENETIC SEARCH", "SA": "SIMULATED ANNEALING SEARCH"}


# ------------- Utils --------------------------------------------------------

def parse_algorithm_filters(alg_args: Optional[List[str]]):
    """Normalize algorithm filter CLI inputs into a list of labels.

    Accepts repeated flags and comma-separated lists. Valid values: HC, SA, GA.
    Returns None when no filter is provided (meaning all are enabled).
    """
    if not alg_args:
        return None
    selected: List[str] = []
    for entry in alg_args:
        for token in entry.split(","):
            token = token.strip().upper()
            if token:
                if token not in ALGORITHMS:
                    raise ValueError(f"Unknown algorithm '{token}'. Allowed: {', '.join(ALGORITHMS)}")
                selected.append(token)
    unique = list(dict.fromkeys(selected))
    return unique or None


def _optional(value: Any, cast: Any) -> Any:
    return None if value is None else cast(value)


def apply_configuration(config_path: str) -> ConfigManager:
    """Load configuration and override the ``settings`` module in-place."""
    config_mgr = ConfigManager(config_path)

    experiment = config_mgr.get_experiment_settings()
    if experiment:
        settings.N_VALUES = [int(n) for n in experiment.get("n_values", settings.N_VALUES)]
        for n in settings.N_VALUES:
            validate_board_size(n)
        settings.RUNS_HC = int(experiment.get("runs_hc", settings.RUNS_HC))
        settings.RUNS_SA = int(experiment.get("runs_sa", settings.RUNS_SA))
        settings.RUNS_GA = int(experiment.get("runs_ga", settings.RUNS_GA))
        settings.OUT_DIR = experiment.get("output_dir", settings.OUT_DIR)

    timeouts = config_mgr.get_timeout_settings()
    if timeouts:
        settings.set_timeouts(
            hc_timeout=_optional(timeouts.get("hc_timeout", settings.HC_TIME_LIMIT), float),
            sa_timeout=_optional(timeouts.get("sa_timeout", settings.SA_TIME_LIMIT), float),
            ga_timeout=_optional(timeouts.get("ga_timeout", settings.GA_TIME_LIMIT), float),
        )

    hill = config_mgr.get_hill_climbing_settings()
    if hill:
        settings.HC_PLATEAU_THRESHOLD = int(hill.get("plateau_threshold", settings.HC_PLATEAU_THRESHOLD))
        settings.HC_MAX_RESTARTS = _optional(hill.get("max_restarts", settings.HC_MAX_RESTARTS), int)

    genetic = config_mgr.get_genetic_settings()
    if genetic:
        settings.GA_POPULATION_SIZE = int(genetic.get("population_size", settings.GA_POPULATION_SIZE))
        settings.GA_MUTATION_RATE = float(genetic.get("mutation_rate", settings.GA_MUTATION_RATE))
        settings.GA_MAX_GENERATIONS = _optional(genetic.get("max_generations", settings.GA_MAX_GENERATIONS), int)
        settings.GA_TERMINATION = str(genetic.get("termination", settings.GA_TERMINATION))
        settings.GA_CONVERGENCE_THRESHOLD = int(genetic.get("convergence_threshold", settings.GA_CONVERGENCE_THRESHOLD))
        settings.GA_MAX_EPOCHS = int(genetic.get("max_epochs", settings.GA_MAX_EPOCHS))
        settings.GA_RANDOM_MATE_PROBABILITY = float(
            genetic.get("random_mate_probability", settings.GA_RANDOM_MATE_PROBABILITY)
        )
        settings.GA_OBJECTIVE = str(genetic.get("objective", settings.GA_OBJECTIVE))
        validate_positive(settings.GA_POPULATION_SIZE, "population_size")
        validate_probability(settings.GA_MUTATION_RATE, "mutation_rate", open_interval=True)
        get_termination_policy(settings.GA_TERMINATION, settings.GA_CONVERGENCE_THRESHOLD)
        get_objective(settings.GA_OBJECTIVE)

    annealing = config_mgr.get_annealing_settings()
    if annealing:
        settings.SA_TEMPERATURE = float(annealing.get("initial_temperature", settings.SA_TEMPERATURE))
        settings.SA_COOLING = str(annealing.get("cooling", settings.SA_COOLING))
        settings.SA_COOLING_VALUE = _optional(annealing.get("cooling_value", settings.SA_COOLING_VALUE), float)
        settings.SA_EPSILON = float(annealing.get("epsilon", settings.SA_EPSILON))
        settings.SA_MAX_RESTARTS = int(annealing.get("max_restarts", settings.SA_MAX_RESTARTS))
        validate_positive(settings.SA_TEMPERATURE, "initial_temperature")
        get_cooling_schedule(settings.SA_COOLING, settings.SA_COOLING_VALUE)

    return config_mgr


# ------------- Single search -----------------------------------------------

def solve(
    algorithm: str,
    size: int,
    mutation_rate: Optional[float] = None,
    population_size: Optional[int] = None,
    temperature: Optional[float] = None,
    seed: Optional[int] = None,
) -> SearchResult:
    """Validate driver inputs, run one engine and print the resulting board.

    Raises ``ValueError`` for out-of-range inputs before any search starts.
    """
    validate_board_size(size)
    rng = random.Random(seed)

    if algorithm == "HC":
        result = hc_nqueens(
            size,
            plateau_threshold=settings.HC_PLATEAU_THRESHOLD,
            max_restarts=settings.HC_MAX_RESTARTS,
            time_limit=settings.HC_TIME_LIMIT,
            rng=rng,
        )
    elif algorithm == "GA":
        rate = settings.GA_MUTATION_RATE if mutation_rate is None else mutation_rate
        pop = settings.GA_POPULATION_SIZE if population_size is None else population_size
        validate_probability(rate, "mutation_rate", open_interval=True)
        validate_positive(pop, "population_size")
        options = GeneticOptions(
            population_size=pop,
            mutation_rate=rate,
            max_generations=settings.GA_MAX_GENERATIONS,
            termination=get_termination_policy(settings.GA_TERMINATION, settings.GA_CONVERGENCE_THRESHOLD),
            mate_selector=SemiStochasticMostFitSelector(settings.GA_RANDOM_MATE_PROBABILITY),
            objective=get_objective(settings.GA_OBJECTIVE),
            max_epochs=settings.GA_MAX_EPOCHS,
            time_limit=settings.GA_TIME_LIMIT,
        )
        result = ga_nqueens(size, options, rng=rng)
    elif algorithm == "SA":
        t0 = settings.SA_TEMPERATURE if temperature is None else temperature
        validate_positive(t0, "temperature")
        result = sa_nqueens(
            size,
            T0=t0,
            cooling=get_cooling_schedule(settings.SA_COOLING, settings.SA_COOLING_VALUE),
            epsilon=settings.SA_EPSILON,
            max_restarts=settings.SA_MAX_RESTARTS,
            time_limit=settings.SA_TIME_LIMIT,
            rng=rng,
        )
    else:
        raise ValueError(f"Unknown algorithm '{algorithm}'. Allowed: {', '.join(ALGORITHMS)}")

    print(SEPARATOR)
    print(f"\t\t{TITLES[algorithm]}")
    print(SEPARATOR)
    if result.success:
        print("SOLUTION FOUND")
    else:
        status = "time limit reached" if result.timeout else "search bounds exhausted"
        print(f"NO SOLUTION FOUND ({status}); best board has {result.best_conflicts} conflicts")
    print(format_placement(result.placement))
    print()
    print(render_board(result.placement))
    print(
        f"iterations={result.iterations} restarts={result.restarts} "
        f"evaluations={result.evaluations} time={result.elapsed:.4f}s"
    )
    print(SEPARATOR)
    return result


# ------------- Pipelines ---------------------------------------------------

def run_pipeline(mode: str, algorithms: Optional[List[str]] = None, base_seed: Optional[int] = None) -> None:
    """Run the experiment suite, export CSV files and render charts."""
    start = perf_counter()
    runner = run_experiments if mode == "sequential" else run_experiments_parallel
    results = runner(
        settings.N_VALUES,
        algorithms=algorithms,
        base_seed=base_seed,
        progress_label=f"Experiments ({mode})",
    )
    save_results_to_csv(results, settings.N_VALUES, settings.OUT_DIR)
    save_raw_data_to_csv(results, settings.N_VALUES, settings.OUT_DIR)
    plot_and_save(results, settings.N_VALUES, settings.OUT_DIR)

    total_time = perf_counter() - start
    print(f"Total time: {total_time:.1f}s ({total_time/60:.1f} minutes)")


# ------------- Quick regression -------------------------------------------

def run_quick_regression_tests() -> None:
    """Execute a fast, deterministic smoke test for HC/SA/GA.

    Verifies that:
    - HC and SA solve N=8 under fixed seeds.
    - GA in goal mode solves N=5 under a fixed seed and terminates cleanly
      at N=8 with a consistent result.
    - The experiment pipeline produces a non-empty CSV in a temporary folder.
    """
    print("Running quick regression tests across all algorithms...")

    hc = hc_nqueens(8, max_restarts=500, time_limit=10.0, rng=random.Random(42))
    if not hc.success or not is_valid_solution(list(hc.placement)):
        raise AssertionError(f"Hill Climbing did not solve N=8 with a fixed seed: {hc}")
    print(f"  Hill Climbing: success in {hc.elapsed:.4f}s ({hc.restarts} restarts)")

    sa = sa_nqueens(8, T0=100.0, max_restarts=50, time_limit=10.0, rng=random.Random(42))
    if not sa.success or not is_valid_solution(list(sa.placement)):
        raise AssertionError(f"Simulated Annealing did not solve N=8 with a fixed seed: {sa}")
    print(f"  Simulated Annealing: success in {sa.elapsed:.4f}s")

    goal_options = GeneticOptions(
        population_size=60,
        mutation_rate=0.1,
        max_generations=2000,
        termination=GoalTermination(),
        time_limit=10.0,
    )
    ga = ga_nqueens(5, goal_options, rng=random.Random(42))
    if not ga.success or not is_valid_solution(list(ga.placement)):
        raise AssertionError(f"Genetic Algorithm did not solve N=5 with a fixed seed: {ga}")
    print(f"  Genetic Algorithm: success in {ga.elapsed:.4f}s ({ga.iterations} generations)")

    ga8 = ga_nqueens(8, GeneticOptions(max_generations=200), rng=random.Random(42))
    if ga8.success != (ga8.best_conflicts == 0) or len(ga8.population) != 50:
        raise AssertionError(f"Genetic Algorithm returned an inconsistent result for N=8: {ga8}")

    results = run_experiments([8], runs={"HC": 2, "SA": 2, "GA": 2}, base_seed=7)
    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(save_results_to_csv(results, [8], tmpdir))
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Results CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser():
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Solve N-Queens with hill climbing, genetic search or simulated annealing.")
    parser.add_argument(
        "--mode",
        choices=["solve", "sequential", "parallel"],
        default="solve",
        help="solve: one run with a rendered board (default); sequential/parallel: experiment pipeline.",
    )
    parser.add_argument(
        "--alg",
        "-a",
        action="append",
        help="Algorithms: HC, SA, GA (comma-separated or multiple flags). solve mode uses the first one (default HC).",
    )
    parser.add_argument("--size", "-n", type=int, default=8, help="Board size N (>= 4) for solve mode.")
    parser.add_argument("--mutation-rate", type=float, help="GA mutation rate in (0, 1).")
    parser.add_argument("--population-size", type=int, help="GA population size (> 0).")
    parser.add_argument("--temperature", type=float, help="SA initial temperature (> 0).")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs.")
    parser.add_argument("--config", default=None, help="Path to a JSON configuration file (e.g. config.json).")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests and exit.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine events (restarts, epochs) at DEBUG level.")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to the chosen mode."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.quick_test:
        run_quick_regression_tests()
        return

    seed = args.seed
    try:
        if args.config:
            config_mgr = apply_configuration(args.config)
            if seed is None:
                seed = config_mgr.get_experiment_settings().get("seed")
        algorithms = parse_algorithm_filters(args.alg)
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc

    try:
        if args.mode == "solve":
            algorithm = algorithms[0] if algorithms else "HC"
            result = solve(
                algorithm,
                args.size,
                mutation_rate=args.mutation_rate,
                population_size=args.population_size,
                temperature=args.temperature,
                seed=seed,
            )
            if not result.success:
                raise SystemExit(2)
        else:
            run_pipeline(args.mode, algorithms, base_seed=seed)
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        raise SystemExit(130) from None
    except ValueError as exc:
        print(f"Invalid input: {exc}")
        raise SystemExit(1) from exc
