"""Experiment runners for HC/SA/GA (sequential and parallel).

These routines execute repeatable batches of runs for Hill Climbing (HC),
Simulated Annealing (SA) and the Genetic Algorithm (GA) over a set of board
sizes, using the engine parameters held in ``genequeens.analysis.settings``.

Outputs are structured dictionaries suitable for CSV export and plotting.
Every successful run is checked for an actually conflict-free placement.
"""
from __future__ import annotations

import random
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from . import settings
from .stats import (
    ExperimentResults,
    ProgressPrinter,
    RunRecord,
    compute_grouped_statistics,
    record_from_result,
)
from genequeens.board import SearchResult
from genequeens.fitness import get_objective
from genequeens.genetic import (
    GeneticOptions,
    SemiStochasticMostFitSelector,
    ga_nqueens,
    get_termination_policy,
)
from genequeens.hill_climbing import hc_nqueens
from genequeens.simulated_annealing import get_cooling_schedule, sa_nqueens
from genequeens.utils import is_valid_solution

ALGORITHMS = ("HC", "SA", "GA")

HCParams = Tuple[int, int, Optional[int], Optional[float], Optional[int]]
SAParams = Tuple[int, float, str, Optional[float], float, int, Optional[float], Optional[int]]
GAParams = Tuple[int, int, float, Optional[int], str, int, int, float, str, Optional[float], Optional[int]]


def _checked(label: str, result: SearchResult) -> RunRecord:
    if result.success and not is_valid_solution(list(result.placement)):
        raise AssertionError(f"{label} reported success with an invalid placement: {result.placement}")
    return record_from_result(result)


# Reusable workers -----------------------------------------------------------

def run_single_hc_experiment(params: HCParams) -> RunRecord:
    """Worker wrapper to invoke a single HC run (for parallel mapping)."""
    N, plateau_threshold, max_restarts, time_limit, seed = params
    result = hc_nqueens(
        N,
        plateau_threshold=plateau_threshold,
        max_restarts=max_restarts,
        time_limit=time_limit,
        rng=random.Random(seed),
    )
    return _checked("HC", result)


def run_single_sa_experiment(params: SAParams) -> RunRecord:
    """Worker wrapper to invoke a single SA run (for parallel mapping)."""
    N, T0, cooling, cooling_value, epsilon, max_restarts, time_limit, seed = params
    result = sa_nqueens(
        N,
        T0=T0,
        cooling=get_cooling_schedule(cooling, cooling_value),
        epsilon=epsilon,
        max_restarts=max_restarts,
        time_limit=time_limit,
        rng=random.Random(seed),
    )
    return _checked("SA", result)


def run_single_ga_experiment(params: GAParams) -> RunRecord:
    """Worker wrapper to invoke a single GA run (for parallel mapping)."""
    (
        N,
        pop_size,
        pm,
        max_gen,
        termination,
        threshold,
        max_epochs,
        p_random,
        objective,
        time_limit,
        seed,
    ) = params
    options = GeneticOptions(
        population_size=pop_size,
        mutation_rate=pm,
        max_generations=max_gen,
        termination=get_termination_policy(termination, threshold),
        mate_selector=SemiStochasticMostFitSelector(p_random),
        objective=get_objective(objective),
        max_epochs=max_epochs,
        time_limit=time_limit,
    )
    return _checked("GA", ga_nqueens(N, options, rng=random.Random(seed)))


# Parameter shaping ----------------------------------------------------------

def _seed(base_seed: Optional[int], N: int, run: int) -> Optional[int]:
    if base_seed is None:
        return None
    return base_seed + N * 10_000 + run


def hc_params(N: int, seed: Optional[int] = None) -> HCParams:
    return (N, settings.HC_PLATEAU_THRESHOLD, settings.HC_MAX_RESTARTS, settings.HC_TIME_LIMIT, seed)


def sa_params(N: int, seed: Optional[int] = None) -> SAParams:
    return (
        N,
        settings.SA_TEMPERATURE,
        settings.SA_COOLING,
        settings.SA_COOLING_VALUE,
        settings.SA_EPSILON,
        settings.SA_MAX_RESTARTS,
        settings.SA_TIME_LIMIT,
        seed,
    )


def ga_params(N: int, seed: Optional[int] = None) -> GAParams:
    return (
        N,
        settings.GA_POPULATION_SIZE,
        settings.GA_MUTATION_RATE,
        settings.GA_MAX_GENERATIONS,
        settings.GA_TERMINATION,
        settings.GA_CONVERGENCE_THRESHOLD,
        settings.GA_MAX_EPOCHS,
        settings.GA_RANDOM_MATE_PROBABILITY,
        settings.GA_OBJECTIVE,
        settings.GA_TIME_LIMIT,
        seed,
    )


_WORKERS: Dict[str, Tuple[Callable[..., Any], Callable[[int, Optional[int]], Any]]] = {
    "HC": (run_single_hc_experiment, hc_params),
    "SA": (run_single_sa_experiment, sa_params),
    "GA": (run_single_ga_experiment, ga_params),
}


def _select(algorithms: Optional[Sequence[str]]) -> List[str]:
    if not algorithms:
        return list(ALGORITHMS)
    unknown = [alg for alg in algorithms if alg not in ALGORITHMS]
    if unknown:
        raise ValueError("Unknown algorithm(s): " + ", ".join(unknown) + ". Available: " + ", ".join(ALGORITHMS))
    return [alg for alg in ALGORITHMS if alg in algorithms]


def _summarize(records: List[RunRecord]) -> Dict[str, Any]:
    entry = compute_grouped_statistics(records)
    entry["raw_runs"] = records
    return entry


# Runners --------------------------------------------------------------------

def run_experiments(
    N_values: List[int],
    runs: Optional[Dict[str, int]] = None,
    algorithms: Optional[Sequence[str]] = None,
    base_seed: Optional[int] = None,
    progress_label: Optional[str] = None,
) -> ExperimentResults:
    """Run sequential experiment batches.

    For each N in ``N_values`` and each selected algorithm, ``runs[alg]``
    independent runs are executed (``settings.RUNS_*`` by default). With a
    ``base_seed`` every run gets its own deterministic random stream.
    """
    selected = _select(algorithms)
    runs = runs or {"HC": settings.RUNS_HC, "SA": settings.RUNS_SA, "GA": settings.RUNS_GA}
    results: Any = {"HC": {}, "SA": {}, "GA": {}}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None

    for index, N in enumerate(N_values, start=1):
        if progress:
            progress.update(index, f"N={N}")
        print(f"=== N = {N}, {'+'.join(selected)} ===")
        for alg in selected:
            worker, shape = _WORKERS[alg]
            records = [worker(shape(N, _seed(base_seed, N, run))) for run in range(runs.get(alg, 0))]
            results[alg][N] = _summarize(records)
            print(f"  [{alg}] success rate {results[alg][N]['success_rate']:.2f} over {len(records)} runs")

    return results


def run_experiments_parallel(
    N_values: List[int],
    runs: Optional[Dict[str, int]] = None,
    algorithms: Optional[Sequence[str]] = None,
    base_seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    num_processes: Optional[int] = None,
) -> ExperimentResults:
    """Run experiment batches with a process pool (one task per run)."""
    selected = _select(algorithms)
    runs = runs or {"HC": settings.RUNS_HC, "SA": settings.RUNS_SA, "GA": settings.RUNS_GA}
    results: Any = {"HC": {}, "SA": {}, "GA": {}}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None
    workers = num_processes or settings.NUM_PROCESSES

    with ProcessPoolExecutor(max_workers=workers) as executor:
        for index, N in enumerate(N_values, start=1):
            if progress:
                progress.update(index, f"N={N}")
            print(f"=== N = {N}, {'+'.join(selected)} ({workers} processes) ===")
            for alg in selected:
                worker, shape = _WORKERS[alg]
                params = [shape(N, _seed(base_seed, N, run)) for run in range(runs.get(alg, 0))]
                records = list(executor.map(worker, params))
                results[alg][N] = _summarize(records)
                print(f"  [{alg}] success rate {results[alg][N]['success_rate']:.2f} over {len(records)} runs")

    return results
