"""Global settings and timeouts for the N-Queens analysis pipeline.

This module centralizes tunable constants used across the orchestration code.
Values can be overridden at runtime via the configuration loader in
`genequeens.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

import multiprocessing
from datetime import datetime
from typing import List, Optional

# Board sizes to evaluate (in ascending order) for scalability analysis
N_VALUES: List[int] = [8, 10, 12, 16]

# Number of independent runs per algorithm and board size
RUNS_HC: int = 20
RUNS_SA: int = 20
RUNS_GA: int = 20

# Per-run time limits in seconds (None = no limit)
HC_TIME_LIMIT: Optional[float] = 30.0  # Hill Climbing
SA_TIME_LIMIT: Optional[float] = 30.0  # Simulated Annealing
GA_TIME_LIMIT: Optional[float] = 60.0  # Genetic Algorithm

# Output directory for CSV and charts
OUT_DIR: str = "results_genequeens"

# Hill Climbing defaults
HC_PLATEAU_THRESHOLD: int = 5
HC_MAX_RESTARTS: Optional[int] = 1000  # None = unlimited

# Genetic Algorithm defaults (De Jong & Spears)
GA_POPULATION_SIZE: int = 50
GA_MUTATION_RATE: float = 0.001
GA_MAX_GENERATIONS: Optional[int] = 1000
GA_TERMINATION: str = "convergence"  # 'convergence' | 'goal'
GA_CONVERGENCE_THRESHOLD: int = 10
GA_MAX_EPOCHS: int = 1
GA_RANDOM_MATE_PROBABILITY: float = 0.10
GA_OBJECTIVE: str = "safe_pairs"  # 'safe_pairs' | 'conflicts'

# Simulated Annealing defaults
SA_TEMPERATURE: float = 100.0
SA_COOLING: str = "exponential"  # 'exponential' | 'geometric'
SA_COOLING_VALUE: Optional[float] = None  # rate or alpha; None = schedule default
SA_EPSILON: float = 1e-7
SA_MAX_RESTARTS: int = 0

# Number of worker processes to use (leave one core for the OS)
NUM_PROCESSES: int = max(1, multiprocessing.cpu_count() - 1)

# When True, results and plots carry a datestamp suffix (e.g., _20251113-142530)
DATE_IN_FILENAMES: bool = True

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")


def set_timeouts(
    hc_timeout: Optional[float] = 30.0,
    sa_timeout: Optional[float] = 30.0,
    ga_timeout: Optional[float] = 60.0,
) -> None:
    """Configure per-run time limits for all engines.

    Side effects
    - Updates module-level globals and prints a concise summary to stdout to
      make the active limits explicit at run start.
    """
    global HC_TIME_LIMIT, SA_TIME_LIMIT, GA_TIME_LIMIT
    HC_TIME_LIMIT = hc_timeout
    SA_TIME_LIMIT = sa_timeout
    GA_TIME_LIMIT = ga_timeout

    print("Timeout settings configured:")
    print(f"   - HC: {HC_TIME_LIMIT}s" if HC_TIME_LIMIT else "   - HC: unlimited")
    print(f"   - SA: {SA_TIME_LIMIT}s" if SA_TIME_LIMIT else "   - SA: unlimited")
    print(f"   - GA: {GA_TIME_LIMIT}s" if GA_TIME_LIMIT else "   - GA: unlimited")


def filename_suffix() -> str:
    """Return the datestamp suffix applied to output files, or ''."""
    return f"_{RUN_ID}" if DATE_IN_FILENAMES else ""
