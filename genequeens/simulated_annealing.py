"""Simulated Annealing solver for the N-Queens problem.

At each iteration the temperature is cooled, a uniformly random member of
the one-move neighborhood of the current board is proposed, and the move is
accepted if it does not increase the number of conflicts or, otherwise, with
Metropolis probability ``exp(-delta / T)``.

Contract (public API)
---------------------
- Input: problem size ``size >= 4``, initial temperature ``T0 > 0`` and a
  cooling schedule.
- Output: a ``SearchResult``. A cool-down ends when the board is solved or
  the temperature falls below ``epsilon``; in the latter case the run is
  restarted from a fresh random board and ``T0`` up to ``max_restarts``
  times before reporting ``success=False`` with the best board seen.

Cooling schedules
-----------------
A schedule maps ``(T0, iteration, size)`` to the temperature of that
iteration. Both shipped schedules are strictly decreasing in the iteration
and tend to zero, so every cool-down terminates.
"""

from __future__ import annotations

import logging
import math
import random
from time import perf_counter
from typing import Callable, Optional, Sequence

from .board import SearchResult, initial_state, random_neighbor, random_placement
from .fitness import CONFLICTS
from .utils import validate_board_size, validate_positive

logger = logging.getLogger(__name__)

CoolingSchedule = Callable[[float, int, int], float]

DEFAULT_TEMPERATURE = 100.0
DEFAULT_EPSILON = 1e-7
DEFAULT_COOLING_RATE = 1e-3


class ExponentialCooling:
    """Newton-style cooling ``T0 * exp(-rate * size * iteration)``.

    Larger boards cool faster per iteration; ``rate`` tunes the overall pace.
    """

    def __init__(self, rate: float = DEFAULT_COOLING_RATE):
        self.rate = validate_positive(rate, "rate")

    def __call__(self, t0: float, iteration: int, size: int) -> float:
        return t0 * math.exp(-self.rate * size * iteration)

    def __repr__(self) -> str:
        return f"ExponentialCooling(rate={self.rate})"


class GeometricCooling:
    """Geometric cooling ``T0 * alpha ** iteration`` with ``0 < alpha < 1``."""

    def __init__(self, alpha: float = 0.995):
        if not math.isfinite(alpha) or not 0.0 < alpha < 1.0:
            raise ValueError(f"alpha must be in (0, 1), got {alpha}")
        self.alpha = alpha

    def __call__(self, t0: float, iteration: int, size: int) -> float:
        return t0 * self.alpha ** iteration

    def __repr__(self) -> str:
        return f"GeometricCooling(alpha={self.alpha})"


def get_cooling_schedule(mode: str, value: Optional[float] = None) -> CoolingSchedule:
    """Return a cooling schedule by label (``"exponential"`` or ``"geometric"``)."""
    if mode == "exponential":
        return ExponentialCooling(DEFAULT_COOLING_RATE if value is None else value)
    if mode == "geometric":
        return GeometricCooling(0.995 if value is None else value)
    raise ValueError(f"Unknown cooling schedule: {mode}")


def accept(delta: float, temperature: float, rng: random.Random) -> bool:
    """Metropolis criterion for a move that changes the conflict count by ``delta``."""
    if delta <= 0:
        return True
    return rng.random() < math.exp(-delta / temperature)


def sa_nqueens(
    size: int,
    T0: float = DEFAULT_TEMPERATURE,
    cooling: Optional[CoolingSchedule] = None,
    epsilon: float = DEFAULT_EPSILON,
    max_iter: Optional[int] = None,
    max_restarts: int = 0,
    time_limit: Optional[float] = None,
    initial: Optional[Sequence[int]] = None,
    rng: Optional[random.Random] = None,
) -> SearchResult:
    """Run Simulated Annealing to minimize conflicts in the N-Queens problem.

    Parameters
    ----------
    size : int
        Board dimension N (>= 4).
    T0 : float, default 100.0
        Initial temperature of every cool-down.
    cooling : CoolingSchedule | None
        Temperature schedule; ``ExponentialCooling()`` when omitted.
    epsilon : float, default 1e-7
        Temperature floor ending a cool-down.
    max_iter : int | None
        Cap on iterations across all cool-downs.
    max_restarts : int, default 0
        Fresh cool-downs allowed after a failed one.
    time_limit : float | None
        Optional wall-clock time limit in seconds.
    initial : Sequence[int] | None
        Starting placement of the first cool-down.
    rng : random.Random | None
        Random stream for the whole run; a fresh one is created when omitted.

    Returns
    -------
    SearchResult
        ``iterations`` counts annealing moves proposed, ``evaluations`` the
        boards scored, ``restarts`` the extra cool-downs performed.
    """
    validate_board_size(size)
    validate_positive(T0, "T0")
    validate_positive(epsilon, "epsilon")
    if max_restarts < 0:
        raise ValueError(f"max_restarts must be >= 0, got {max_restarts}")
    if time_limit is not None:
        validate_positive(time_limit, "time_limit")
    cooling = cooling if cooling is not None else ExponentialCooling()
    rng = rng if rng is not None else random.Random()

    start = perf_counter()
    current = best = initial_state(size, initial, rng, CONFLICTS)
    evaluations = 1
    iterations = 0
    restarts = 0
    timeout = False
    exhausted = False

    while current.score != 0:
        step = 0
        while True:
            if time_limit is not None and (perf_counter() - start) > time_limit:
                timeout = True
                break
            if max_iter is not None and iterations >= max_iter:
                exhausted = True
                break
            temperature = cooling(T0, step + 1, size)
            if temperature < epsilon:
                break
            step += 1
            iterations += 1

            candidate = random_neighbor(current, rng, CONFLICTS)
            evaluations += 1
            if accept(candidate.score - current.score, temperature, rng):
                current = candidate
                if current.score < best.score:
                    best = current
                if current.score == 0:
                    break

        if current.score == 0 or timeout or exhausted or restarts >= max_restarts:
            break
        restarts += 1
        logger.debug("Cooled down at %d conflicts, restarting (restart %d)", current.score, restarts)
        current = random_placement(size, rng, CONFLICTS)
        evaluations += 1
        if current.score < best.score:
            best = current

    elapsed = perf_counter() - start
    if current.score == 0:
        return SearchResult(True, iterations, elapsed, 0, evaluations, False, current.placement, restarts)
    return SearchResult(False, iterations, elapsed, int(best.score), evaluations, timeout, best.placement, restarts)
