"""Steepest-ascent Hill Climbing with random restarts for N-Queens.

The search is a small state machine over ``ClimbState``:

- INITIALIZED: a random (or caller-supplied) placement becomes current.
- EXPLORING: the whole one-move neighborhood is scored and the best
  neighbor (first one in neighborhood order on ties) is compared with the
  current board. A strictly better neighbor is adopted and resets the
  plateau counter. An equal one is adopted too but bumps the counter, and
  crossing ``plateau_threshold`` moves to RESTARTING. A strictly worse one
  means either SOLVED (current has zero conflicts) or STUCK (local optimum).
- STUCK / RESTARTING: a fresh random placement replaces current.
- SOLVED: terminal.

Contract (public API)
---------------------
- Input: board size ``size >= 4`` plus plateau tolerance and optional
  safety bounds (``max_restarts``, ``max_iter``, ``time_limit``).
- Output: a ``SearchResult``; ``success`` is False when a bound stopped the
  search, in which case ``placement`` is the least-conflicted board seen.

With unlimited restarts the search terminates with probability one but has
no bounded running time; callers wanting a guarantee should set a bound.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from time import perf_counter
from typing import Optional, Sequence

from .board import SearchResult, initial_state, neighbors, random_placement
from .fitness import CONFLICTS
from .utils import validate_board_size, validate_positive

logger = logging.getLogger(__name__)

DEFAULT_PLATEAU_THRESHOLD = 5


class ClimbState(Enum):
    INITIALIZED = "initialized"
    EXPLORING = "exploring"
    STUCK = "stuck"
    RESTARTING = "restarting"
    SOLVED = "solved"


def hc_nqueens(
    size: int,
    plateau_threshold: int = DEFAULT_PLATEAU_THRESHOLD,
    max_restarts: Optional[int] = None,
    max_iter: Optional[int] = None,
    time_limit: Optional[float] = None,
    initial: Optional[Sequence[int]] = None,
    rng: Optional[random.Random] = None,
) -> SearchResult:
    """Run steepest-ascent Hill Climbing with plateau tolerance and restarts.

    Parameters
    ----------
    size : int
        Board dimension N (>= 4).
    plateau_threshold : int, default 5
        Number of consecutive sideways moves tolerated before a restart.
    max_restarts : int | None
        Cap on random restarts; None allows an unlimited number.
    max_iter : int | None
        Cap on exploration steps across all restarts.
    time_limit : float | None
        Optional wall-clock time limit in seconds.
    initial : Sequence[int] | None
        Starting placement; a random one is drawn when omitted.
    rng : random.Random | None
        Random stream for the whole run; a fresh one is created when omitted.

    Returns
    -------
    SearchResult
        ``iterations`` counts exploration steps and ``evaluations`` counts
        every scored board, including neighbors.
    """
    validate_board_size(size)
    if plateau_threshold < 0:
        raise ValueError(f"plateau_threshold must be >= 0, got {plateau_threshold}")
    if time_limit is not None:
        validate_positive(time_limit, "time_limit")
    rng = rng if rng is not None else random.Random()

    start = perf_counter()
    state = ClimbState.INITIALIZED
    current = best = initial_state(size, initial, rng, CONFLICTS)
    plateau_count = 0
    iterations = 0
    restarts = 0
    evaluations = 0
    timeout = False

    while state is not ClimbState.SOLVED:
        if state is ClimbState.INITIALIZED:
            evaluations += 1
            state = ClimbState.EXPLORING

        elif state in (ClimbState.STUCK, ClimbState.RESTARTING):
            if max_restarts is not None and restarts >= max_restarts:
                break
            logger.debug("Random restart after %s (score=%s)", state.value, current.score)
            restarts += 1
            current = random_placement(size, rng, CONFLICTS)
            evaluations += 1
            plateau_count = 0
            if current.score < best.score:
                best = current
            state = ClimbState.EXPLORING

        else:
            if time_limit is not None and (perf_counter() - start) > time_limit:
                timeout = True
                break
            if max_iter is not None and iterations >= max_iter:
                break
            iterations += 1

            candidates = neighbors(current, CONFLICTS)
            evaluations += len(candidates)
            successor = CONFLICTS.best(candidates, key=lambda board: board.score)

            if successor.score > current.score:
                state = ClimbState.SOLVED if current.score == 0 else ClimbState.STUCK
            elif successor.score < current.score:
                current = successor
                plateau_count = 0
            else:
                current = successor
                plateau_count += 1
                if plateau_count > plateau_threshold:
                    state = ClimbState.RESTARTING

            if current.score < best.score:
                best = current

    elapsed = perf_counter() - start
    if state is ClimbState.SOLVED:
        return SearchResult(True, iterations, elapsed, 0, evaluations, False, current.placement, restarts)
    return SearchResult(False, iterations, elapsed, int(best.score), evaluations, timeout, best.placement, restarts)
