"""Board states, neighborhoods and the engine result record.

A ``BoardState`` is an immutable value: a tuple placement ``board[col] = row``
plus the score it was evaluated to under one ``Objective``. Any change (a
queen move, a crossover, a mutation) produces a new instance.

Neighborhood
------------
The one-move neighborhood of a placement holds every board obtained by
relocating a single queen within its own column, so it has exactly
``N * (N - 1)`` members and never contains the parent. Building it costs
O(N^3) with the pairwise evaluation and O(N^2) with ``conflicts``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .fitness import CONFLICTS, Objective

Placement = Tuple[int, ...]


@dataclass(frozen=True)
class BoardState:
    """One placement of N queens and its score."""

    placement: Placement
    score: float

    @classmethod
    def evaluate(cls, placement: Sequence[int], objective: Objective = CONFLICTS) -> "BoardState":
        """Build a state from ``placement`` scored under ``objective``."""
        frozen = tuple(placement)
        return cls(frozen, objective(frozen))

    @property
    def size(self) -> int:
        return len(self.placement)

    def move(self, column: int, row: int, objective: Objective = CONFLICTS) -> "BoardState":
        """Return the state with the queen of ``column`` relocated to ``row``."""
        changed = list(self.placement)
        changed[column] = row
        return BoardState.evaluate(changed, objective)


class SearchResult(NamedTuple):
    """Outcome of one engine run.

    ``success`` is False when the run ended without an optimal board; the
    best placement seen is still reported in ``placement``.
    """

    success: bool
    iterations: int
    elapsed: float
    best_conflicts: int
    evaluations: int
    timeout: bool
    placement: Placement
    restarts: int = 0
    population: Tuple[BoardState, ...] = ()


def random_placement(
    n: int, rng: Optional[random.Random] = None, objective: Objective = CONFLICTS
) -> BoardState:
    """Return a board with one queen per column on a uniformly random row."""
    rng = rng if rng is not None else random.Random()
    return BoardState.evaluate([rng.randrange(n) for _ in range(n)], objective)


def initial_state(
    size: int,
    initial: Optional[Sequence[int]],
    rng: random.Random,
    objective: Objective = CONFLICTS,
) -> BoardState:
    """Return ``initial`` as a scored state, or a random one when it is None.

    Raises
    ------
    ValueError
        If ``initial`` has the wrong length or a row outside ``[0, size)``.
    """
    if initial is None:
        return random_placement(size, rng, objective)
    if len(initial) != size:
        raise ValueError(f"Initial placement has {len(initial)} columns, expected {size}")
    if any(row < 0 or row >= size for row in initial):
        raise ValueError(f"Initial placement has rows outside [0, {size}): {list(initial)}")
    return BoardState.evaluate(initial, objective)


def neighbors(state: BoardState, objective: Objective = CONFLICTS) -> List[BoardState]:
    """Return the full one-move neighborhood of ``state``.

    Columns are visited left to right and rows top to bottom; the current row
    of each column is skipped so the parent never appears in the result.
    """
    placement = state.placement
    n = len(placement)
    result: List[BoardState] = []
    for column in range(n):
        current_row = placement[column]
        for row in range(n):
            if row == current_row:
                continue
            result.append(state.move(column, row, objective))
    return result


def random_neighbor(
    state: BoardState, rng: random.Random, objective: Objective = CONFLICTS
) -> BoardState:
    """Draw one member of ``neighbors(state)`` uniformly at random.

    Every (column, new row) pair yields a distinct neighbor, so sampling the
    pair uniformly is the same distribution as choosing from the list.
    """
    n = state.size
    column = rng.randrange(n)
    row = rng.randrange(n - 1)
    if row >= state.placement[column]:
        row += 1
    return state.move(column, row, objective)
