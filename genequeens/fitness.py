"""Scoring conventions shared by the search engines.

Two equivalent conventions are supported and each engine holds exactly one
of them fixed for a whole run:

- ``CONFLICTS``: number of attacking pairs, to be minimized (optimum 0).
- ``SAFE_PAIRS``: ``C(N, 2) - conflicts``, to be maximized (optimum
  ``C(N, 2)``).

Both induce the same ordering of boards, so switching convention never
changes which board an engine prefers, only the sign of the comparison.
Hill climbing and annealing use ``CONFLICTS``; the genetic engine defaults to
``SAFE_PAIRS`` and treats the score as fitness.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TypeVar

from .utils import conflicts, max_pairs, safe_pairs

T = TypeVar("T")


@dataclass(frozen=True)
class Objective:
    """A scoring function together with its optimization direction.

    Parameters
    ----------
    label : str
        Short name used by configuration files and reports.
    function : Callable[[Sequence[int]], int]
        Maps a placement ``board[col] = row`` to its score.
    maximize : bool
        True when higher scores are better.
    """

    label: str
    function: Callable[[Sequence[int]], int]
    maximize: bool

    def __call__(self, board: Sequence[int]) -> int:
        return self.function(board)

    def optimum(self, n: int) -> int:
        """Return the score of a solved ``n``-column board."""
        return max_pairs(n) if self.maximize else 0

    def is_optimal(self, score: float, n: int) -> bool:
        return score == self.optimum(n)

    def better(self, a: float, b: float) -> bool:
        """Return True when score ``a`` is strictly better than ``b``."""
        return a > b if self.maximize else a < b

    def best(self, items: Iterable[T], key: Callable[[T], float]) -> T:
        """Return the first item with the best score (ties keep iteration order)."""
        return max(items, key=key) if self.maximize else min(items, key=key)

    def rank_key(self, score: float) -> float:
        """Sort key placing better scores first in ascending order."""
        return -score if self.maximize else score


CONFLICTS = Objective("conflicts", conflicts, maximize=False)
SAFE_PAIRS = Objective("safe_pairs", safe_pairs, maximize=True)


def get_objective(mode: str) -> Objective:
    """Return a scoring convention by label.

    Parameters
    ----------
    mode : str
        One of ``"conflicts"`` or ``"safe_pairs"``.
    """
    mapping = {
        CONFLICTS.label: CONFLICTS,
        SAFE_PAIRS.label: SAFE_PAIRS,
    }
    try:
        return mapping[mode]
    except KeyError as exc:
        raise ValueError(f"Unknown objective: {mode}") from exc
