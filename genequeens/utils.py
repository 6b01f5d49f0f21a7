"""Utility helpers for the N-Queens search engines.

This module provides reusable, low-level primitives that every engine
depends upon: two implementations to count the number of attacking queen
pairs, the complementary safe-pairs count, boundary validators and the
human-readable renderers used by the driver.

Representation
--------------
Boards are encoded as a 1D sequence where ``board[col] = row``. Vertical
attacks are impossible by construction since each column holds one queen.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Sequence

# Smallest board with a conflict-free placement
MIN_BOARD_SIZE = 4


def conflicts(board: Sequence[int]) -> int:
    """Compute the number of attacking queen pairs in O(N).

    Uses hash maps to count occurrences per row and diagonals and reduce the
    computation from O(N^2) to O(N). Suitable for repeated evaluations inside
    heuristic search algorithms.
    """
    row_count: Counter[int] = Counter()
    diag1: Counter[int] = Counter()
    diag2: Counter[int] = Counter()

    for column, row in enumerate(board):
        row_count[row] += 1
        diag1[row - column] += 1
        diag2[row + column] += 1

    def _pairs(counter: Counter[int]) -> int:
        total = 0
        for count in counter.values():
            if count > 1:
                total += count * (count - 1) // 2
        return total

    return _pairs(row_count) + _pairs(diag1) + _pairs(diag2)


def conflicts_on2(board: Sequence[int]) -> int:
    """Compute the number of attacking queen pairs in O(N^2).

    Reference implementation that checks every column pair ``(a, b)`` with
    ``a < b`` for a shared row or an equal absolute row/column difference.
    Prefer ``conflicts`` in performance-sensitive contexts.
    """
    n = len(board)
    conflicts_count = 0
    for i in range(n):
        for j in range(i + 1, n):
            if board[i] == board[j] or abs(board[i] - board[j]) == abs(i - j):
                conflicts_count += 1
    return conflicts_count


def max_pairs(n: int) -> int:
    """Return ``C(n, 2)``, the number of queen pairs on an ``n``-column board."""
    return n * (n - 1) // 2


def safe_pairs(board: Sequence[int]) -> int:
    """Return the number of non-attacking queen pairs.

    The maximum value is ``N*(N-1)/2`` for N queens, reached only by a
    solution.
    """
    return max_pairs(len(board)) - conflicts(board)


def is_valid_solution(board: Sequence[int]) -> bool:
    """Return True if the board represents a valid N-Queens solution.

    Contract
    - Input: sequence of length N where board[col] = row (0-based indices)
    - Valid if: all 0 <= row < N and no pairs of queens attack each other
    """
    n = len(board)
    if n == 0:
        return False
    for row in board:
        if not isinstance(row, int):
            return False
        if row < 0 or row >= n:
            return False
    return conflicts(board) == 0


# Boundary validation --------------------------------------------------------

def validate_board_size(size: int) -> int:
    """Reject board sizes that are not integers >= 4."""
    if isinstance(size, bool) or not isinstance(size, int):
        raise ValueError(f"Board size must be an integer, got {size!r}")
    if size < MIN_BOARD_SIZE:
        raise ValueError(f"Board size must be >= {MIN_BOARD_SIZE}, got {size}")
    return size


def validate_probability(value: float, name: str, open_interval: bool = False) -> float:
    """Reject values outside ``[0, 1]`` (or ``(0, 1)`` when ``open_interval``)."""
    if open_interval:
        if not 0.0 < value < 1.0:
            raise ValueError(f"{name} must be in (0, 1), got {value}")
    elif not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}")
    return value


def validate_positive(value: float, name: str) -> float:
    """Reject zero, negative and non-finite values."""
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a finite number > 0, got {value}")
    return value


# Rendering ------------------------------------------------------------------

def format_placement(board: Sequence[int]) -> str:
    """Return one ``QueenK: Row r Column c`` line per queen."""
    return "\n".join(
        f"Queen{column + 1}: Row {row} Column {column}" for column, row in enumerate(board)
    )


def render_board(board: Sequence[int]) -> str:
    """Return an ASCII grid with ``Q`` on occupied squares, row 0 on top."""
    size = len(board)
    lines = []
    for row in range(size):
        lines.append(" ".join("Q" if board[column] == row else "." for column in range(size)))
    return "\n".join(lines)
