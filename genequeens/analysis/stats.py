"""Typed result shapes and statistics helpers for the analysis pipeline.

Defines ``TypedDict`` structures for experiment outputs and provides utilities
to compute robust aggregate statistics across per-run result records.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict

import numpy as np

from genequeens.board import SearchResult

METRICS = ["time", "iterations", "evals", "best_conflicts", "restarts"]


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class RunRecord(TypedDict):
    success: bool
    iterations: int
    time: float
    best_conflicts: int
    evals: int
    timeout: bool
    restarts: int


class ResultEntry(TypedDict, total=False):
    success_rate: float
    timeout_rate: float
    failure_rate: float
    total_runs: int
    successes: int
    failures: int
    timeouts: int
    success_iterations: StatsSummary
    success_time: StatsSummary
    success_evals: StatsSummary
    failure_best_conflicts: StatsSummary
    all_iterations: StatsSummary
    all_time: StatsSummary
    all_evals: StatsSummary
    all_best_conflicts: StatsSummary
    all_restarts: StatsSummary
    raw_runs: List[RunRecord]


class ExperimentResults(TypedDict):
    HC: Dict[int, ResultEntry]
    SA: Dict[int, ResultEntry]
    GA: Dict[int, ResultEntry]


def record_from_result(result: SearchResult) -> RunRecord:
    """Flatten an engine ``SearchResult`` into a CSV-friendly record."""
    return {
        "success": result.success,
        "iterations": result.iterations,
        "time": result.elapsed,
        "best_conflicts": result.best_conflicts,
        "evals": result.evaluations,
        "timeout": result.timeout,
        "restarts": result.restarts,
    }


class ProgressPrinter:
    """Minimal, stdout-only progress reporter for long-running loops.

    Parameters
    ----------
    total : int
        Total number of steps/items expected. Values <= 0 are coerced to 1 to
        avoid division by zero when reporting percentages.
    label : str
        Short label printed in front of the progress counters.
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label

    def update(self, index: int, detail: str = "") -> None:
        """Print a single-line progress update to stdout."""
        percent = (index / self.total) * 100
        suffix = f" - {detail}" if detail else ""
        print(f"[{self.label}] {index}/{self.total} ({percent:.0f}%)" + suffix)


def compute_detailed_statistics(values: List[float]) -> StatsSummary:
    """Summarize a numeric sequence.

    Percentiles use numpy's linear interpolation and ``std`` is the
    population standard deviation. An empty sequence yields ``count=0`` and
    ``None`` everywhere else, so CSV columns and chart series stay aligned.
    """
    keys = ("mean", "median", "std", "min", "max", "q25", "q75", "range")
    if not values:
        summary: StatsSummary = {"count": 0}
        for key in keys:
            summary[key] = None  # type: ignore[literal-required]
        return summary

    data = np.asarray(values, dtype=float)
    q25, median, q75 = np.percentile(data, [25, 50, 75])
    return {
        "count": int(data.size),
        "mean": float(data.mean()),
        "median": float(median),
        "std": float(data.std()),
        "min": float(data.min()),
        "max": float(data.max()),
        "q25": float(q25),
        "q75": float(q75),
        "range": float(data.max() - data.min()),
    }


def compute_grouped_statistics(results_list: List[RunRecord]) -> Dict[str, Any]:
    """Aggregate metrics by outcome groups (success, failure, timeout).

    A run is a success when it found a conflict-free board, a timeout when
    its time limit stopped it, and a failure otherwise (non-convergence
    within its bounds). Rates, counters and ``<group>_<metric>`` summaries
    are returned for every metric in ``METRICS``.
    """
    successes = [r for r in results_list if r["success"]]
    timeouts = [r for r in results_list if r["timeout"]]
    failures = [r for r in results_list if not r["success"] and not r["timeout"]]
    total = len(results_list)

    stats: Dict[str, Any] = {
        "total_runs": total,
        "successes": len(successes),
        "failures": len(failures),
        "timeouts": len(timeouts),
        "success_rate": len(successes) / total if total else 0,
        "timeout_rate": len(timeouts) / total if total else 0,
        "failure_rate": len(failures) / total if total else 0,
    }

    groups = {"all": results_list, "success": successes, "timeout": timeouts, "failure": failures}
    for group, records in groups.items():
        if not records:
            continue
        for metric in METRICS:
            values = [float(r[metric]) for r in records]  # type: ignore[literal-required]
            stats[f"{group}_{metric}"] = compute_detailed_statistics(values)

    return stats
