"""Visualization utilities for analysis outputs.

Charts are written as PNG files into ``out_dir``. Filenames are prefixed by a
two-digit index for stable ordering and carry the datestamp suffix from
``genequeens.analysis.settings`` when enabled.

Chart map
---------
- 01_success_rate_vs_N.png: successes / total_runs per algorithm.
- 02_time_vs_N_log_scale.png: mean wall-clock time of successful runs.
- 03_logical_cost_vs_N.png: mean iterations of successful runs
  (HC climbing steps, SA moves, GA generations).
- 04_evaluations_vs_N.png: mean boards evaluated by successful runs.
- 05_timeout_rate_vs_N.png: fraction of runs stopped by their time limit.
- 06_failure_quality_vs_N.png: mean best conflicts among failed runs
  (proximity to the optimum, 0 is optimal).
- 07_time_distribution.png: per-run time distribution (box plot).
"""
from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import seaborn as sns  # noqa: E402

from . import settings  # noqa: E402
from .stats import ExperimentResults  # noqa: E402

LABELS = {"HC": "Hill Climbing", "SA": "Simulated Annealing", "GA": "Genetic Algorithm"}
MARKERS = {"HC": "o", "SA": "s", "GA": "^"}


def _present(results: ExperimentResults, N_values: List[int]) -> List[str]:
    return [alg for alg in ("HC", "SA", "GA") if any(results[alg].get(N) for N in N_values)]  # type: ignore[literal-required]


def _series(results: ExperimentResults, alg: str, N_values: List[int], key: str, stat: Optional[str] = None) -> np.ndarray:
    """Return one value per N (NaN where the metric is missing)."""
    values = []
    for N in N_values:
        entry: Dict[str, Any] = results[alg].get(N, {})  # type: ignore[literal-required]
        value = entry.get(key)
        if stat is not None:
            value = value.get(stat) if value else None
        values.append(np.nan if value is None else float(value))
    return np.array(values, dtype=float)


def _line_chart(
    results: ExperimentResults,
    N_values: List[int],
    out_dir: str,
    filename: str,
    key: str,
    stat: Optional[str],
    ylabel: str,
    title: str,
    log_scale: bool = False,
    unit_interval: bool = False,
) -> str:
    plt.figure(figsize=(12, 8))
    for alg in _present(results, N_values):
        values = _series(results, alg, N_values, key, stat)
        if log_scale:
            values = np.maximum(values, 1e-6)
        plt.plot(N_values, values, marker=MARKERS[alg], linewidth=2, markersize=8, label=LABELS[alg])
    if log_scale:
        plt.yscale("log")
    if unit_interval:
        plt.ylim(-0.05, 1.05)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel(ylabel, fontsize=12)
    plt.title(title, fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)

    fname = os.path.join(out_dir, f"{filename}{settings.filename_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved chart: {fname}")
    return fname


def plot_time_distribution(results: ExperimentResults, N_values: List[int], out_dir: str) -> Optional[str]:
    """Box plot of per-run wall-clock time grouped by N and algorithm."""
    xs: List[int] = []
    ys: List[float] = []
    hues: List[str] = []
    for alg in _present(results, N_values):
        for N in N_values:
            for record in results[alg].get(N, {}).get("raw_runs", []):  # type: ignore[literal-required]
                xs.append(N)
                ys.append(record["time"])
                hues.append(LABELS[alg])
    if not ys:
        return None

    plt.figure(figsize=(12, 8))
    sns.boxplot(x=xs, y=ys, hue=hues)
    plt.yscale("log")
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Time per run [s] (log scale)", fontsize=12)
    plt.title("Run Time Distribution", fontsize=14)
    fname = os.path.join(out_dir, f"07_time_distribution{settings.filename_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved chart: {fname}")
    return fname


def plot_and_save(results: ExperimentResults, N_values: List[int], out_dir: str) -> List[str]:
    """Generate the full chart set and return the written paths."""
    os.makedirs(out_dir, exist_ok=True)
    sns.set_theme(style="whitegrid")

    written = [
        _line_chart(results, N_values, out_dir, "01_success_rate_vs_N", "success_rate", None,
                    "Success rate", "Success Rate vs Problem Size", unit_interval=True),
        _line_chart(results, N_values, out_dir, "02_time_vs_N_log_scale", "success_time", "mean",
                    "Average time [s] (log scale)", "Execution Time vs Problem Size (successful runs)",
                    log_scale=True),
        _line_chart(results, N_values, out_dir, "03_logical_cost_vs_N", "success_iterations", "mean",
                    "Iterations (log scale)", "Logical Cost vs Problem Size (HC steps / SA moves / GA generations)",
                    log_scale=True),
        _line_chart(results, N_values, out_dir, "04_evaluations_vs_N", "success_evals", "mean",
                    "Boards evaluated (log scale)", "Objective Evaluations vs Problem Size", log_scale=True),
        _line_chart(results, N_values, out_dir, "05_timeout_rate_vs_N", "timeout_rate", None,
                    "Timeout rate", "Timeout Rate vs Problem Size", unit_interval=True),
        _line_chart(results, N_values, out_dir, "06_failure_quality_vs_N", "failure_best_conflicts", "mean",
                    "Average best conflicts", "Solution Quality of Failed Runs"),
    ]
    distribution = plot_time_distribution(results, N_values, out_dir)
    if distribution:
        written.append(distribution)
    return written
