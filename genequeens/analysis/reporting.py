"""CSV export utilities for experiment outputs (aggregates and raw runs).

These helpers materialize concise CSV summaries as well as full per-run raw
data for downstream analysis or spreadsheet inspection.
"""
from __future__ import annotations

import csv
import os
from typing import Any, Dict, List, Optional

from . import settings
from .stats import ExperimentResults

ALGORITHM_PREFIXES = (("HC", "hc"), ("SA", "sa"), ("GA", "ga"))


def _mean(entry: Dict[str, Any], key: str) -> Optional[float]:
    summary = entry.get(key)
    return summary.get("mean") if summary else None


def _median(entry: Dict[str, Any], key: str) -> Optional[float]:
    summary = entry.get(key)
    return summary.get("median") if summary else None


def save_results_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write compact per-N aggregate metrics for HC/SA/GA to CSV.

    Column names follow lowercase snake_case with algorithm prefixes
    (``hc_*``, ``sa_*``, ``ga_*``). Returns the path of the written file.
    """
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"results{settings.filename_suffix()}.csv")

    header = ["n"]
    for _, prefix in ALGORITHM_PREFIXES:
        header += [
            f"{prefix}_success_rate",
            f"{prefix}_timeout_rate",
            f"{prefix}_failure_rate",
            f"{prefix}_total_runs",
            f"{prefix}_success_iterations_mean",
            f"{prefix}_success_iterations_median",
            f"{prefix}_success_evals_mean",
            f"{prefix}_success_time_mean",
            f"{prefix}_success_time_median",
            f"{prefix}_failure_best_conflicts_mean",
            f"{prefix}_restarts_mean",
        ]

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for N in N_values:
            row: List[Any] = [N]
            for alg, _ in ALGORITHM_PREFIXES:
                entry: Dict[str, Any] = dict(results[alg].get(N, {}))  # type: ignore[literal-required]
                row += [
                    entry.get("success_rate"),
                    entry.get("timeout_rate"),
                    entry.get("failure_rate"),
                    entry.get("total_runs"),
                    _mean(entry, "success_iterations"),
                    _median(entry, "success_iterations"),
                    _mean(entry, "success_evals"),
                    _mean(entry, "success_time"),
                    _median(entry, "success_time"),
                    _mean(entry, "failure_best_conflicts"),
                    _mean(entry, "all_restarts"),
                ]
            writer.writerow(row)

    print(f"Aggregate results written to {filename}")
    return filename


def save_raw_data_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> List[str]:
    """Write one CSV per algorithm with every individual run.

    Returns the list of written paths (algorithms without runs are skipped).
    """
    os.makedirs(out_dir, exist_ok=True)
    written: List[str] = []
    fields = ["n", "run", "success", "timeout", "iterations", "time", "evals", "best_conflicts", "restarts"]

    for alg, prefix in ALGORITHM_PREFIXES:
        per_n = results[alg]  # type: ignore[literal-required]
        if not any(per_n.get(N, {}).get("raw_runs") for N in N_values):
            continue
        filename = os.path.join(out_dir, f"raw_data_{alg}{settings.filename_suffix()}.csv")
        with open(filename, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fields)
            writer.writeheader()
            for N in N_values:
                for run, record in enumerate(per_n.get(N, {}).get("raw_runs", []), start=1):
                    writer.writerow({"n": N, "run": run, **record})
        written.append(filename)
        print(f"Raw {prefix.upper()} runs written to {filename}")

    return written
