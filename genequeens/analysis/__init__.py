"""
Analysis and orchestration package for N-Queens experiments.

This package contains:
- settings: global knobs, engine defaults and timeouts
- stats: typed summaries and aggregation helpers
- experiments: batch runners for HC/SA/GA
- reporting: CSV exports and raw-data writers
- plots: visualization utilities
- cli: top-level entry point, single-run driver and argument parser
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    ExperimentResults,
    ProgressPrinter,
    ResultEntry,
    RunRecord,
    StatsSummary,
    compute_detailed_statistics,
    compute_grouped_statistics,
    record_from_result,
)

__all__ = [
    # types
    "StatsSummary",
    "RunRecord",
    "ResultEntry",
    "ExperimentResults",
    # utils
    "compute_detailed_statistics",
    "compute_grouped_statistics",
    "record_from_result",
    "ProgressPrinter",
    # settings module
    "settings",
]
