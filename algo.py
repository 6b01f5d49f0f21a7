"""Entry point for the N-Queens metaheuristics suite.

Examples
--------
    python algo.py --alg HC --size 8
    python algo.py --alg GA --size 8 --mutation-rate 0.05 --population-size 100
    python algo.py --alg SA --size 8 --temperature 100
    python algo.py --mode parallel --config config.json
    python algo.py --quick-test
"""

from genequeens.analysis.cli import main, run_quick_regression_tests

__all__ = ["main", "run_quick_regression_tests"]


if __name__ == "__main__":
    main()
