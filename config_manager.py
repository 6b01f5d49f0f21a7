"""Configuration management for the N-Queens metaheuristics suite.

This module provides a thin, explicit wrapper around a JSON configuration file
to centralize experiment settings, timeouts and the default parameters of
each search engine.

File format (high-level)
------------------------
- experiment_settings: board sizes, run counts per algorithm, output dir, seed.
- timeout_settings: per-algorithm time limits in seconds (null = unlimited).
- hill_climbing: plateau_threshold, max_restarts.
- genetic: population_size, mutation_rate, max_generations, termination,
  convergence_threshold, max_epochs, random_mate_probability, objective
  ("safe_pairs" or "conflicts").
- annealing: initial_temperature, cooling, cooling_value, epsilon,
  max_restarts.

All methods return Python native types; the class does not validate semantics
beyond presence of keys to keep responsibilities minimal. Range checks happen
in the engines when the values are used.
"""
import json
from pathlib import Path


class ConfigManager:
    """Load and query configuration.

    Parameters
    ----------
    config_path : str | os.PathLike, default "config.json"
        Path to the configuration file.
    """

    def __init__(self, config_path="config.json"):
        self.config_path = Path(config_path)
        self.config = self.load_config()

    def load_config(self):
        """Load and parse the JSON configuration file.

        Returns
        -------
        dict
            Root configuration object.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}\n"
                f"Create it or use the default config.json template"
            )

        with open(self.config_path, 'r') as f:
            config = json.load(f)
        if not isinstance(config, dict):
            raise ValueError(f"Configuration root must be an object: {self.config_path}")
        return config

    def section(self, name):
        """Return the mapping stored under ``name`` (empty when absent)."""
        value = self.config.get(name, {})
        if not isinstance(value, dict):
            raise ValueError(f"Section '{name}' must be an object in {self.config_path}")
        return value

    def get_experiment_settings(self):
        """Board sizes, runs per algorithm, output directory and seed."""
        return self.section("experiment_settings")

    def get_timeout_settings(self):
        return self.section("timeout_settings")

    def get_hill_climbing_settings(self):
        return self.section("hill_climbing")

    def get_genetic_settings(self):
        return self.section("genetic")

    def get_annealing_settings(self):
        return self.section("annealing")
