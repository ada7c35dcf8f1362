"""Configuration management for the N-Queens search tracer.

This module provides a thin, explicit wrapper around a JSON configuration file
to centralize benchmark settings, timeouts, hill-climbing defaults and board
size limits.

File format (high-level)
------------------------
- experiment_settings: N values, run counts, base seed and output directory.
- timeout_settings: per-engine time limits in seconds (null = unlimited).
- hill_climbing: default restart/sideways/cycle-window knobs.
- limits: ``max_board_size`` accepted by the engines.

All methods return Python native types; the class does not validate semantics
beyond presence of keys to keep responsibilities minimal.
"""
import json
from pathlib import Path


class ConfigManager:
    """Load, query, and persist configuration.

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
            return json.load(f)

    def save_config(self):
        """Persist the current in-memory configuration to disk."""
        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get_experiment_settings(self):
        """Return benchmark settings (sizes, runs, seed, output dir)."""
        return self.config.get("experiment_settings", {})

    def get_timeout_settings(self):
        """Return per-engine timeout settings."""
        return self.config.get("timeout_settings", {})

    def get_hill_climbing_settings(self):
        """Return the hill-climbing defaults section."""
        return self.config.get("hill_climbing", {})

    def get_max_board_size(self, default=None):
        """Return the configured board size limit, or ``default``."""
        return self.config.get("limits", {}).get("max_board_size", default)

    def update_setting(self, section, key, value):
        """Update a specific setting and persist the change immediately."""
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value
        self.save_config()
