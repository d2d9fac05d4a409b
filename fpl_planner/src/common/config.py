"""
Configuration management for FPL Planner.

Settings live in ``settings.yaml`` next to ``pyproject.toml``; secrets and
per-user values (entry id, preferred league) come from the environment or
a ``.env`` file.
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from dotenv import load_dotenv


# Load environment variables
load_dotenv()


def find_project_root(start: Optional[Path] = None) -> Path:
    """Walk up from ``start`` to the directory holding pyproject.toml."""
    current = (start or Path(__file__)).resolve()
    for candidate in [current, *current.parents]:
        if (candidate / "pyproject.toml").exists():
            return candidate
    raise RuntimeError("Could not find project root (pyproject.toml not found)")


class Config:
    """Dot-notation view over settings.yaml plus environment lookups."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: YAML settings file (settings.yaml in the project root if None)
        """
        if config_path is None:
            self.project_root = find_project_root(Path(__file__).parent)
            self.config_path = self.project_root / "settings.yaml"
        else:
            self.config_path = Path(config_path)
            self.project_root = self.config_path.parent

        self._config = self._load()

        base_path = self.project_root / "fpl_planner"
        self.cache_dir = base_path / self.get("io.cache_dir", "cache")
        self.logs_dir = base_path / self.get("io.logs_dir", "logs")
        for directory in (self.cache_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Top level of {self.config_path} must be a mapping")
        return data or {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a setting by dotted path, e.g. ``config.get("league.max_entries", 50)``.
        """
        node: Any = self._config
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return os.getenv(key, default)

    def get_int_env(self, key: str) -> Optional[int]:
        """Integer environment variable, None when unset or empty."""
        raw = self.get_env(key)
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"{key} must be an integer, got {raw!r}")

    def get_entry_id(self) -> Optional[int]:
        return self.get_int_env("FPL_ENTRY_ID")

    def get_league_id(self) -> Optional[int]:
        return self.get_int_env("FPL_LEAGUE_ID")

    def get_risk_thresholds(self) -> Dict[str, Dict[str, Any]]:
        """Per-risk-type overrides from the ``risk:`` block."""
        return self.get("risk", {}) or {}


# Global configuration instance
_config = None


def get_config(config_path: Optional[str] = None) -> Config:
    """
    Get global configuration instance.

    Args:
        config_path: Path to config file (only used on first call)
    """
    global _config
    if _config is None:
        _config = Config(config_path)
    return _config


def get_logger(name: str) -> logging.Logger:
    """
    Logger for ``name``, configuring logging on first use.
    """
    # Import here to avoid circular imports
    from .logging_setup import setup_logging

    if not logging.getLogger().handlers:
        setup_logging()

    return logging.getLogger(name)
