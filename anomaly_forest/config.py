"""Isolation forest configuration, loaded from YAML."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import ConfigError

_BACKENDS = ("threading", "loky", "multiprocessing", "sequential")


@dataclass(frozen=True)
class ForestConfig:
    """Construction parameters of an IsolationForest."""
    sample_size: int = 0
    n_trees: int = 100
    n_jobs: int = 1
    backend: str = "threading"
    random_state: int | None = None
    contamination: float | None = None

    def validate(self) -> None:
        if not isinstance(self.sample_size, int) or self.sample_size < 0:
            raise ConfigError(f"sample_size must be a non-negative integer, got {self.sample_size!r}")
        if not isinstance(self.n_trees, int) or self.n_trees < 1:
            raise ConfigError(f"n_trees must be a positive integer, got {self.n_trees!r}")
        if not isinstance(self.n_jobs, int) or self.n_jobs == 0:
            raise ConfigError(f"n_jobs must be a non-zero integer, got {self.n_jobs!r}")
        if self.backend not in _BACKENDS:
            raise ConfigError(f"backend must be one of {_BACKENDS}, got {self.backend!r}")
        if self.random_state is not None and not isinstance(self.random_state, int):
            raise ConfigError(f"random_state must be an integer or null, got {self.random_state!r}")
        if self.contamination is not None and (
            not isinstance(self.contamination, (int, float)) or not 0.0 < self.contamination <= 0.5
        ):
            raise ConfigError(f"contamination must be in (0, 0.5], got {self.contamination!r}")

    @classmethod
    def from_dict(cls, section: Dict[str, Any]) -> ForestConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(section) - known
        if unknown:
            raise ConfigError(f"Unknown forest config keys: {sorted(unknown)}")
        config = cls(**section)
        config.validate()
        return config


def load_config(config_path: str | Path) -> ForestConfig:
    """
    Load a YAML configuration file.

    Args:
        config_path: Path to a YAML file with a top-level `forest` section

    Returns:
        Validated ForestConfig
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict) or 'forest' not in config:
        raise ConfigError("Missing required config section: forest")
    if config['forest'] is None:
        return ForestConfig()
    if not isinstance(config['forest'], dict):
        raise ConfigError("The forest config section must be a mapping")

    return ForestConfig.from_dict(config['forest'])
