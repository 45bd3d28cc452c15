"""Anomaly Detection package.

This package provides an Isolation Forest implementation for anomaly detection:
- isolation: randomized isolation trees, the forest ensemble and its persistence
- matrix: the rectangular numeric container the forest consumes
- config: YAML-backed forest configuration
"""

import logging

from . import isolation
from .config import ForestConfig, load_config
from .errors import (
    BuildError,
    ConfigError,
    EmptyInput,
    IndexOutOfRange,
    IsolationForestError,
    ModelFormatError,
    ScoreError,
    ShapeMismatch,
)
from .isolation import IsolationForest
from .matrix import Matrix, as_matrix

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "isolation",
    "IsolationForest",
    "Matrix",
    "as_matrix",
    "ForestConfig",
    "load_config",
    "IsolationForestError",
    "ShapeMismatch",
    "EmptyInput",
    "IndexOutOfRange",
    "BuildError",
    "ScoreError",
    "ModelFormatError",
    "ConfigError",
]
