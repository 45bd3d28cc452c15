"""Isolation Forest implementation for anomaly detection.

This package provides the standard Isolation Forest algorithm using random
partitioning of the feature space.
"""

from .forest import IsolationForest
from .plotting import plot_partition_space_2D
from .scoring import (
    EULER_GAMMA,
    adjusted_path_lengths,
    anomaly_scores,
    average_path_length,
    path_length,
    path_lengths_batch,
)
from .serialization import forest_from_dict, forest_to_dict, load_forest, save_forest
from .splitter import RandomSplitter
from .tree import DecisionNode, IsolationTree, LeafNode, Node, grow_tree, height_limit_for

__all__ = [
    "DecisionNode",
    "LeafNode",
    "Node",
    "IsolationTree",
    "IsolationForest",
    "RandomSplitter",
    "grow_tree",
    "height_limit_for",
    "path_length",
    "path_lengths_batch",
    "adjusted_path_lengths",
    "average_path_length",
    "anomaly_scores",
    "EULER_GAMMA",
    "forest_to_dict",
    "forest_from_dict",
    "save_forest",
    "load_forest",
    "plot_partition_space_2D",
]
