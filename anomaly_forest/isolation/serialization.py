"""
Model persistence for fitted isolation forests.

A forest is stored as a nested record mirroring the node model:

    {"sample_size": 256, "n_trees": 100, "n_features": 4, "height_limit": 8,
     "anomaly_threshold": 0.5,
     "trees": [{"left": {...}, "right": {...}, "split_attribute": 2, "split_value": 0.13},
               {"size": 3}, ...]}

Decision nodes carry left/right/split_attribute/split_value, leaves carry size.
Floats survive a JSON round trip exactly, so a reloaded forest produces the same
scores as the original.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..errors import ModelFormatError
from .tree import DecisionNode, LeafNode, Node

if TYPE_CHECKING:
    from .forest import IsolationForest

logger = logging.getLogger(__name__)

_DECISION_KEYS = {"left", "right", "split_attribute", "split_value"}
_LEAF_KEYS = {"size"}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def node_to_dict(node: Node) -> dict[str, Any]:
    if isinstance(node, LeafNode):
        return {"size": node.size}
    return {
        "left": node_to_dict(node.left),
        "right": node_to_dict(node.right),
        "split_attribute": node.split_attribute,
        "split_value": node.split_value,
    }


def node_from_dict(record: Any, n_features: int | None = None) -> Node:
    """
    Rebuild a node (and its subtree) from its record.
    Raises:
        ModelFormatError: unknown record layout, bad field types, or a split
            attribute outside [0, n_features).
    """
    if not isinstance(record, dict):
        raise ModelFormatError(f"node record must be a mapping, got {type(record).__name__}")

    keys = set(record)
    if keys == _LEAF_KEYS:
        size = record["size"]
        if not _is_int(size) or size < 0:
            raise ModelFormatError(f"leaf size must be a non-negative integer, got {size!r}")
        return LeafNode(size=size)

    if keys == _DECISION_KEYS:
        split_attribute = record["split_attribute"]
        split_value = record["split_value"]
        if not _is_int(split_attribute) or split_attribute < 0:
            raise ModelFormatError(f"invalid split_attribute {split_attribute!r}")
        if n_features is not None and split_attribute >= n_features:
            raise ModelFormatError(
                f"split_attribute {split_attribute} out of range for {n_features} features"
            )
        if isinstance(split_value, bool) or not isinstance(split_value, (int, float)):
            raise ModelFormatError(f"invalid split_value {split_value!r}")
        return DecisionNode(
            left=node_from_dict(record["left"], n_features),
            right=node_from_dict(record["right"], n_features),
            split_attribute=split_attribute,
            split_value=float(split_value),
        )

    raise ModelFormatError(f"unrecognised node record with keys {sorted(keys)}")


def forest_to_dict(forest: IsolationForest) -> dict[str, Any]:
    return {
        "sample_size": forest.sample_size,
        "n_trees": forest.n_trees,
        "n_features": forest.n_features,
        "height_limit": forest.height_limit,
        "anomaly_threshold": forest.anomaly_threshold,
        "trees": [node_to_dict(root) for root in forest.trees],
    }


def forest_from_dict(record: Any, **kwargs: Any) -> IsolationForest:
    """
    Args:
        record: Output of forest_to_dict.
        kwargs: Extra IsolationForest constructor arguments (n_jobs, backend, ...).
    Returns:
        A forest scoring exactly like the one the record was made from.
    """
    from .forest import IsolationForest

    if not isinstance(record, dict):
        raise ModelFormatError("forest record must be a mapping")
    missing = {"sample_size", "n_trees", "trees"} - set(record)
    if missing:
        raise ModelFormatError(f"forest record is missing {sorted(missing)}")

    sample_size = record["sample_size"]
    n_trees = record["n_trees"]
    trees = record["trees"]
    n_features = record.get("n_features")
    if not _is_int(sample_size) or sample_size < 0:
        raise ModelFormatError(f"invalid sample_size {sample_size!r}")
    if not _is_int(n_trees) or n_trees < 1:
        raise ModelFormatError(f"invalid n_trees {n_trees!r}")
    if not isinstance(trees, list):
        raise ModelFormatError("trees must be a list of node records")
    if trees and len(trees) != n_trees:
        raise ModelFormatError(f"record holds {len(trees)} trees, expected {n_trees}")
    if trees and (sample_size == 0 or not _is_int(n_features) or n_features < 1):
        raise ModelFormatError("a fitted forest record needs sample_size and n_features")

    height_limit = record.get("height_limit")
    anomaly_threshold = record.get("anomaly_threshold", 0.5)
    if height_limit is not None and (not _is_int(height_limit) or height_limit < 0):
        raise ModelFormatError(f"invalid height_limit {height_limit!r}")
    if trees and height_limit is None:
        raise ModelFormatError("a fitted forest record needs height_limit")
    if isinstance(anomaly_threshold, bool) or not isinstance(anomaly_threshold, (int, float)):
        raise ModelFormatError(f"invalid anomaly_threshold {anomaly_threshold!r}")

    forest = IsolationForest(sample_size=sample_size, n_trees=n_trees, **kwargs)
    forest.trees = [node_from_dict(tree, n_features) for tree in trees]
    forest.n_features = n_features
    forest.height_limit = height_limit
    forest.anomaly_threshold = float(anomaly_threshold)
    return forest


def save_forest(forest: IsolationForest, path: str | Path) -> Path:
    """Write the forest record as JSON and return the path written."""
    path = Path(path)
    with open(path, "w") as f:
        json.dump(forest_to_dict(forest), f)
    logger.debug("Saved %d trees to %s", len(forest.trees), path)
    return path


def load_forest(path: str | Path, **kwargs: Any) -> IsolationForest:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")

    with open(path, "r") as f:
        try:
            record = json.load(f)
        except json.JSONDecodeError as exc:
            raise ModelFormatError(f"{path} is not valid JSON: {exc}") from exc

    forest = forest_from_dict(record, **kwargs)
    logger.debug("Loaded %d trees from %s", len(forest.trees), path)
    return forest
