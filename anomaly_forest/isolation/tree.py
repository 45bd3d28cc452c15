"""
This module contains the node model (DecisionNode / LeafNode) and the
IsolationTree builder that recursively partitions a bootstrap sample with
random splits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import numpy as np
import numpy.typing as npt

from ..errors import EmptyInput, ShapeMismatch
from ..matrix import Matrix
from .splitter import RandomSplitter


@dataclass(frozen=True)
class LeafNode:
    """
    Terminal node of an isolation tree.
    Attributes:
        size: Number of bootstrap rows that reached this leaf. The rows
            themselves are not kept.
    """
    size: int


@dataclass(frozen=True)
class DecisionNode:
    """
    Internal node splitting the space on one feature.
    Attributes:
        left: Subtree for rows with row[split_attribute] < split_value.
        right: Subtree for all other rows.
        split_attribute: Index of the feature used for splitting.
        split_value: Threshold value for the split.
    """
    left: Node
    right: Node
    split_attribute: int
    split_value: float


Node = Union[DecisionNode, LeafNode]


def height_limit_for(sample_size: int) -> int:
    """Maximum tree depth for a bootstrap sample of `sample_size` rows: ceil(log2(n))."""
    if sample_size <= 1:
        return 0
    return int(np.ceil(np.log2(sample_size)))


def grow_tree(
    Xs: npt.NDArray[np.floating[Any]],
    depth: int,
    height_limit: int,
    splitter: RandomSplitter,
) -> Node:
    """
    Recursively partition the sample using random splits.
    Args:
        Xs: Sample rows of shape (n_samples, n_features).
        depth: Depth of the node being built (root is 0).
        height_limit: Depth at which recursion stops.
        splitter: Source of (feature, threshold) pairs.
    Returns:
        Root of the subtree built for `Xs`.
    """
    n_samples = Xs.shape[0]
    if n_samples <= 1 or depth >= height_limit or np.all(Xs == Xs[0]):
        return LeafNode(size=int(n_samples))

    idx_feature, split_threshold = splitter.split(Xs)

    mask_lower = Xs[:, idx_feature] < split_threshold
    Xs_lower = Xs[mask_lower]
    Xs_upper = Xs[~mask_lower]

    return DecisionNode(
        left=grow_tree(Xs_lower, depth + 1, height_limit, splitter),
        right=grow_tree(Xs_upper, depth + 1, height_limit, splitter),
        split_attribute=idx_feature,
        split_value=split_threshold,
    )


class IsolationTree:
    """
    Single isolation tree built from one bootstrap sample.
    Attributes:
        height_limit: Maximum depth of the tree.
        splitter: RandomSplitter drawing from this tree's own random source.
        root: Root node once fitted, None before.
    """

    def __init__(self, height_limit: int, rng: np.random.RandomState | None = None) -> None:
        if height_limit < 0:
            raise ValueError(f"height_limit must be non-negative, got {height_limit}")
        self.height_limit = height_limit
        self.splitter = RandomSplitter(rng)
        self.root: Node | None = None

    def fit(self, sample: Matrix | npt.NDArray[np.floating[Any]]) -> Node:
        """
        Args:
            sample: Bootstrap sample of shape (n_samples, n_features).
        Returns:
            The root node, also stored on `self.root`.
        Raises:
            ShapeMismatch: the sample is not 2-D or has no columns.
            EmptyInput: the sample has no rows.
        """
        try:
            Xs = sample.values if isinstance(sample, Matrix) else np.asarray(sample, dtype=np.float64)
        except ValueError as exc:
            raise ShapeMismatch(f"malformed sample: {exc}") from exc
        if Xs.ndim != 2 or Xs.shape[1] == 0:
            raise ShapeMismatch(f"cannot build a tree from a sample of shape {Xs.shape}")
        if Xs.shape[0] == 0:
            raise EmptyInput("cannot build a tree from an empty sample")

        self.root = grow_tree(Xs, 0, self.height_limit, self.splitter)
        return self.root

