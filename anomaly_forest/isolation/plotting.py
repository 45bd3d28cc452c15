"""
Visual diagnostics for isolation trees fitted on two-feature data.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

import matplotlib.pyplot as plt
import numpy as np
import numpy.typing as npt

from ..errors import EmptyInput, ShapeMismatch
from ..matrix import Matrix, as_matrix
from .tree import LeafNode, Node

PADDING = 1.0


def _plot_splits(node: Node, feature_limits: list[list[float]]) -> int:
    """
    Plots vertical/horizontal lines for each split inside the region of `node`.
    Returns:
        Number of split lines drawn.
    """
    if isinstance(node, LeafNode):
        return 0

    threshold = node.split_value
    if node.split_attribute == 0:
        plt.plot([threshold, threshold],
                 [feature_limits[1][0], feature_limits[1][1]], c="gray")
    else:
        plt.plot([feature_limits[0][0], feature_limits[0][1]],
                 [threshold, threshold], c="gray")

    feature_limits_lower = deepcopy(feature_limits)
    feature_limits_lower[node.split_attribute][1] = threshold

    feature_limits_upper = deepcopy(feature_limits)
    feature_limits_upper[node.split_attribute][0] = threshold

    return 1 + _plot_splits(node.left, feature_limits_lower) + _plot_splits(node.right, feature_limits_upper)


def plot_partition_space_2D(
    root: Node,
    x: Matrix | npt.NDArray[np.floating[Any]],
    show: bool = True,
) -> int:
    """
    Visualize the 2D space partitioning created by one tree, with the data
    points scattered underneath. Leaves do not keep their rows, so the points
    must be passed in.
    Args:
        root: Root node of a fitted tree.
        x: Data of shape (n_samples, 2).
        show: Call plt.show() once drawn.
    Returns:
        Number of split lines drawn.
    """
    X = as_matrix(x)
    if X.ncols != 2:
        raise ShapeMismatch(f"partition plots need exactly 2 features, got {X.ncols}")
    if X.nrows == 0:
        raise EmptyInput("nothing to plot")

    Xs = X.values
    mins = np.min(Xs, axis=0) - PADDING
    maxs = np.max(Xs, axis=0) + PADDING
    feature_limits = [[float(mins[i]), float(maxs[i])] for i in range(2)]

    plt.title("Space Partition Isolation Tree")
    plt.xlabel("X")
    plt.ylabel("Y")

    plt.plot([feature_limits[0][0], feature_limits[0][1]],
             [feature_limits[1][0], feature_limits[1][0]], c="gray")
    plt.plot([feature_limits[0][0], feature_limits[0][1]],
             [feature_limits[1][1], feature_limits[1][1]], c="gray")
    plt.plot([feature_limits[0][0], feature_limits[0][0]],
             [feature_limits[1][0], feature_limits[1][1]], c="gray")
    plt.plot([feature_limits[0][1], feature_limits[0][1]],
             [feature_limits[1][0], feature_limits[1][1]], c="gray")

    n_lines = _plot_splits(root, feature_limits)
    plt.scatter(Xs[:, 0], Xs[:, 1], c="lightgray", s=5)

    if show:
        plt.show()
    return n_lines
