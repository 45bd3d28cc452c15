"""
Path length evaluation and anomaly score computation.

A row's path length in a tree is the number of nodes visited from the root to
the leaf it falls into. Leaves cut off by the height limit may still hold
several bootstrap rows, so the length is extended by c(size), the average
path length of an unsuccessful search in a binary search tree of that size.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import numpy.typing as npt

from .tree import LeafNode, Node

EULER_GAMMA = 0.5772156649


def average_path_length(n: Any) -> Any:
    """
    c(n) = 2 * (ln(n - 1) + gamma) - 2 * (n - 1) / n, and 0 for n <= 1.
    Args:
        n: Sample size, scalar or array of sizes.
    Returns:
        A float for scalar input, an array of floats otherwise.
    """
    sizes = np.asarray(n, dtype=np.float64)
    scalar = sizes.ndim == 0
    sizes = np.atleast_1d(sizes)

    result = np.zeros(sizes.shape, dtype=np.float64)
    mask = sizes > 1
    m = sizes[mask]
    result[mask] = 2.0 * (np.log(m - 1.0) + EULER_GAMMA) - 2.0 * (m - 1.0) / m

    if scalar:
        return float(result[0])
    return result


def path_length(node: Node, row: npt.NDArray[np.floating[Any]]) -> tuple[int, int]:
    """
    Walk one tree for one row.
    Returns:
        (nodes visited, size of the leaf reached).
    """
    if isinstance(node, LeafNode):
        return 1, node.size
    if row[node.split_attribute] < node.split_value:
        length, size = path_length(node.left, row)
    else:
        length, size = path_length(node.right, row)
    return length + 1, size


def path_lengths_batch(
    node: Node,
    Xs: npt.NDArray[np.floating[Any]],
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.int64]]:
    """
    Vectorized `path_length` over all rows of Xs.
    Args:
        node: Root of the (sub)tree.
        Xs: Data samples of shape (n_samples, n_features).
    Returns:
        Nodes visited and reached leaf size for each sample, both of shape (n_samples,).
    """
    n_samples = Xs.shape[0]
    depths = np.ones(n_samples, dtype=np.float64)
    sizes = np.zeros(n_samples, dtype=np.int64)

    if isinstance(node, LeafNode):
        sizes[:] = node.size
        return depths, sizes

    mask_lower = Xs[:, node.split_attribute] < node.split_value

    for mask, child in ((mask_lower, node.left), (~mask_lower, node.right)):
        if np.any(mask):
            child_depths, child_sizes = path_lengths_batch(child, Xs[mask])
            depths[mask] = 1 + child_depths
            sizes[mask] = child_sizes

    return depths, sizes


def adjusted_path_lengths(node: Node, Xs: npt.NDArray[np.floating[Any]]) -> npt.NDArray[np.float64]:
    """Path lengths extended by c(leaf size) for every sample."""
    depths, sizes = path_lengths_batch(node, Xs)
    return depths + average_path_length(sizes)


def anomaly_scores(path_means: npt.ArrayLike, sample_size: int) -> npt.NDArray[np.float64]:
    """
    Anomaly scores are in (0, 1] where higher scores indicate anomalies.
    Based on the formula: 2^(-mean_path_length / c(sample_size)).
    Args:
        path_means: Mean adjusted path length of each sample across the forest.
        sample_size: Resolved bootstrap sample size of the forest.
    """
    expected_path_length = average_path_length(sample_size)
    if expected_path_length == 0.0:
        # c(1) == 0: nothing to normalise against
        expected_path_length = 1.0
    return 2.0 ** (-np.asarray(path_means, dtype=np.float64) / expected_path_length)
