"""
This module contains the RandomSplitter used to pick the split feature and
threshold of every decision node in an isolation tree.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import numpy.typing as npt


class RandomSplitter:
    """
    Picks a random feature and a random threshold inside the observed range of
    that feature.
    Attributes:
        rng: Random source owned by the tree being built.
    """

    def __init__(self, rng: np.random.RandomState | None = None) -> None:
        self.rng = rng if rng is not None else np.random.RandomState()

    def split(self, Xs: npt.NDArray[np.floating[Any]]) -> tuple[int, float]:
        """
        Args:
            Xs: Sample of shape (n_samples, n_features), with at least one row
                and one column.
        Returns:
            (split_attribute, split_value). A constant column yields its single
            value as threshold, which sends every row to the right child.
        """
        idx_feature = int(self.rng.randint(Xs.shape[1]))
        column = Xs[:, idx_feature]

        lower = float(column.min())
        upper = float(column.max())
        if lower == upper:
            return idx_feature, lower

        # interpolate instead of lower + (upper - lower) * u, the width can overflow float64
        u = self.rng.random_sample()
        split_threshold = lower * (1.0 - u) + upper * u
        split_threshold = min(max(split_threshold, lower), float(np.nextafter(upper, lower)))
        return idx_feature, float(split_threshold)
