"""
This module contains the IsolationForest class that implements an ensemble
of isolation trees for robust anomaly detection.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import numpy as np
import numpy.typing as npt
from joblib import Parallel, delayed

from ..config import ForestConfig
from ..errors import (
    BuildError,
    EmptyInput,
    IndexOutOfRange,
    IsolationForestError,
    ScoreError,
)
from ..matrix import Matrix, as_matrix
from .scoring import adjusted_path_lengths, anomaly_scores
from .tree import IsolationTree, Node, height_limit_for

logger = logging.getLogger(__name__)


def _fit_single_tree(
    seed: int,
    Xs: npt.NDArray[np.floating[Any]],
    sample_size: int,
    height_limit: int,
) -> Node:
    """
    Worker function to build one isolation tree from a bootstrap sample.
    This function is designed to be called in parallel using joblib.
    Each worker receives an integer seed and owns the random source made from it,
    so no random state is shared between workers.

    Args:
        seed: Random seed for this tree (integer).
        Xs: Training data of shape (n_samples, n_features).
        sample_size: Number of rows drawn, with replacement, for this tree.
        height_limit: Maximum depth of the tree.
    Returns:
        Root node of the fitted tree.
    """
    rng = np.random.RandomState(seed)
    bootstrap_indices = rng.randint(Xs.shape[0], size=sample_size)

    tree = IsolationTree(height_limit, rng)
    return tree.fit(Xs[bootstrap_indices])


def _score_single_tree(
    root: Node,
    Xs: npt.NDArray[np.floating[Any]],
) -> npt.NDArray[np.floating[Any]]:
    """
    Worker function to compute adjusted path lengths of samples on a single tree.
    This function is designed to be called in parallel using joblib.
    Args:
        root: Root node of a fitted tree.
        Xs: Data samples of shape (n_samples, n_features).
    Returns:
        Adjusted path lengths for each sample of shape (n_samples,).
    """
    return adjusted_path_lengths(root, Xs)


class IsolationForest:
    """
    Ensemble of Isolation Trees for anomaly detection.

    Each tree is trained on its own bootstrap sample of the data,
    and scores are made by averaging path lengths across all trees.

    Attributes:
        sample_size: Rows drawn with replacement per tree. 0 means "all input
            rows" and is resolved by the first call to fit.
        n_trees: Number of trees in the ensemble.
        n_jobs: Number of parallel jobs to run. -1 means using all processors.
        backend: joblib backend used when n_jobs != 1.
        random_state: Random seed for reproducibility.
        contamination: Expected proportion of anomalies, used to set anomaly_threshold.
        height_limit: Maximum tree depth, ceil(log2(sample_size)).
        n_features: Number of columns seen by fit.
        anomaly_threshold: Score threshold above which points are classified as anomalies.
        trees: Root nodes of the fitted trees.
    """

    def __init__(
        self,
        sample_size: int = 0,
        n_trees: int = 100,
        n_jobs: int = 1,
        backend: str = "threading",
        random_state: int | None = None,
        contamination: float | None = None,
    ) -> None:
        """
        Initialize an IsolationForest.
        Args:
            sample_size: Bootstrap sample size per tree (0 uses every input row).
            n_trees: Number of isolation trees to create in the ensemble.
            n_jobs: Number of parallel jobs for tree building and scoring.
                - If 1 (default): sequential execution (no parallelization)
                - If -1: use all available processors
                - If > 1: use specified number of workers
            backend: joblib backend, "threading" (thread pool) or "loky" (process pool).
            random_state: Random seed for reproducibility. If None, results will
                vary between runs. If an integer, the same seed produces identical
                forests whatever n_jobs is.
            contamination: Expected proportion of anomalies in (0, 0.5]. If None,
                the anomaly threshold used by predict is 0.5.
        Raises:
            ConfigError: a parameter is out of range (ConfigError is a ValueError).
        """
        ForestConfig(
            sample_size=sample_size,
            n_trees=n_trees,
            n_jobs=n_jobs,
            backend=backend,
            random_state=random_state,
            contamination=contamination,
        ).validate()

        self.sample_size = sample_size
        self.n_trees = n_trees
        self.n_jobs = n_jobs
        self.backend = backend
        self.random_state = random_state
        self.contamination = contamination

        self.height_limit: int | None = None
        self.n_features: int | None = None
        self.anomaly_threshold: float = 0.5

        self.trees: list[Node] = []

    @classmethod
    def from_config(cls, config: Any) -> IsolationForest:
        """Build an unfitted forest from a ForestConfig."""
        config.validate()
        return cls(
            sample_size=config.sample_size,
            n_trees=config.n_trees,
            n_jobs=config.n_jobs,
            backend=config.backend,
            random_state=config.random_state,
            contamination=config.contamination,
        )

    @property
    def is_fitted(self) -> bool:
        return len(self.trees) > 0

    def fit(self, x: Matrix | npt.ArrayLike) -> IsolationForest:
        """
        Creates n_trees isolation trees, each trained on its own bootstrap sample
        of the data. Either every tree is built or the forest keeps its previous
        state.

        Args:
            x: Training data of shape (n_samples, n_features).
        Returns:
            self
        Raises:
            BuildError: the input is malformed or empty, or a tree failed to build.
        """
        try:
            X = as_matrix(x)
            if X.nrows == 0:
                raise EmptyInput("cannot fit an isolation forest on zero rows")
        except IsolationForestError as exc:
            raise BuildError(f"invalid training data: {exc}") from exc

        if self.sample_size == 0:
            self.sample_size = X.nrows
        height_limit = height_limit_for(self.sample_size)

        rng = np.random.RandomState(self.random_state)
        MAX_INT = np.iinfo(np.int32).max
        seeds = rng.randint(MAX_INT, size=self.n_trees)

        logger.info(
            "Fitting %d isolation trees (rows=%d, sample_size=%d, height_limit=%d, n_jobs=%d)",
            self.n_trees, X.nrows, self.sample_size, height_limit, self.n_jobs,
        )
        started = time.perf_counter()

        Xs = X.values
        try:
            if self.n_jobs == 1:
                # Sequential execution
                trees = [
                    _fit_single_tree(seed, Xs, self.sample_size, height_limit) for seed in seeds
                ]
            else:
                # Parallel execution using joblib
                trees = list(Parallel(n_jobs=self.n_jobs, backend=self.backend)(
                    delayed(_fit_single_tree)(seed, Xs, self.sample_size, height_limit)
                    for seed in seeds
                ))
        except IsolationForestError as exc:
            logger.error("Tree construction failed, keeping previous forest: %s", exc)
            raise BuildError(f"failed to build isolation tree: {exc}") from exc

        if self.contamination is None:
            anomaly_threshold = 0.5
        else:
            train_scores = self._scores(trees, Xs)
            anomaly_threshold = float(np.quantile(train_scores, 1.0 - self.contamination))

        self.trees = trees
        self.height_limit = height_limit
        self.n_features = X.ncols
        self.anomaly_threshold = anomaly_threshold

        logger.info(
            "Fitted %d trees in %.3fs (anomaly_threshold=%.4f)",
            len(self.trees), time.perf_counter() - started, self.anomaly_threshold,
        )
        return self

    def _scores(
        self, trees: list[Node], Xs: npt.NDArray[np.floating[Any]],
    ) -> npt.NDArray[np.floating[Any]]:
        if self.n_jobs == 1:
            # Sequential execution
            depth_matrix = np.zeros((Xs.shape[0], len(trees)))
            for tree_idx, root in enumerate(trees):
                depth_matrix[:, tree_idx] = _score_single_tree(root, Xs)
        else:
            # Parallel execution using joblib
            depth_results = Parallel(n_jobs=self.n_jobs, backend=self.backend)(
                delayed(_score_single_tree)(root, Xs) for root in trees
            )
            depth_matrix = np.column_stack(list(depth_results))

        mean_depths = np.mean(depth_matrix, axis=1)
        return anomaly_scores(mean_depths, self.sample_size)

    def _validated(self, x: Matrix | npt.ArrayLike) -> npt.NDArray[np.floating[Any]]:
        if not self.is_fitted:
            raise ScoreError("the forest is not fitted, call fit() first")
        try:
            X = as_matrix(x)
            if X.nrows == 0:
                raise EmptyInput("cannot score zero rows")
            if X.ncols != self.n_features:
                raise IndexOutOfRange(
                    f"rows have {X.ncols} features, the forest was trained on {self.n_features}"
                )
        except IsolationForestError as exc:
            logger.warning("Rejected scoring request: %s", exc)
            raise ScoreError(f"cannot score input: {exc}") from exc
        return X.values

    def anomaly_score(self, x: Matrix | npt.ArrayLike) -> npt.NDArray[np.floating[Any]]:
        """
        Anomaly scores are in (0, 1] where higher scores indicate anomalies.
        Scores near 0.5 are typical; well below 0.5 means a clustered, normal point.
        A malformed matrix aborts the whole call.

        Args:
            x: Data samples of shape (n_samples, n_features).
        Returns:
            Anomaly scores for each sample of shape (n_samples,), in row order.
        Raises:
            ScoreError: the forest is not fitted, or the input is empty or has
                the wrong number of features.
        """
        Xs = self._validated(x)
        return self._scores(self.trees, Xs)

    def predict(self, x: Matrix | npt.ArrayLike) -> npt.NDArray[np.int_]:
        """
        Predict anomaly labels for samples.
        Args:
            x: Data samples of shape (n_samples, n_features).
        Returns:
            Binary labels (0=normal, 1=anomaly) of shape (n_samples,).
        """
        scores_arr = self.anomaly_score(x)
        return (scores_arr >= self.anomaly_threshold).astype(int)

    def to_dict(self) -> dict[str, Any]:
        """Nested record of the fitted forest, see serialization.forest_to_dict."""
        from .serialization import forest_to_dict

        return forest_to_dict(self)

    @classmethod
    def from_dict(cls, record: dict[str, Any], **kwargs: Any) -> IsolationForest:
        """Rebuild a forest from `to_dict` output. kwargs are passed to the constructor."""
        from .serialization import forest_from_dict

        return forest_from_dict(record, **kwargs)
