"""End-to-end anomaly detection scenarios."""

import numpy as np

from anomaly_forest import IsolationForest, Matrix
from anomaly_forest.isolation import load_forest, save_forest


def test_outlier_outside_cluster_scores_highest(cluster_with_outlier):
    forest = IsolationForest(sample_size=0, n_trees=100, random_state=0)
    forest.fit(cluster_with_outlier)

    scores = forest.anomaly_score(cluster_with_outlier)

    assert scores[-1] > scores[:-1].max()
    assert np.argmax(scores) == len(cluster_with_outlier) - 1


def test_scaled_row_scores_highest():
    rows = [
        [1.0, 2.0, 3.0, 4.0],
        [1.2, 1.9, 3.1, 4.2],
        [0.9, 2.1, 2.8, 3.9],
        [1.1, 2.2, 3.2, 4.1],
        [1.05, 1.95, 2.95, 4.05],
        [10.0, 200.0, 3000.0, 4000.0],
    ]
    forest = IsolationForest(sample_size=4, n_trees=50, random_state=42)
    forest.fit(Matrix(rows))

    scores = forest.anomaly_score(Matrix(rows))

    assert forest.height_limit == 2
    assert np.argmax(scores) == 5


def test_unseen_outliers_score_above_inliers():
    rng = np.random.RandomState(3)
    X_train = rng.randn(500, 4)
    X_inliers = rng.randn(50, 4) * 0.5
    X_outliers = rng.randn(50, 4) * 0.5 + 8.0

    forest = IsolationForest(sample_size=256, n_trees=100, random_state=1)
    forest.fit(X_train)

    inlier_scores = forest.anomaly_score(X_inliers)
    outlier_scores = forest.anomaly_score(X_outliers)

    assert outlier_scores.min() > inlier_scores.max()
    assert inlier_scores.mean() < 0.5


def test_fit_save_load_score(cluster_with_outlier, tmp_path):
    forest = IsolationForest(n_trees=30, random_state=4, contamination=0.05)
    forest.fit(cluster_with_outlier)

    restored = load_forest(save_forest(forest, tmp_path / "model.json"))

    np.testing.assert_array_equal(
        restored.anomaly_score(cluster_with_outlier),
        forest.anomaly_score(cluster_with_outlier),
    )
    np.testing.assert_array_equal(
        restored.predict(cluster_with_outlier),
        forest.predict(cluster_with_outlier),
    )
    assert restored.predict(cluster_with_outlier)[-1] == 1
