"""Pytest fixtures shared across all tests."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from anomaly_forest import IsolationForest


@pytest.fixture
def training_data():
    """Gaussian training data, 100 samples with 3 features."""
    return np.random.RandomState(0).randn(100, 3)


@pytest.fixture
def cluster_with_outlier():
    """
    Dense 2-D cluster around the origin plus one point far outside its
    bounding box, stored as the last row.
    """
    rng = np.random.RandomState(42)
    cluster = rng.normal(loc=0.0, scale=0.1, size=(60, 2))
    outlier = np.array([[5.0, 5.0]])
    return np.vstack([cluster, outlier])


@pytest.fixture
def fitted_forest(training_data):
    """Small seeded forest fitted on `training_data`."""
    forest = IsolationForest(sample_size=64, n_trees=25, random_state=7)
    return forest.fit(training_data)


@pytest.fixture
def mock_config():
    """Configuration mapping as it would be read from YAML."""
    return {
        'forest': {
            'sample_size': 128,
            'n_trees': 50,
            'n_jobs': 2,
            'backend': 'threading',
            'random_state': 42,
            'contamination': 0.05,
        }
    }
