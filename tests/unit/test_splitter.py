"""Tests for RandomSplitter."""

import numpy as np

from anomaly_forest.isolation import RandomSplitter


def test_split_value_within_column_range():
    Xs = np.random.RandomState(1).rand(20, 3)
    splitter = RandomSplitter(np.random.RandomState(0))

    for _ in range(100):
        idx_feature, split_value = splitter.split(Xs)
        column = Xs[:, idx_feature]

        assert 0 <= idx_feature < 3
        assert column.min() <= split_value <= column.max()


def test_constant_column_splits_at_its_value():
    Xs = np.full((5, 1), 5.0)
    splitter = RandomSplitter(np.random.RandomState(0))

    assert splitter.split(Xs) == (0, 5.0)


def test_every_feature_can_be_chosen():
    Xs = np.random.RandomState(2).rand(10, 3)
    splitter = RandomSplitter(np.random.RandomState(3))

    chosen = {splitter.split(Xs)[0] for _ in range(200)}

    assert chosen == {0, 1, 2}


def test_same_seed_gives_same_splits():
    Xs = np.random.RandomState(4).rand(10, 4)
    a = RandomSplitter(np.random.RandomState(9))
    b = RandomSplitter(np.random.RandomState(9))

    assert [a.split(Xs) for _ in range(10)] == [b.split(Xs) for _ in range(10)]


def test_threshold_for_range_wider_than_float64():
    Xs = np.array([[-1e308], [1e308], [0.0]])
    splitter = RandomSplitter(np.random.RandomState(0))

    for _ in range(50):
        idx_feature, split_value = splitter.split(Xs)

        assert idx_feature == 0
        assert np.isfinite(split_value)
        assert -1e308 <= split_value < 1e308


def test_threshold_stays_below_column_max_for_adjacent_values():
    upper = np.nextafter(1.0, 2.0)
    Xs = np.array([[1.0], [upper]])
    splitter = RandomSplitter(np.random.RandomState(0))

    for _ in range(50):
        assert splitter.split(Xs)[1] == 1.0
