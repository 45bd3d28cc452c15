"""Tests for forest persistence."""

import json

import numpy as np
import pytest

from anomaly_forest import IsolationForest, ModelFormatError
from anomaly_forest.isolation import (
    DecisionNode,
    LeafNode,
    forest_from_dict,
    load_forest,
    save_forest,
)
from anomaly_forest.isolation.serialization import node_from_dict, node_to_dict


class TestNodeRecords:

    def test_record_layout(self):
        node = DecisionNode(
            left=LeafNode(size=1),
            right=LeafNode(size=0),
            split_attribute=2,
            split_value=0.25,
        )

        assert node_to_dict(node) == {
            "left": {"size": 1},
            "right": {"size": 0},
            "split_attribute": 2,
            "split_value": 0.25,
        }

    def test_node_round_trip(self, fitted_forest):
        for root in fitted_forest.trees:
            assert node_from_dict(node_to_dict(root), fitted_forest.n_features) == root

    @pytest.mark.parametrize("record", [
        {"size": -1},
        {"size": 1.5},
        {"foo": 1},
        [1, 2],
        {"left": {"size": 1}, "right": {"size": 1}, "split_attribute": -1, "split_value": 0.0},
        {"left": {"size": 1}, "right": {"size": 1}, "split_attribute": 0, "split_value": "x"},
    ])
    def test_malformed_records(self, record):
        with pytest.raises(ModelFormatError):
            node_from_dict(record)

    def test_split_attribute_beyond_feature_count(self):
        record = {"left": {"size": 1}, "right": {"size": 1}, "split_attribute": 3, "split_value": 0.0}

        with pytest.raises(ModelFormatError, match="out of range"):
            node_from_dict(record, n_features=3)


class TestForestRecords:

    def test_round_trip_scores_identical(self, fitted_forest):
        X = np.random.RandomState(11).randn(200, 3) * 2

        restored = IsolationForest.from_dict(fitted_forest.to_dict())

        np.testing.assert_array_equal(restored.anomaly_score(X), fitted_forest.anomaly_score(X))
        assert restored.sample_size == fitted_forest.sample_size
        assert restored.n_trees == fitted_forest.n_trees
        assert restored.height_limit == fitted_forest.height_limit

    def test_json_file_round_trip(self, fitted_forest, tmp_path):
        X = np.random.RandomState(12).randn(50, 3)

        path = save_forest(fitted_forest, tmp_path / "forest.json")
        restored = load_forest(path, n_jobs=2)

        assert restored.n_jobs == 2
        np.testing.assert_array_equal(restored.anomaly_score(X), fitted_forest.anomaly_score(X))

    def test_unfitted_forest_round_trip(self):
        restored = forest_from_dict(IsolationForest(sample_size=8, n_trees=4).to_dict())

        assert restored.sample_size == 8
        assert not restored.is_fitted

    def test_tree_count_mismatch(self, fitted_forest):
        record = fitted_forest.to_dict()
        record["trees"] = record["trees"][:-1]

        with pytest.raises(ModelFormatError, match="expected 25"):
            forest_from_dict(record)

    @pytest.mark.parametrize("field, value", [
        ("anomaly_threshold", None),
        ("anomaly_threshold", "high"),
        ("height_limit", -1),
        ("height_limit", 2.5),
        ("height_limit", None),
    ])
    def test_invalid_scalar_fields(self, fitted_forest, field, value):
        record = fitted_forest.to_dict()
        record[field] = value

        with pytest.raises(ModelFormatError, match=field):
            forest_from_dict(record)

    def test_missing_fields(self):
        with pytest.raises(ModelFormatError, match="missing"):
            forest_from_dict({"trees": []})

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_forest(tmp_path / "nope.json")

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ModelFormatError):
            load_forest(path)

    def test_saved_file_is_plain_json(self, fitted_forest, tmp_path):
        path = save_forest(fitted_forest, tmp_path / "forest.json")

        with open(path) as f:
            record = json.load(f)

        assert record["n_trees"] == 25
        assert len(record["trees"]) == 25
