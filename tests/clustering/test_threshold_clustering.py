"""Tests for threshold clustering and the clustering engine."""

import numpy as np
import pytest

from auto_adjust.clustering import ClusteringEngine, ThresholdClusterer, load_clustering_method
from auto_adjust.domain import EntryStatus, PhotoEntry


def make_method(threshold=0.5, **params):
    return load_clustering_method({
        'algorithm': 'threshold',
        'params': {'threshold': threshold, **params},
    })


def make_entry(entry_id, features, status=EntryStatus.COMPLETED):
    return PhotoEntry(
        id=entry_id,
        status=status,
        features=None if features is None else np.array(features, dtype=float),
    )


class TestThresholdClusterer:
    def test_factory_returns_threshold_clusterer(self):
        method = make_method()
        assert isinstance(method, ThresholdClusterer)
        assert str(method) == "ThresholdClusterer(threshold)"

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError, match="Unknown clustering algorithm"):
            load_clustering_method({'algorithm': 'kmeans', 'params': {}})

    def test_threshold_param_required(self):
        with pytest.raises(ValueError, match="params.threshold"):
            load_clustering_method({'algorithm': 'threshold', 'params': {}})

    def test_distance_equal_to_threshold_merges(self):
        labels, stats = make_method(threshold=1.0).cluster(np.array([[0.0, 0.0], [1.0, 0.0]]))
        assert labels.tolist() == [0, 0]
        assert stats['n_clusters'] == 1

    def test_distance_above_threshold_splits(self):
        labels, stats = make_method(threshold=0.99).cluster(np.array([[0.0, 0.0], [1.0, 0.0]]))
        assert labels.tolist() == [0, 1]
        assert stats['n_singletons'] == 2

    def test_chains_are_transitive(self):
        # 0.0 and 0.8 are further apart than tau but linked through 0.4
        features = np.array([[0.0], [0.4], [0.8], [5.0]])
        labels, stats = make_method(threshold=0.5).cluster(features)
        assert labels.tolist() == [0, 0, 0, 1]
        assert stats['cluster_sizes'] == {0: 3, 1: 1}

    def test_labels_follow_first_row(self):
        features = np.array([[9.0], [0.0], [9.1], [0.1]])
        labels, _ = make_method().cluster(features)
        assert labels.tolist() == [0, 1, 0, 1]

    def test_cosine_metric_with_normalization(self):
        features = np.array([[1.0, 0.0], [10.0, 0.5], [0.0, 1.0]])
        labels, stats = make_method(threshold=0.05, metric='cosine', normalize=True).cluster(features)
        assert labels.tolist() == [0, 0, 1]
        assert stats['metric'] == 'cosine'

    def test_single_and_empty_input(self):
        labels, stats = make_method().cluster(np.array([[1.0, 2.0]]))
        assert labels.tolist() == [0]
        assert stats['n_clusters'] == 1

        labels, stats = make_method().cluster(np.empty((0, 2)))
        assert labels.size == 0
        assert stats['n_clusters'] == 0

    def test_nan_rejected(self):
        with pytest.raises(ValueError, match="NaN"):
            make_method().cluster(np.array([[0.0, np.nan], [1.0, 1.0]]))

    def test_1d_rejected(self):
        with pytest.raises(ValueError, match="2D"):
            make_method().cluster(np.array([0.0, 1.0]))


class TestClusteringEngine:
    def test_partition_independent_of_registration_order(self):
        entries = [
            make_entry("b", [5.0, 5.0]),
            make_entry("a", [0.0, 0.0]),
            make_entry("c", [0.1, 0.0]),
        ]
        forward = ClusteringEngine(make_method()).compute(entries)
        backward = ClusteringEngine(make_method()).compute(list(reversed(entries)))

        assert forward.clusters == backward.clusters
        assert forward.labels == backward.labels
        assert forward.clusters == {0: ["a", "c"], 1: ["b"]}

    def test_failed_and_featureless_entries_excluded(self):
        entries = [
            make_entry("a", [0.0, 0.0]),
            make_entry("b", [0.1, 0.0], status=EntryStatus.FAILED),
            make_entry("c", None),
        ]
        partition = ClusteringEngine(make_method()).compute(entries)
        assert partition.labels == {"a": 0}
        assert partition.members_of("b") == []
        assert partition.cluster_of("c") is None

    def test_no_candidates_gives_empty_partition(self):
        partition = ClusteringEngine(make_method()).compute([make_entry("a", None)])
        assert partition.clusters == {}
        assert partition.stats['n_clusters'] == 0

    def test_inconsistent_shapes_rejected(self):
        entries = [make_entry("a", [0.0, 0.0]), make_entry("b", [0.0, 0.0, 0.0])]
        with pytest.raises(ValueError, match="Inconsistent feature shapes"):
            ClusteringEngine(make_method()).compute(entries)

    def test_partition_is_cached_until_invalidated(self):
        entries = [make_entry("a", [0.0, 0.0])]
        engine = ClusteringEngine(make_method())
        first = engine.partition(entries)

        entries.append(make_entry("b", [0.1, 0.0]))
        assert engine.partition(entries) is first

        engine.invalidate()
        assert engine.partition(entries).members_of("a") == ["a", "b"]
