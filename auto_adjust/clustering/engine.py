"""Clustering engine - derives and caches the partition of a group's entries."""

import logging
from typing import Iterable, Optional

import numpy as np

from auto_adjust.clustering.base import ClusteringMethod
from auto_adjust.clustering.threshold import group_labels
from auto_adjust.domain import EntryStatus, Partition, PhotoEntry

logger = logging.getLogger(__name__)


class ClusteringEngine:
    """
    Partitions entries by feature similarity.

    Only non-failed entries with features take part. Rows are fed to the
    clustering method sorted by id, so the result does not depend on
    registration order.
    """

    def __init__(self, method: ClusteringMethod):
        self._method = method
        self._partition: Optional[Partition] = None

    @property
    def method(self) -> ClusteringMethod:
        return self._method

    def invalidate(self) -> None:
        """Drop the cached partition; the next call to ``partition`` recomputes it."""
        self._partition = None

    def partition(self, entries: Iterable[PhotoEntry]) -> Partition:
        """Return the cached partition, computing it if needed."""
        if self._partition is None:
            self._partition = self.compute(entries)
        return self._partition

    def compute(self, entries: Iterable[PhotoEntry]) -> Partition:
        candidates = sorted(
            (e for e in entries if e.has_features and e.status is not EntryStatus.FAILED),
            key=lambda e: e.id,
        )
        if not candidates:
            return Partition(stats={'algorithm': self._method.algorithm, 'n_clusters': 0})

        dims = {np.asarray(e.features).shape for e in candidates}
        if len(dims) > 1:
            raise ValueError(f"Inconsistent feature shapes: {sorted(dims)}")

        ids = [e.id for e in candidates]
        features = np.vstack([np.asarray(e.features, dtype=np.float64).ravel() for e in candidates])
        labels, stats = self._method.cluster(features)
        clusters = group_labels(ids, labels)
        logger.debug(f"Partitioned {len(ids)} entries into {len(clusters)} clusters")
        return Partition(
            clusters=clusters,
            labels={entry_id: int(label) for entry_id, label in zip(ids, labels.tolist())},
            stats=stats,
        )
