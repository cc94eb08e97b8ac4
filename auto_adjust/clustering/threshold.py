"""
Threshold clustering with union-find.

Two samples end up in the same cluster iff they are connected by a chain of
pairs whose distance is at most the threshold (single linkage cut at tau).
"""

import logging
from typing import Any, Dict, List, Tuple

import numpy as np
from scipy.spatial.distance import pdist, squareform

from auto_adjust.clustering.base import ClusteringMethod

logger = logging.getLogger(__name__)


class ThresholdClusterer(ClusteringMethod):
    """
    Union-find clusterer over all sample pairs.

    Config params:
        threshold: maximum pair distance that merges two samples
        metric: any scipy.spatial.distance metric name (default euclidean)
        normalize: L2-normalize rows before measuring distance
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        if 'threshold' not in self.params:
            raise ValueError("Threshold clustering requires params.threshold")
        self.threshold = float(self.params['threshold'])
        self.metric = self.params.get('metric', 'euclidean')
        self.normalize = bool(self.params.get('normalize', False))

    def cluster(self, features: np.ndarray) -> Tuple[np.ndarray, Dict[str, Any]]:
        features = self.validate_features(features)
        n = features.shape[0]
        if n == 0:
            return np.array([], dtype=int), self._stats(np.array([], dtype=int))
        if self.normalize:
            features = self.normalize_features(features)

        parent = list(range(n))

        def find(x: int) -> int:
            while parent[x] != x:
                parent[x] = parent[parent[x]]  # Path halving
                x = parent[x]
            return x

        def union(x: int, y: int) -> None:
            px, py = find(x), find(y)
            if px != py:
                # Keep the lower index as root so labels follow row order
                parent[max(px, py)] = min(px, py)

        distances = squareform(pdist(features, metric=self.metric)) if n > 1 else np.zeros((1, 1))
        merges = 0
        for i in range(n):
            for j in range(i + 1, n):
                if distances[i, j] <= self.threshold:
                    if find(i) != find(j):
                        merges += 1
                    union(i, j)

        # Label clusters in order of their first row
        root_labels: Dict[int, int] = {}
        labels = np.empty(n, dtype=int)
        for i in range(n):
            root = find(i)
            if root not in root_labels:
                root_labels[root] = len(root_labels)
            labels[i] = root_labels[root]

        logger.debug(f"Threshold clustering: {n} samples, {merges} merges, {len(root_labels)} clusters")
        return labels, self._stats(labels)

    def _stats(self, labels: np.ndarray) -> Dict[str, Any]:
        sizes: Dict[int, int] = {}
        for label in labels.tolist():
            sizes[label] = sizes.get(label, 0) + 1
        return {
            'algorithm': 'threshold',
            'n_clusters': len(sizes),
            'n_singletons': sum(1 for s in sizes.values() if s == 1),
            'cluster_sizes': sizes,
            'threshold': self.threshold,
            'metric': self.metric,
        }


def group_labels(ids: List[str], labels: np.ndarray) -> Dict[int, List[str]]:
    """Organize ids into clusters by label."""
    clusters: Dict[int, List[str]] = {}
    for entry_id, label in zip(ids, labels.tolist()):
        clusters.setdefault(int(label), []).append(entry_id)
    return clusters
