"""
Clustering of photo entries by feature similarity.
"""

from auto_adjust.clustering.base import ClusteringMethod, load_clustering_method
from auto_adjust.clustering.engine import ClusteringEngine
from auto_adjust.clustering.threshold import ThresholdClusterer

__all__ = [
    'ClusteringEngine',
    'ClusteringMethod',
    'ThresholdClusterer',
    'load_clustering_method',
]
