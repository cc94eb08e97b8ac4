"""
Abstract base class for clustering methods.
Uses Strategy pattern with factory function.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

import numpy as np

logger = logging.getLogger(__name__)


class ClusteringMethod(ABC):
    """Abstract base class for all clustering methods."""

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize clustering method with configuration.

        Args:
            config: Clustering configuration dictionary
        """
        self.config = config
        self.algorithm = config.get('algorithm', 'unknown')
        self.params = config.get('params', {})

    @abstractmethod
    def cluster(self, features: np.ndarray) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Cluster features.

        Rows are expected in the order the caller wants merges processed.

        Args:
            features: Feature matrix [n_samples, n_features]

        Returns:
            labels: Cluster labels (one per row)
            stats: Dictionary with clustering statistics
        """
        pass

    def validate_features(self, features: np.ndarray) -> np.ndarray:
        """
        Check shape and values of a feature matrix.

        Raises:
            ValueError: If the matrix is not 2D or contains NaN/Inf
        """
        features = np.asarray(features, dtype=np.float64)
        if features.ndim != 2:
            raise ValueError(f"Features must be a 2D array, got shape {features.shape}")
        if np.isnan(features).any():
            raise ValueError("Features contain NaN values")
        if np.isinf(features).any():
            raise ValueError("Features contain Inf values")
        return features

    def normalize_features(self, features: np.ndarray) -> np.ndarray:
        """
        L2-normalize feature vectors (for cosine distance).

        Args:
            features: Feature matrix [n_samples, n_features]

        Returns:
            Normalized feature matrix
        """
        norms = np.linalg.norm(features, axis=1, keepdims=True)
        norms = np.maximum(norms, 1e-10)  # Avoid division by zero
        return features / norms

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.algorithm})"


def load_clustering_method(config: Dict[str, Any]) -> ClusteringMethod:
    """
    Factory function to load a clustering method by algorithm name.

    Args:
        config: Clustering configuration dictionary with 'algorithm' key

    Returns:
        Instantiated clustering method object

    Raises:
        ValueError: If algorithm is not recognized
    """
    from auto_adjust.clustering.threshold import ThresholdClusterer

    algorithm = config.get('algorithm', 'threshold').lower()

    # Method registry
    clustering_registry = {
        'threshold': ThresholdClusterer,
    }

    if algorithm not in clustering_registry:
        available = ', '.join(clustering_registry.keys())
        raise ValueError(f"Unknown clustering algorithm: {algorithm}. Available: {available}")

    clustering_class = clustering_registry[algorithm]
    return clustering_class(config)
