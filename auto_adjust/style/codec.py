"""
Style codec - distills processed clusters into rules and applies them back.
"""

import logging
from typing import Dict, FrozenSet, Iterable, List, Optional

import numpy as np
from scipy.spatial.distance import cdist

from auto_adjust.adjustments import AdjustmentKind, AdjustmentRecord, median_record
from auto_adjust.domain import EntryStatus, Partition, PhotoEntry
from auto_adjust.style.models import STYLE_VERSION, Style, StyleRule

logger = logging.getLogger(__name__)


def active_reference(members: Iterable[PhotoEntry], exclude: Optional[str] = None) -> Optional[PhotoEntry]:
    """
    Pick the reference that drives a cluster.

    Among completed reference entries, the most recently marked wins.
    """
    candidates = [
        m for m in members
        if m.is_reference
        and m.id != exclude
        and m.status is EntryStatus.COMPLETED
        and m.adjustments is not None
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda m: m.reference_rank)


def derive_style(
    entries: Dict[str, PhotoEntry],
    partition: Partition,
    computed_fields: FrozenSet[str],
    computed_kinds: FrozenSet[AdjustmentKind],
    metric: str = "euclidean"
) -> Style:
    """
    Build a style from a fully processed partition.

    Args:
        entries: Entries by id (only completed ones are expected in the partition)
        partition: Cluster assignment of the entries
        computed_fields: Photo-specific fields that never go into a delta
        computed_kinds: Kinds those fields came from (recorded on the style)
        metric: Distance metric for nearest-rule lookup

    Returns:
        Immutable Style with one rule per cluster, in cluster id order
    """
    rules: List[StyleRule] = []
    for cluster_id in sorted(partition.clusters):
        members = [entries[entry_id] for entry_id in partition.clusters[cluster_id]]
        members = [m for m in members if m.status is EntryStatus.COMPLETED]
        if not members:
            continue

        centroid = np.mean(np.vstack([np.asarray(m.features, dtype=np.float64) for m in members]), axis=0)
        reference = active_reference(members)
        if reference is not None:
            delta = reference.adjustments.without(computed_fields)
            source = f"reference {reference.id}"
        else:
            delta = median_record([
                (m.adjustments or AdjustmentRecord()).without(computed_fields) for m in members
            ])
            source = "median"

        rules.append(StyleRule(centroid=tuple(centroid), delta=delta, weight=len(members)))
        logger.debug(f"Style rule for cluster {cluster_id}: {len(members)} members, delta from {source}")

    logger.info(f"Derived style with {len(rules)} rules")
    return Style(rules=tuple(rules), metric=metric, computed_kinds=computed_kinds, version=STYLE_VERSION)


def nearest_rule(style: Style, features: Optional[np.ndarray]) -> Optional[StyleRule]:
    """
    Find the rule whose centroid is closest to ``features``.

    Entries without features get the heaviest rule (first one on ties).
    Rules with a different dimensionality than ``features`` are skipped.
    """
    if not style.rules:
        return None
    if features is None:
        return max(style.rules, key=lambda r: r.weight)

    vector = np.asarray(features, dtype=np.float64).ravel()
    candidates = [r for r in style.rules if len(r.centroid) == vector.shape[0]]
    if not candidates:
        logger.warning(
            f"No style rule matches feature dimensionality {vector.shape[0]}; "
            f"style has {len(style.rules)} rules"
        )
        return None

    centroids = np.array([r.centroid for r in candidates], dtype=np.float64)
    distances = cdist(vector[np.newaxis, :], centroids, metric=style.metric)[0]
    return candidates[int(np.argmin(distances))]
