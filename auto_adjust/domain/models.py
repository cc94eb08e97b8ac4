"""Core domain models for photo entries, notifications and clusters.

These are pure data structures - the scheduler owns every state change.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from auto_adjust.adjustments import AdjustmentRecord
from auto_adjust.domain.types import EntryStatus


@dataclass
class PhotoEntry:
    """Coordinator-tracked state of one photo."""
    id: str
    source: Any = None
    status: EntryStatus = EntryStatus.PENDING
    features: Optional[np.ndarray] = None
    adjustments: Optional[AdjustmentRecord] = None
    computed: Optional[AdjustmentRecord] = None
    manual_overrides: AdjustmentRecord = field(default_factory=AdjustmentRecord)
    is_reference: bool = False
    reference_rank: int = 0
    last_error: Optional[Exception] = None

    @property
    def has_features(self) -> bool:
        return self.features is not None


@dataclass(frozen=True)
class EntryTransition:
    """Per-entry notification emitted after every status change."""
    entry_id: str
    status: EntryStatus
    previous: EntryStatus


@dataclass(frozen=True)
class QueueProgress:
    """Queue-level notification emitted after every entry transition."""
    completed_count: int
    failed_count: int
    total_count: int

    @property
    def fraction(self) -> float:
        return self.completed_count / self.total_count if self.total_count else 1.0


@dataclass
class ClusterInfo:
    """Information about a single cluster."""
    cluster_id: int
    entry_ids: List[str]
    reference_id: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.entry_ids)


@dataclass(frozen=True)
class Partition:
    """Ephemeral cluster assignment of entries with features."""
    clusters: Dict[int, List[str]] = field(default_factory=dict)
    labels: Dict[str, int] = field(default_factory=dict)
    stats: Dict[str, Any] = field(default_factory=dict)

    def cluster_of(self, entry_id: str) -> Optional[int]:
        return self.labels.get(entry_id)

    def members_of(self, entry_id: str) -> List[str]:
        """Ids sharing a cluster with ``entry_id`` (itself included); empty if unclustered."""
        cluster_id = self.labels.get(entry_id)
        if cluster_id is None:
            return []
        return list(self.clusters[cluster_id])
