"""Domain models for photo entries, notifications and clusters.

This layer contains pure data structures with no scheduling logic.
"""

from auto_adjust.domain.models import (
    ClusterInfo,
    EntryTransition,
    Partition,
    PhotoEntry,
    QueueProgress,
)
from auto_adjust.domain.types import EntryStatus

__all__ = [
    'ClusterInfo',
    'EntryStatus',
    'EntryTransition',
    'Partition',
    'PhotoEntry',
    'QueueProgress',
]
