"""
Auto-adjustments group.

Schedules per-photo auto-compute across a batch, clusters photos by
similarity, propagates reference edits and distills portable styles.

Usage:
    from auto_adjust.group import AutoAdjustmentsGroup, GroupConfig

    group = AutoAdjustmentsGroup(gateway, sources, GroupConfig(kinds={"lighting"}))
    await group.resume()
    await group.wait_until_completed()
"""

from auto_adjust.group.config import GroupConfig
from auto_adjust.group.notifications import NotificationChannel
from auto_adjust.group.propagation import resolve_adjustments
from auto_adjust.group.registry import EntryRegistry
from auto_adjust.group.scheduler import AutoAdjustmentsGroup
from auto_adjust.group.telemetry import ComputeRecord, GroupTelemetry

__all__ = [
    'AutoAdjustmentsGroup',
    'ComputeRecord',
    'EntryRegistry',
    'GroupConfig',
    'GroupTelemetry',
    'NotificationChannel',
    'resolve_adjustments',
]
