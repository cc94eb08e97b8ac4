"""
auto-adjust: batch adjustment-transfer coordinator for photo editing.
"""

from auto_adjust.adjustments import AdjustmentKind, AdjustmentRecord
from auto_adjust.domain import EntryStatus, EntryTransition, PhotoEntry, QueueProgress
from auto_adjust.errors import (
    AutoAdjustError,
    ComputeFailure,
    EntryNotFound,
    InvalidStateTransition,
    PreconditionError,
    VersionMismatchError,
)
from auto_adjust.gateway import AutoComputeGateway, ComputeResult, RenderGateway
from auto_adjust.group import AutoAdjustmentsGroup, GroupConfig
from auto_adjust.style import Style, StyleRule, read_style, write_style

__version__ = "0.1.0"

__all__ = [
    'AdjustmentKind',
    'AdjustmentRecord',
    'AutoAdjustError',
    'AutoAdjustmentsGroup',
    'AutoComputeGateway',
    'ComputeFailure',
    'ComputeResult',
    'EntryNotFound',
    'EntryStatus',
    'EntryTransition',
    'GroupConfig',
    'InvalidStateTransition',
    'PhotoEntry',
    'PreconditionError',
    'QueueProgress',
    'RenderGateway',
    'Style',
    'StyleRule',
    'VersionMismatchError',
    'read_style',
    'write_style',
]
