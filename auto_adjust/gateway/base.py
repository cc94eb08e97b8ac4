"""
External collaborator interfaces.

The coordinator never decodes or renders pixels itself. It awaits an
``AutoComputeGateway`` for per-photo feature extraction and auto-adjustments;
rendering is done by the caller through a ``RenderGateway`` once the resolved
adjustments are available.

Gateways are resource handles owned by the caller: a group uses the handle it
was given and never creates, shares or closes one on its own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional

import numpy as np

from auto_adjust.adjustments import AdjustmentKind, AdjustmentRecord
from auto_adjust.domain import PhotoEntry


@dataclass
class ComputeResult:
    """Output of one auto-compute call."""
    adjustments: AdjustmentRecord = field(default_factory=AdjustmentRecord)
    features: Optional[np.ndarray] = None

    def __post_init__(self):
        if self.features is not None:
            self.features = np.asarray(self.features, dtype=np.float64).ravel()


class AutoComputeGateway(ABC):
    """Per-photo auto-compute pipeline."""

    @abstractmethod
    async def compute_features(
        self,
        entry: PhotoEntry,
        kinds: FrozenSet[AdjustmentKind]
    ) -> ComputeResult:
        """
        Compute features and the requested adjustment kinds for one entry.

        Called at most once at a time per group. Implementations may raise
        ``ComputeFailure`` (or any exception); the coordinator records it on
        the entry and never retries.

        Args:
            entry: Entry being processed (``entry.source`` is the image handle)
            kinds: Auto-compute kinds configured for the group

        Returns:
            ComputeResult with the feature vector (or None) and computed fields
        """
        ...


class RenderGateway(ABC):
    """Applies a resolved adjustment record to source image data."""

    @abstractmethod
    async def render(self, source: Any, adjustments: AdjustmentRecord) -> bytes:
        """Return encoded output bytes for ``source`` with ``adjustments`` applied."""
        ...
