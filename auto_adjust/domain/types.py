"""Type definitions and enums shared across the coordinator."""

from enum import Enum
from typing import Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from auto_adjust.domain.models import EntryTransition, QueueProgress


class EntryStatus(str, Enum):
    """Lifecycle of a single photo entry."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (EntryStatus.COMPLETED, EntryStatus.FAILED)


# Type aliases for notification callbacks
ProgressCallback = Callable[["QueueProgress"], None]
EntryCallback = Callable[["EntryTransition"], None]
