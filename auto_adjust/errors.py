"""Exception types raised by the coordinator."""


class AutoAdjustError(Exception):
    """Base class for all coordinator errors."""


class EntryNotFound(AutoAdjustError, KeyError):
    """An operation referenced an unknown entry id."""

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"Entry not found: {entry_id}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidStateTransition(AutoAdjustError):
    """The entry's current status does not allow the requested operation."""


class ComputeFailure(AutoAdjustError):
    """The external auto-compute call failed for one entry."""

    def __init__(self, entry_id: str, message: str):
        self.entry_id = entry_id
        super().__init__(f"Auto-compute failed for {entry_id}: {message}")


class PreconditionError(AutoAdjustError):
    """The group is not in a state where the operation can run."""


class VersionMismatchError(AutoAdjustError):
    """A style blob has an unsupported format version."""
