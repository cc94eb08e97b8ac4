"""Entry registry - insertion-ordered bookkeeping of photo entries."""

from collections import Counter
from typing import Any, Dict, Iterator, List

from auto_adjust.errors import EntryNotFound
from auto_adjust.domain import EntryStatus, PhotoEntry


class EntryRegistry:
    """Registry holding the entries of one group in insertion order."""

    def __init__(self):
        self._entries: Dict[str, PhotoEntry] = {}

    @staticmethod
    def check_id(entry_id: Any) -> None:
        """Raise ValueError unless ``entry_id`` is a non-empty string."""
        if not isinstance(entry_id, str) or not entry_id:
            raise ValueError(f"Entry id must be a non-empty string, got {entry_id!r}")

    def register(self, entry_id: str, source: Any = None) -> PhotoEntry:
        """Register a fresh PENDING entry."""
        self.check_id(entry_id)
        if entry_id in self._entries:
            raise ValueError(f"Duplicate entry id: {entry_id}")
        entry = PhotoEntry(id=entry_id, source=source)
        self._entries[entry_id] = entry
        return entry

    def get(self, entry_id: str) -> PhotoEntry:
        """Get an entry by id."""
        if entry_id not in self._entries:
            raise EntryNotFound(entry_id)
        return self._entries[entry_id]

    def ids(self) -> List[str]:
        return list(self._entries.keys())

    def with_status(self, status: EntryStatus) -> List[PhotoEntry]:
        return [e for e in self._entries.values() if e.status is status]

    def count_by_status(self) -> Dict[EntryStatus, int]:
        """Number of entries per status (every status present, possibly zero)."""
        counts = Counter(e.status for e in self._entries.values())
        return {status: counts.get(status, 0) for status in EntryStatus}

    def __contains__(self, entry_id: str) -> bool:
        return entry_id in self._entries

    def __iter__(self) -> Iterator[PhotoEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)
