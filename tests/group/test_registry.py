"""Tests for EntryRegistry."""

import pytest

from auto_adjust.domain import EntryStatus
from auto_adjust.errors import EntryNotFound
from auto_adjust.group import EntryRegistry


@pytest.fixture
def registry():
    registry = EntryRegistry()
    for entry_id in ["A", "B", "C"]:
        registry.register(entry_id, source=f"/photos/{entry_id}.jpg")
    return registry


class TestEntryRegistry:
    def test_insertion_order(self, registry):
        assert registry.ids() == ["A", "B", "C"]
        assert [e.id for e in registry] == ["A", "B", "C"]
        assert len(registry) == 3

    def test_new_entries_are_pending(self, registry):
        entry = registry.get("B")
        assert entry.status is EntryStatus.PENDING
        assert entry.source == "/photos/B.jpg"
        assert entry.adjustments is None

    def test_duplicate_id_rejected(self, registry):
        with pytest.raises(ValueError, match="Duplicate"):
            registry.register("A")

    def test_empty_id_rejected(self, registry):
        with pytest.raises(ValueError):
            registry.register("")

    @pytest.mark.parametrize("entry_id", ["", None, 7])
    def test_check_id_rejects_empty_or_non_string(self, entry_id):
        with pytest.raises(ValueError, match="non-empty string"):
            EntryRegistry.check_id(entry_id)

    def test_unknown_id(self, registry):
        with pytest.raises(EntryNotFound) as exc_info:
            registry.get("Z")
        assert exc_info.value.entry_id == "Z"
        assert "Z" in str(exc_info.value)
        # Also usable as a KeyError
        assert isinstance(exc_info.value, KeyError)

    def test_count_by_status_lists_every_status(self, registry):
        registry.get("A").status = EntryStatus.COMPLETED
        counts = registry.count_by_status()
        assert counts == {
            EntryStatus.PENDING: 2,
            EntryStatus.PROCESSING: 0,
            EntryStatus.COMPLETED: 1,
            EntryStatus.FAILED: 0,
        }
        assert [e.id for e in registry.with_status(EntryStatus.PENDING)] == ["B", "C"]

    def test_contains(self, registry):
        assert "A" in registry
        assert "Z" not in registry
