"""
Per-entry compute telemetry for an auto-adjustments group.

Keeps a bounded history of gateway calls (duration, outcome, error) and
lifetime counters that survive trimming: calls made, calls failed and how
often each entry was sent back to PENDING by a reference mark.
"""

import json
import logging
from collections import Counter, deque
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Deque, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECORDS = 1000


@dataclass(frozen=True)
class ComputeRecord:
    """Outcome of one gateway call."""
    entry_id: str
    duration_sec: float
    succeeded: bool
    error: Optional[str] = None


class GroupTelemetry:
    """
    Compute history of one group.

    Usage:
        telemetry = GroupTelemetry("abc123", max_records=500)
        telemetry.record_compute("IMG_001", 0.42)
        telemetry.record_compute("IMG_002", 1.10, error="decoder rejected IMG_002")
        telemetry.failure_rate  # 0.5
    """

    def __init__(self, group_id: str, max_records: int = DEFAULT_MAX_RECORDS):
        if max_records < 1:
            raise ValueError(f"max_records must be positive, got {max_records}")
        self.group_id = group_id
        self.max_records = max_records
        self._records: Deque[ComputeRecord] = deque(maxlen=max_records)
        self._requeues: Counter = Counter()
        self._calls = 0
        self._failures = 0

    @property
    def records(self) -> List[ComputeRecord]:
        """Most recent compute records, oldest first."""
        return list(self._records)

    @property
    def total_calls(self) -> int:
        return self._calls

    @property
    def total_failures(self) -> int:
        return self._failures

    @property
    def failure_rate(self) -> float:
        return self._failures / self._calls if self._calls else 0.0

    def record_compute(self, entry_id: str, duration_sec: float, error: Optional[Any] = None) -> ComputeRecord:
        """Record one gateway call; ``error`` marks it as failed."""
        record = ComputeRecord(
            entry_id=entry_id,
            duration_sec=duration_sec,
            succeeded=error is None,
            error=None if error is None else str(error),
        )
        self._records.append(record)
        self._calls += 1
        if not record.succeeded:
            self._failures += 1
        logger.debug(
            f"[TIMING] {self.group_id}/{entry_id}: {duration_sec:.3f}s "
            f"({'ok' if record.succeeded else 'failed'})"
        )
        return record

    def record_requeue(self, entry_ids: Iterable[str]) -> None:
        """Count entries invalidated by a reference mark."""
        self._requeues.update(entry_ids)

    def requeue_count(self, entry_id: str) -> int:
        return self._requeues[entry_id]

    def entry_durations(self, entry_id: str) -> List[float]:
        """Durations of the retained calls for one entry."""
        return [r.duration_sec for r in self._records if r.entry_id == entry_id]

    def clear(self) -> None:
        """Drop the history and reset every counter."""
        self._records.clear()
        self._requeues.clear()
        self._calls = 0
        self._failures = 0

    def get_summary(self) -> Dict[str, Any]:
        retained = list(self._records)
        slowest = max(retained, key=lambda r: r.duration_sec) if retained else None
        return {
            'group_id': self.group_id,
            'total_calls': self._calls,
            'total_failures': self._failures,
            'failure_rate': round(self.failure_rate, 4),
            'retained_records': len(retained),
            'mean_duration_sec': sum(r.duration_sec for r in retained) / len(retained) if retained else 0.0,
            'slowest_entry': slowest.entry_id if slowest else None,
            'total_requeues': sum(self._requeues.values()),
        }

    def export_json(self, path: Path) -> Path:
        """Write the summary, retained records and re-queue counts as JSON."""
        data = {
            'summary': self.get_summary(),
            'records': [asdict(r) for r in self._records],
            'requeues': dict(self._requeues),
        }
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2))
        logger.info(f"Telemetry exported to {path}")
        return path
