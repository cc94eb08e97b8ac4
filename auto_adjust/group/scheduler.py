"""
Auto-adjustments group - the batch coordinator.

A group owns an insertion-ordered set of photo entries and one worker task
that feeds them, one at a time, through the auto-compute gateway. Every
mutation of group state (processing steps, reference marks, manual edits,
style loading, registration) runs under the group's lock, so caller
operations never interleave with an in-flight processing step.

Usage:
    group = AutoAdjustmentsGroup(gateway, {"IMG_1": handle1, "IMG_2": handle2}, config)
    await group.resume()
    await group.wait_until_completed()
    await group.mark_as_reference("IMG_1")
    await group.wait_until_completed()
    style = group.save_ai_style()
"""

import asyncio
import itertools
import logging
import time
import uuid
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from auto_adjust.adjustments import AdjustmentRecord
from auto_adjust.clustering import ClusteringEngine, load_clustering_method
from auto_adjust.domain import (
    ClusterInfo,
    EntryStatus,
    EntryTransition,
    Partition,
    PhotoEntry,
    QueueProgress,
)
from auto_adjust.domain.types import EntryCallback, ProgressCallback
from auto_adjust.errors import ComputeFailure, InvalidStateTransition, PreconditionError, VersionMismatchError
from auto_adjust.gateway import AutoComputeGateway, ComputeResult
from auto_adjust.group.config import GroupConfig
from auto_adjust.group.notifications import NotificationChannel
from auto_adjust.group.propagation import resolve_adjustments
from auto_adjust.group.registry import EntryRegistry
from auto_adjust.group.telemetry import GroupTelemetry
from auto_adjust.style import SUPPORTED_STYLE_VERSIONS, Style, active_reference, derive_style, nearest_rule

logger = logging.getLogger(__name__)

EntrySources = Union[Mapping[str, Any], Iterable[str]]


def _entry_items(entries: EntrySources) -> List[Tuple[str, Any]]:
    """Accept either ``{id: source}`` or a plain iterable of ids."""
    if isinstance(entries, Mapping):
        return list(entries.items())
    return [(entry_id, None) for entry_id in entries]


class AutoAdjustmentsGroup:
    """
    Coordinator for one batch of photos.

    The group starts paused: nothing is processed before ``resume()``.
    """

    def __init__(
        self,
        gateway: AutoComputeGateway,
        entries: Optional[EntrySources] = None,
        config: Optional[GroupConfig] = None,
        group_id: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        on_entry: Optional[EntryCallback] = None
    ):
        """
        Initialize the group.

        Args:
            gateway: Auto-compute pipeline owned by the caller
            entries: Initial entries, ``{id: source}`` or an iterable of ids
            config: Group configuration (defaults to ``GroupConfig()``)
            group_id: Identifier used in logs and telemetry
            on_progress: Queue-level callback
            on_entry: Per-entry callback
        """
        self._gateway = gateway
        self._config = config or GroupConfig()
        self.group_id = group_id or uuid.uuid4().hex[:8]

        self._registry = EntryRegistry()
        self._pending: Deque[str] = deque()
        self._clustering = ClusteringEngine(load_clustering_method(self._config.clustering_config()))
        self._style: Optional[Style] = None
        self._reference_ranks = itertools.count(1)

        self._notifications = NotificationChannel()
        if on_progress is not None:
            self._notifications.on_progress(on_progress)
        if on_entry is not None:
            self._notifications.on_entry(on_entry)
        self.telemetry = GroupTelemetry(self.group_id, max_records=self._config.max_timing_records)

        self._lock = asyncio.Lock()
        self._wake = asyncio.Event()
        self._idle = asyncio.Event()
        self._paused = True
        self._worker: Optional[asyncio.Task] = None

        if entries is not None:
            self._register(_entry_items(entries))
        self._refresh_idle()

        kinds = sorted(k.value for k in self._config.kinds)
        logger.info(f"Group {self.group_id} created with {len(self._registry)} entries, kinds={kinds}")

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> GroupConfig:
        return self._config

    @property
    def style(self) -> Optional[Style]:
        return self._style

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_running(self) -> bool:
        return not self._paused and self._worker is not None and not self._worker.done()

    def get_entry(self, entry_id: str) -> PhotoEntry:
        return self._registry.get(entry_id)

    def entries(self) -> List[PhotoEntry]:
        return list(self._registry)

    def status_counts(self) -> Dict[EntryStatus, int]:
        return self._registry.count_by_status()

    def progress(self) -> QueueProgress:
        counts = self._registry.count_by_status()
        failed = counts[EntryStatus.FAILED]
        return QueueProgress(
            completed_count=counts[EntryStatus.COMPLETED] + failed,
            failed_count=failed,
            total_count=len(self._registry),
        )

    def partition(self) -> Partition:
        """Current cluster partition (recomputed if stale)."""
        return self._clustering.partition(self._registry)

    def clusters(self) -> List[ClusterInfo]:
        """Cluster summaries with their active reference."""
        partition = self.partition()
        infos = []
        for cluster_id in sorted(partition.clusters):
            ids = partition.clusters[cluster_id]
            reference = active_reference(self._registry.get(i) for i in ids)
            infos.append(ClusterInfo(
                cluster_id=cluster_id,
                entry_ids=list(ids),
                reference_id=reference.id if reference else None,
            ))
        return infos

    def get_adjustments(self, entry_id: str) -> Optional[AdjustmentRecord]:
        """
        Resolved adjustments of a completed entry.

        Returns None for entries that are pending, processing or failed, so a
        partially resolved record is never exposed.
        """
        entry = self._registry.get(entry_id)
        if entry.status is not EntryStatus.COMPLETED:
            return None
        return entry.adjustments

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def on_progress(self, callback: ProgressCallback) -> None:
        self._notifications.on_progress(callback)

    def on_entry(self, callback: EntryCallback) -> None:
        self._notifications.on_entry(callback)

    def subscribe(self) -> asyncio.Queue:
        return self._notifications.subscribe()

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._notifications.unsubscribe(queue)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    async def resume(self) -> None:
        """Start (or continue) processing pending entries. No-op while running."""
        if self.is_running:
            logger.debug(f"Group {self.group_id}: resume ignored, already running")
            return
        self._paused = False
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name=f"auto-adjust-{self.group_id}")
        self._wake.set()
        logger.info(f"Group {self.group_id}: resumed ({len(self._pending)} pending)")

    def pause(self) -> None:
        """
        Stop dequeuing after the in-flight entry finishes.

        The in-flight gateway call is never cancelled. No-op while paused.
        """
        if self._paused:
            logger.debug(f"Group {self.group_id}: pause ignored, already paused")
            return
        self._paused = True
        self._wake.set()
        logger.info(f"Group {self.group_id}: pause requested ({len(self._pending)} pending)")

    async def wait_until_completed(self) -> None:
        """
        Wait until no entry is pending or processing.

        Never returns while the group is paused with pending entries; call
        ``resume()`` first.
        """
        await self._idle.wait()

    async def aclose(self) -> None:
        """Pause and wait for the worker to finish its in-flight step."""
        self.pause()
        if self._worker is not None:
            await self._worker
            self._worker = None

    async def add_entries(self, entries: EntrySources) -> List[str]:
        """
        Register more entries; they are queued after everything already pending.

        Raises:
            ValueError: If an id is empty, not a string or already registered
                (nothing is added then)
        """
        items = _entry_items(entries)
        async with self._lock:
            try:
                ids = self._register(items)
            finally:
                self._refresh_idle()
            if self.is_running:
                self._wake.set()
        logger.info(f"Group {self.group_id}: added {len(ids)} entries")
        return ids

    def _register(self, items: List[Tuple[str, Any]]) -> List[str]:
        # Validate the whole batch before touching the registry
        seen = set()
        for entry_id, _ in items:
            self._registry.check_id(entry_id)
            if entry_id in self._registry or entry_id in seen:
                raise ValueError(f"Duplicate entry id: {entry_id}")
            seen.add(entry_id)
        for entry_id, source in items:
            self._registry.register(entry_id, source)
            self._pending.append(entry_id)
        return [entry_id for entry_id, _ in items]

    async def _run(self) -> None:
        logger.info(f"Group {self.group_id}: worker started")
        while not self._paused:
            async with self._lock:
                entry_id = self._pending.popleft() if self._pending else None
                if entry_id is not None:
                    await self._process(entry_id)
                    continue
            self._wake.clear()
            await self._wake.wait()
        logger.info(f"Group {self.group_id}: worker stopped ({len(self._pending)} pending)")

    async def _process(self, entry_id: str) -> None:
        """One dequeue step: PENDING -> PROCESSING -> COMPLETED or FAILED."""
        entry = self._registry.get(entry_id)
        if entry.status is not EntryStatus.PENDING:
            logger.debug(f"Skipping {entry_id}: status is {entry.status.value}")
            return

        self._transition(entry, EntryStatus.PROCESSING)
        started = time.perf_counter()
        try:
            result = await self._gateway.compute_features(entry, self._config.kinds)
            self._apply_result(entry, result)
        except Exception as e:
            self._fail(entry, e, time.perf_counter() - started)
            return
        self.telemetry.record_compute(entry_id, time.perf_counter() - started)
        self._transition(entry, EntryStatus.COMPLETED)

    def _apply_result(self, entry: PhotoEntry, result: ComputeResult) -> None:
        if not isinstance(result, ComputeResult):
            raise TypeError(f"Gateway returned {type(result).__name__}, expected ComputeResult")

        computed_fields = self._config.computed_fields
        ignored = result.adjustments.set_fields - computed_fields
        if ignored:
            logger.debug(f"{entry.id}: ignoring fields outside configured kinds: {sorted(ignored)}")

        entry.features = result.features
        entry.computed = result.adjustments.only(computed_fields)
        self._clustering.invalidate()
        entry.adjustments = self._resolve(entry, prior=entry.adjustments)

    def _fail(self, entry: PhotoEntry, error: Exception, duration_sec: float) -> None:
        if not isinstance(error, ComputeFailure):
            failure = ComputeFailure(entry.id, f"{type(error).__name__}: {error}")
            failure.__cause__ = error
            error = failure
        entry.last_error = error
        self.telemetry.record_compute(entry.id, duration_sec, error=error)
        self._clustering.invalidate()
        logger.warning(f"Group {self.group_id}: {error}")
        self._transition(entry, EntryStatus.FAILED)

    def _transition(self, entry: PhotoEntry, status: EntryStatus) -> None:
        previous = entry.status
        entry.status = status
        self._refresh_idle()
        logger.debug(f"{entry.id}: {previous.value} -> {status.value}")
        self._notifications.publish(EntryTransition(entry.id, status, previous), self.progress())

    def _refresh_idle(self) -> None:
        counts = self._registry.count_by_status()
        if counts[EntryStatus.PENDING] == 0 and counts[EntryStatus.PROCESSING] == 0:
            if not self._idle.is_set():
                logger.info(f"Group {self.group_id}: all entries processed")
            self._idle.set()
        else:
            self._idle.clear()

    # ------------------------------------------------------------------
    # Reference propagation
    # ------------------------------------------------------------------

    def _resolve(self, entry: PhotoEntry, prior: Optional[AdjustmentRecord]) -> AdjustmentRecord:
        reference = None
        rule = None
        if not entry.is_reference:
            partition = self._clustering.partition(self._registry)
            members = [self._registry.get(i) for i in partition.members_of(entry.id)]
            reference = active_reference(members, exclude=entry.id)
            if reference is None and self._style is not None:
                rule = nearest_rule(self._style, entry.features)
        return resolve_adjustments(entry, self._config.computed_fields, reference, rule, prior)

    async def mark_as_reference(self, entry_id: str) -> List[str]:
        """
        Make a completed entry the reference of its cluster.

        Every other non-reference completed member of the cluster is sent back
        to PENDING with its adjustments cleared, in registration order.

        Returns:
            Ids of the invalidated entries

        Raises:
            EntryNotFound: Unknown id
            InvalidStateTransition: Entry is not COMPLETED
        """
        async with self._lock:
            entry = self._registry.get(entry_id)
            if entry.status is not EntryStatus.COMPLETED:
                raise InvalidStateTransition(
                    f"Cannot mark {entry_id} as reference: status is {entry.status.value}"
                )
            entry.is_reference = True
            entry.reference_rank = next(self._reference_ranks)
            self._clustering.invalidate()

            cluster = set(self._clustering.partition(self._registry).members_of(entry_id))
            invalidated = []
            for member in self._registry:
                if member.id not in cluster or member.id == entry_id or member.is_reference:
                    continue
                if member.status is not EntryStatus.COMPLETED:
                    continue
                member.adjustments = None
                self._pending.append(member.id)
                self._transition(member, EntryStatus.PENDING)
                invalidated.append(member.id)

            self.telemetry.record_requeue(invalidated)
            if invalidated and self.is_running:
                self._wake.set()

        logger.info(f"Group {self.group_id}: {entry_id} marked as reference, {len(invalidated)} entries re-queued")
        return invalidated

    async def unmark_reference(self, entry_id: str) -> None:
        """
        Remove the reference mark from an entry.

        Cluster-mates keep their current adjustments until they are resolved again.
        """
        async with self._lock:
            entry = self._registry.get(entry_id)
            if not entry.is_reference:
                raise InvalidStateTransition(f"{entry_id} is not a reference")
            entry.is_reference = False
            entry.reference_rank = 0
            self._clustering.invalidate()
        logger.info(f"Group {self.group_id}: {entry_id} unmarked as reference")

    async def set_adjustments(
        self,
        entry_id: str,
        partial: Union[AdjustmentRecord, Mapping[str, float]]
    ) -> AdjustmentRecord:
        """
        Merge manual overrides into an entry.

        Later calls overwrite earlier values of the same field. The status never
        changes and nothing propagates to other entries; a completed entry's
        resolved record is updated in place.

        Returns:
            The entry's merged manual overrides
        """
        record = partial if isinstance(partial, AdjustmentRecord) else AdjustmentRecord.from_dict(dict(partial))
        async with self._lock:
            entry = self._registry.get(entry_id)
            entry.manual_overrides = entry.manual_overrides.merge(record)
            if entry.status is EntryStatus.COMPLETED and entry.adjustments is not None:
                entry.adjustments = entry.adjustments.merge(record)
        logger.debug(f"{entry_id}: manual overrides {entry.manual_overrides.to_dict()}")
        return entry.manual_overrides

    async def reresolve(self) -> int:
        """
        Re-apply resolution to every completed non-reference entry in place.

        Useful after ``load_ai_style``: no gateway call is made and no status
        changes.

        Returns:
            Number of entries whose resolved record changed
        """
        changed = 0
        async with self._lock:
            for entry in self._registry:
                if entry.status is not EntryStatus.COMPLETED or entry.is_reference:
                    continue
                resolved = self._resolve(entry, prior=entry.adjustments)
                if resolved != entry.adjustments:
                    entry.adjustments = resolved
                    changed += 1
        logger.info(f"Group {self.group_id}: re-resolved completed entries, {changed} changed")
        return changed

    # ------------------------------------------------------------------
    # Styles
    # ------------------------------------------------------------------

    def save_ai_style(self) -> Style:
        """
        Distill the processed group into a portable style.

        Failed entries are excluded.

        Raises:
            PreconditionError: If any entry is still pending or processing
        """
        counts = self._registry.count_by_status()
        outstanding = counts[EntryStatus.PENDING] + counts[EntryStatus.PROCESSING]
        if outstanding:
            raise PreconditionError(
                f"Cannot save style: {outstanding} of {len(self._registry)} entries are not processed yet"
            )
        partition = self._clustering.partition(self._registry)
        return derive_style(
            {entry.id: entry for entry in self._registry},
            partition,
            computed_fields=self._config.computed_fields,
            computed_kinds=self._config.kinds,
            metric=self._config.metric,
        )

    async def load_ai_style(self, style: Style) -> None:
        """
        Attach a style used to resolve entries without an active reference.

        Takes effect the next time an entry is resolved; statuses are untouched.

        Raises:
            VersionMismatchError: If the style version is not supported
        """
        if not isinstance(style, Style):
            raise TypeError(f"Expected Style, got {type(style).__name__}")
        if style.version not in SUPPORTED_STYLE_VERSIONS:
            raise VersionMismatchError(
                f"Unsupported style version: {style.version}. Supported: {sorted(SUPPORTED_STYLE_VERSIONS)}"
            )
        async with self._lock:
            self._style = style
        logger.info(f"Group {self.group_id}: loaded style with {len(style.rules)} rules")
