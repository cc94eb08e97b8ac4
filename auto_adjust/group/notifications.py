"""
Notification channel for group progress.

Events are published after a state transition has completed. Callbacks are
plain functions (coroutine functions are rejected at registration) and run
inline but are isolated: an exception is logged and swallowed. Consumers that
may be slow should ``subscribe()`` instead and drain the returned queue at
their own pace.
"""

import asyncio
import inspect
import logging
from typing import Callable, List, Union

from auto_adjust.domain import EntryTransition, QueueProgress
from auto_adjust.domain.types import EntryCallback, ProgressCallback

logger = logging.getLogger(__name__)

Event = Union[EntryTransition, QueueProgress]


def _check_callback(callback: Callable) -> Callable:
    """Callbacks run inline and must be plain functions; use ``subscribe()`` from async code."""
    if not callable(callback):
        raise TypeError(f"Callback must be callable, got {type(callback).__name__}")
    if inspect.iscoroutinefunction(callback) or inspect.iscoroutinefunction(getattr(callback, '__call__', None)):
        raise TypeError(
            f"Callback {callback!r} is a coroutine function; notification callbacks are synchronous, "
            f"use subscribe() to consume events from async code"
        )
    return callback


class NotificationChannel:
    """Ordered fan-out of entry and queue events."""

    def __init__(self):
        self._progress_callbacks: List[ProgressCallback] = []
        self._entry_callbacks: List[EntryCallback] = []
        self._subscribers: List[asyncio.Queue] = []

    def on_progress(self, callback: ProgressCallback) -> None:
        """Register a queue-level callback."""
        self._progress_callbacks.append(_check_callback(callback))

    def on_entry(self, callback: EntryCallback) -> None:
        """Register a per-entry callback."""
        self._entry_callbacks.append(_check_callback(callback))

    def subscribe(self) -> asyncio.Queue:
        """Subscribe to all events; the queue is unbounded and never blocks the publisher."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.append(queue)
        logger.debug(f"Subscriber added ({len(self._subscribers)} total)")
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)
            logger.debug(f"Subscriber removed ({len(self._subscribers)} total)")

    def publish(self, transition: EntryTransition, progress: QueueProgress) -> None:
        """Deliver one entry transition followed by the matching queue progress."""
        for callback in list(self._entry_callbacks):
            self._invoke(callback, transition)
        for callback in list(self._progress_callbacks):
            self._invoke(callback, progress)
        for queue in list(self._subscribers):
            queue.put_nowait(transition)
            queue.put_nowait(progress)

    def _invoke(self, callback, event: Event) -> None:
        try:
            callback(event)
        except Exception:
            logger.exception(f"Notification callback {callback!r} failed for {event}")
