"""
CBM Feeds — Snapshot Channel
==============================
One consumer's view of a live subscription.

The producer pushes COMPLETE snapshots (never deltas). The consumer reads
them in order, or drains to the newest one, and discards whatever it
derived from the previous snapshot.

Closing is idempotent, unregisters from the hub, and wakes any reader
blocked in get() or iteration.
"""

from __future__ import annotations

import logging
import queue
from threading import Lock
from typing import Callable, Generic, Iterator, Optional, TypeVar

from core.feeds.errors import FeedClosedError

logger = logging.getLogger("cbm.feeds")

T = TypeVar("T")

_CLOSED = object()


class SnapshotFeed(Generic[T]):
    """Closeable, iterable stream of full snapshots for one key."""

    def __init__(
        self,
        key: object,
        on_close: Optional[Callable[["SnapshotFeed[T]"], None]] = None,
    ) -> None:
        self._key = key
        self._on_close = on_close
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._closed = False
        self._lock = Lock()
        self._delivered = 0

    @property
    def key(self) -> object:
        return self._key

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def delivered(self) -> int:
        return self._delivered

    def deliver(self, snapshot: T) -> bool:
        """Producer side. Returns False if the feed is already closed."""
        with self._lock:
            if self._closed:
                return False
            self._delivered += 1
            self._queue.put(snapshot)
            return True

    def get(self, timeout: Optional[float] = None) -> T:
        """
        Block until the next snapshot arrives.

        Raises:
            FeedClosedError: the feed was closed before a snapshot arrived.
            queue.Empty:     timeout elapsed.
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # leave the marker for any other blocked reader
            self._queue.put(_CLOSED)
            raise FeedClosedError(self._key)
        return item  # type: ignore[return-value]

    def drain(self) -> Optional[T]:
        """Newest pending snapshot without blocking, older ones discarded."""
        latest: Optional[T] = None
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return latest
            if item is _CLOSED:
                self._queue.put(_CLOSED)
                return latest
            latest = item  # type: ignore[assignment]

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)
        logger.debug(f"Feed closed for '{self._key}' after {self._delivered} snapshots")
        if self._on_close is not None:
            self._on_close(self)

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except FeedClosedError:
                return

    def __enter__(self) -> "SnapshotFeed[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
