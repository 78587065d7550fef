"""
CBM Feeds — Snapshot Hub
==========================
Keyed fan-out of full snapshots to open feeds.

Rules:
- Multiple feeds per key allowed
- A feed receives only snapshots published after it subscribed,
  plus the optional initial snapshot handed to subscribe()
- Closing a feed removes it from the hub; no listener outlives its consumer
- In-memory only, thread-safe
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, List, Optional, TypeVar

from core.feeds.channel import SnapshotFeed

logger = logging.getLogger("cbm.feeds")

T = TypeVar("T")


class FeedHub:
    """In-memory registry of open snapshot feeds."""

    def __init__(self) -> None:
        self._feeds: Dict[object, List[SnapshotFeed]] = {}
        self._lock = Lock()

    def subscribe(self, key: object, initial: Optional[T] = None) -> SnapshotFeed[T]:
        feed: SnapshotFeed[T] = SnapshotFeed(key, on_close=self._unsubscribe)
        with self._lock:
            self._feeds.setdefault(key, []).append(feed)
        if initial is not None:
            feed.deliver(initial)
        logger.info(f"Feed opened for '{key}'")
        return feed

    def publish(self, key: object, snapshot: T) -> int:
        """Deliver `snapshot` to every open feed for `key`. Returns the count."""
        with self._lock:
            feeds = list(self._feeds.get(key, ()))

        delivered = 0
        for feed in feeds:
            if feed.deliver(snapshot):
                delivered += 1

        logger.debug(f"Published snapshot for '{key}' to {delivered} feed(s)")
        return delivered

    def close_all(self, key: object) -> None:
        """Close every feed for `key` (e.g. its cash book was deleted)."""
        with self._lock:
            feeds = list(self._feeds.get(key, ()))
        for feed in feeds:
            feed.close()

    def subscriber_count(self, key: object) -> int:
        with self._lock:
            return len(self._feeds.get(key, ()))

    def _unsubscribe(self, feed: SnapshotFeed) -> None:
        with self._lock:
            feeds = self._feeds.get(feed.key)
            if not feeds:
                return
            try:
                feeds.remove(feed)
            except ValueError:
                return
            if not feeds:
                del self._feeds[feed.key]
        logger.info(f"Feed unsubscribed for '{feed.key}'")
