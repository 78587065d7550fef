"""
CBM Cash Book Engine — Live Ledger Subscription
==================================================
Consumer side of a cash book feed.

Each snapshot from the store replaces the ledger read model wholesale;
the consumer never patches a previous view. Closing the subscription
closes the underlying feed, which unregisters it from the hub.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from core.cashbook_store.protocol import EntrySnapshot
from core.feeds import SnapshotFeed
from core.primitives.ledger import ProjectedEntry
from projections.ledger import LedgerReadModel, LedgerView

logger = logging.getLogger("cbm.cashbook")


class LedgerSubscription:
    """
    Iterating yields one LedgerView per delivered snapshot and stops when
    the feed closes (unsubscribed, or the cash book was deleted).
    """

    def __init__(
        self,
        feed: SnapshotFeed[EntrySnapshot],
        *,
        query: Optional[str] = None,
        read_model: LedgerReadModel | None = None,
    ):
        self._feed = feed
        self._read_model = read_model or LedgerReadModel()
        self.query = query

    @property
    def read_model(self) -> LedgerReadModel:
        return self._read_model

    @property
    def view(self) -> LedgerView:
        return self._read_model.view

    @property
    def rows(self) -> List[ProjectedEntry]:
        """Current rows narrowed by the active query."""
        return self._read_model.search(self.query)

    @property
    def closed(self) -> bool:
        return self._feed.closed

    def _apply(self, snapshot: EntrySnapshot) -> LedgerView:
        return self._read_model.replace(snapshot)

    def next_view(self, timeout: Optional[float] = None) -> LedgerView:
        """
        Block for the next snapshot.

        Raises:
            FeedClosedError: subscription closed first.
            queue.Empty:     timeout elapsed.
        """
        return self._apply(self._feed.get(timeout=timeout))

    def poll(self) -> LedgerView:
        """Apply the newest pending snapshot, if any, and return the view."""
        snapshot = self._feed.drain()
        if snapshot is not None:
            self._apply(snapshot)
        return self.view

    def close(self) -> None:
        if not self._feed.closed:
            logger.debug(
                f"Ledger subscription for '{self._feed.key}' closed after "
                f"{self._read_model.snapshots_applied} snapshots"
            )
        self._feed.close()

    def __iter__(self) -> Iterator[LedgerView]:
        for snapshot in self._feed:
            yield self._apply(snapshot)

    def __enter__(self) -> "LedgerSubscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
