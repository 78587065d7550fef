"""
CBM Feeds — Public API
========================
Push-based delivery of full snapshots from the store to consumers.
"""

from core.feeds.channel import SnapshotFeed
from core.feeds.errors import FeedClosedError, FeedError
from core.feeds.hub import FeedHub

__all__ = [
    "FeedClosedError",
    "FeedError",
    "FeedHub",
    "SnapshotFeed",
]
