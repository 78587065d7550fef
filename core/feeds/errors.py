"""
CBM Feeds — Errors
====================
"""


class FeedError(Exception):
    """Base error for snapshot feeds."""
    pass


class FeedClosedError(FeedError):
    """Read attempted on a feed that has been closed."""

    def __init__(self, key: object):
        self.key = key
        super().__init__(f"Feed for '{key}' is closed.")
