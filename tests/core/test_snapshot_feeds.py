"""
Tests for core.feeds — snapshot channel and keyed hub.
"""

from __future__ import annotations

import queue
import threading

import pytest

from core.feeds import FeedClosedError, FeedHub, SnapshotFeed


class TestSnapshotFeed:
    def test_delivers_in_order(self):
        feed: SnapshotFeed[tuple] = SnapshotFeed("k")
        feed.deliver((1,))
        feed.deliver((1, 2))
        assert feed.get(timeout=1) == (1,)
        assert feed.get(timeout=1) == (1, 2)
        assert feed.delivered == 2

    def test_get_times_out(self):
        feed = SnapshotFeed("k")
        with pytest.raises(queue.Empty):
            feed.get(timeout=0.01)

    def test_drain_returns_newest_only(self):
        feed = SnapshotFeed("k")
        for n in range(3):
            feed.deliver(n)
        assert feed.drain() == 2
        assert feed.drain() is None

    def test_close_is_idempotent_and_stops_delivery(self):
        closed = []
        feed = SnapshotFeed("k", on_close=closed.append)
        feed.close()
        feed.close()
        assert feed.closed
        assert closed == [feed]
        assert feed.deliver("late") is False
        with pytest.raises(FeedClosedError):
            feed.get(timeout=1)

    def test_iteration_ends_on_close(self):
        feed = SnapshotFeed("k")
        feed.deliver("a")
        feed.deliver("b")
        feed.close()
        assert list(feed) == ["a", "b"]

    def test_close_wakes_blocked_reader(self):
        feed = SnapshotFeed("k")
        seen = []

        def consume():
            for item in feed:
                seen.append(item)

        reader = threading.Thread(target=consume)
        reader.start()
        feed.deliver("x")
        feed.close()
        reader.join(timeout=2)
        assert not reader.is_alive()
        assert seen == ["x"]

    def test_context_manager_closes(self):
        with SnapshotFeed("k") as feed:
            pass
        assert feed.closed


class TestFeedHub:
    def test_initial_snapshot_then_updates(self):
        hub = FeedHub()
        feed = hub.subscribe("book", initial=())
        assert hub.publish("book", ("e1",)) == 1
        assert feed.get(timeout=1) == ()
        assert feed.get(timeout=1) == ("e1",)

    def test_fan_out_per_key(self):
        hub = FeedHub()
        a1 = hub.subscribe("a")
        a2 = hub.subscribe("a")
        b = hub.subscribe("b")
        assert hub.publish("a", "snap") == 2
        assert a1.drain() == "snap"
        assert a2.drain() == "snap"
        assert b.drain() is None

    def test_closing_feed_unsubscribes(self):
        hub = FeedHub()
        feed = hub.subscribe("a")
        assert hub.subscriber_count("a") == 1
        feed.close()
        assert hub.subscriber_count("a") == 0
        assert hub.publish("a", "snap") == 0

    def test_close_all(self):
        hub = FeedHub()
        feeds = [hub.subscribe("a") for _ in range(3)]
        hub.close_all("a")
        assert all(f.closed for f in feeds)
        assert hub.subscriber_count("a") == 0
