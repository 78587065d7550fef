"""
Tests for core.time — Clock protocol and creation-time helpers.
"""

import pytest
from datetime import date, datetime, timezone, timedelta

from core.time.clock import (
    FixedClock,
    SystemClock,
    TickingClock,
    today_from,
)


# ── Clock Tests ──────────────────────────────────────────────

class TestSystemClock:
    def test_returns_utc_datetime(self):
        clock = SystemClock()
        dt = clock.now_utc()
        assert dt.tzinfo is not None
        assert dt.tzinfo == timezone.utc

    def test_time_advances(self):
        clock = SystemClock()
        t1 = clock.now_utc()
        t2 = clock.now_utc()
        assert t2 >= t1


class TestFixedClock:
    def test_returns_fixed_time(self):
        fixed = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        assert clock.now_utc() == fixed
        assert clock.now_utc() == fixed  # Same every time

    def test_rejects_naive_datetime(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            FixedClock(datetime(2025, 1, 1))

    def test_advance(self):
        fixed = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        clock.advance(60)
        assert clock.now_utc() == fixed + timedelta(seconds=60)


class TestTickingClock:
    def test_each_read_is_later(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        clock = TickingClock(start, step_seconds=2)
        assert clock.now_utc() == start
        assert clock.now_utc() == start + timedelta(seconds=2)
        assert clock.now_utc() == start + timedelta(seconds=4)


class TestTodayFrom:
    def test_calendar_date_of_clock(self):
        clock = FixedClock(datetime(2024, 3, 9, 23, 59, tzinfo=timezone.utc))
        assert today_from(clock) == date(2024, 3, 9)
