"""
CBM Core Time — Explicit Clock Protocol
=========================================
Stores stamp `created_at` from an injected clock, never from a
hidden call to datetime.now(). Tests pass a FixedClock and advance it
between writes so creation order is deterministic.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Protocol


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class SystemClock:
    """Production clock — real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock — returns a fixed timestamp until advanced.

    Usage:
        clock = FixedClock(datetime(2024, 1, 1, tzinfo=timezone.utc))
        clock.advance(1)
        assert clock.now_utc().second == 1
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, seconds: float) -> None:
        """Advance the fixed time (useful for multi-step test scenarios)."""
        self._fixed_dt = self._fixed_dt + timedelta(seconds=seconds)


class TickingClock(FixedClock):
    """
    Fixed clock that moves forward by `step_seconds` after every read.

    Gives each store write a distinct creation timestamp without the
    test having to advance the clock by hand.
    """

    def __init__(self, start: datetime, step_seconds: float = 1.0) -> None:
        super().__init__(start)
        self._step = step_seconds

    def now_utc(self) -> datetime:
        current = super().now_utc()
        self.advance(self._step)
        return current


def today_from(clock: Clock) -> date:
    """Calendar date of the clock's current instant (UTC)."""
    return clock.now_utc().date()
