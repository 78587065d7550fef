"""
CBM Core Time — Public API
============================
Injectable clocks used to stamp creation times.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    TickingClock,
    today_from,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "TickingClock",
    "today_from",
]
