"""
CBM Core Primitives — Ledger Value Objects
============================================
Pure Python, immutable, no Django dependency.

    ledger — cash book entries, projected entries and totals
"""

from core.primitives.ledger import (
    DEFAULT_REMARK,
    Entry,
    EntryFields,
    EntryType,
    LedgerTotals,
    ProjectedEntry,
)

__all__ = [
    "DEFAULT_REMARK",
    "Entry",
    "EntryFields",
    "EntryType",
    "LedgerTotals",
    "ProjectedEntry",
]
