"""
CBM Documents — Ledger Render Plan
====================================
Both exporters render from the same plan, so the PDF and the
spreadsheet can never disagree about which rows or totals were exported.

The plan carries raw values. Each renderer formats for its medium:
the PDF formats amounts as rupees, the spreadsheet keeps them numeric.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from core.documents.formatting import format_entry_date
from core.primitives.ledger import EntryType, LedgerTotals, ProjectedEntry

DEFAULT_TITLE = "Cash Book"

LEDGER_COLUMNS: Tuple[str, ...] = ("Date", "Remark", "Cash In", "Cash Out", "Balance")


@dataclass(frozen=True)
class LedgerRow:
    date: str
    remark: str
    cash_in: Optional[Decimal]
    cash_out: Optional[Decimal]
    balance: Decimal


@dataclass(frozen=True)
class LedgerRenderPlan:
    title: str
    totals: LedgerTotals
    rows: Tuple[LedgerRow, ...] = field(default_factory=tuple)
    columns: Tuple[str, ...] = LEDGER_COLUMNS


def build_ledger_plan(
    title: Optional[str],
    rows: Iterable[ProjectedEntry],
    totals: LedgerTotals,
) -> LedgerRenderPlan:
    """
    Args:
        title:  cash book name; blank falls back to "Cash Book"
        rows:   projected entries to export, usually already searched
        totals: totals of the WHOLE cash book, not of `rows`
    """
    plan_rows = tuple(
        LedgerRow(
            date=format_entry_date(row.date),
            remark=row.remark,
            cash_in=row.amount if row.type == EntryType.IN else None,
            cash_out=row.amount if row.type == EntryType.OUT else None,
            balance=row.balance,
        )
        for row in rows
    )
    return LedgerRenderPlan(
        title=(title or "").strip() or DEFAULT_TITLE,
        totals=totals,
        rows=plan_rows,
    )
