"""
CBM Projections — Ledger Read Model
=====================================
Turns the full, unordered entry set of one cash book into the view the
cash book screen and the exporters read.

Canonical order: date descending, then created_at descending
(most recently created first). Python's sort is stable, so entries that
tie on both keys keep the order the store delivered them in.

Running balance, walking newest → oldest:
    balance(e1) = totals.balance
    balance(ek) = balance(ek-1) - effect(ek-1)
which is the cash book balance immediately after each entry was applied.

Search narrows rows AFTER balances are assigned and never touches totals.

Every call recomputes from the snapshot it is given. Nothing is cached
between snapshots, so arbitrary insert/edit/delete order cannot drift.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from core.primitives.ledger import Entry, EntryType, LedgerTotals, ProjectedEntry

logger = logging.getLogger("cbm.ledger")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════
# PURE STEPS
# ══════════════════════════════════════════════════════════════

def _created_key(entry: Entry) -> datetime:
    created = entry.created_at
    if created is None:
        return _EPOCH
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


def canonical_order(entries: Iterable[Entry]) -> List[Entry]:
    """Newest first: date desc, then created_at desc. Stable for full ties."""
    return sorted(
        entries,
        key=lambda e: (e.date, _created_key(e)),
        reverse=True,
    )


def compute_totals(entries: Iterable[Entry]) -> LedgerTotals:
    total_in = Decimal(0)
    total_out = Decimal(0)
    for entry in entries:
        if entry.type == EntryType.IN:
            total_in += entry.amount
        else:
            total_out += entry.amount
    return LedgerTotals(total_in=total_in, total_out=total_out)


def assign_running_balances(
    ordered: List[Entry],
    closing_balance: Decimal,
) -> List[ProjectedEntry]:
    """
    Attach a running balance to entries already in canonical order.

    closing_balance is the balance of the whole cash book; it belongs to
    the newest entry and is unwound one entry at a time.
    """
    running = closing_balance
    projected: List[ProjectedEntry] = []
    for entry in ordered:
        projected.append(ProjectedEntry.from_entry(entry, running))
        running -= entry.effect
    return projected


def filter_by_remark(
    rows: Iterable[ProjectedEntry],
    query: Optional[str],
) -> List[ProjectedEntry]:
    """Case-insensitive substring match on remark. Blank query keeps all rows."""
    rows = list(rows)
    needle = (query or "").strip().lower()
    if not needle:
        return rows
    return [row for row in rows if needle in row.remark.lower()]


# ══════════════════════════════════════════════════════════════
# LEDGER VIEW
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerView:
    """
    Projection of one snapshot.

    totals: aggregate over every entry in the snapshot
    rows:   every entry, canonical order, with running balance
    """

    totals: LedgerTotals
    rows: Tuple[ProjectedEntry, ...] = field(default_factory=tuple)

    def search(self, query: Optional[str]) -> List[ProjectedEntry]:
        return filter_by_remark(self.rows, query)

    def to_dict(self, query: Optional[str] = None) -> Dict[str, Any]:
        return {
            "totals": self.totals.to_dict(),
            "entries": [row.to_dict() for row in self.search(query)],
        }


def project_ledger(entries: Iterable[Entry]) -> LedgerView:
    """Full projection of one cash book snapshot."""
    snapshot = list(entries)
    totals = compute_totals(snapshot)
    ordered = canonical_order(snapshot)
    rows = assign_running_balances(ordered, totals.balance)
    logger.debug(
        f"Projected {len(rows)} entries "
        f"(in={totals.total_in}, out={totals.total_out}, balance={totals.balance})"
    )
    return LedgerView(totals=totals, rows=tuple(rows))


# ══════════════════════════════════════════════════════════════
# READ MODEL (snapshot consumer)
# ══════════════════════════════════════════════════════════════

class LedgerReadModel:
    """
    Holds the latest projection for one cash book.

    Each delivered snapshot replaces the previous view wholesale; there is
    no incremental apply.
    """

    projection_name = "ledger_read_model"

    def __init__(self) -> None:
        self._view: LedgerView = LedgerView(totals=LedgerTotals())
        self._snapshots_applied = 0

    def replace(self, entries: Iterable[Entry]) -> LedgerView:
        self._view = project_ledger(entries)
        self._snapshots_applied += 1
        return self._view

    @property
    def view(self) -> LedgerView:
        return self._view

    @property
    def totals(self) -> LedgerTotals:
        return self._view.totals

    @property
    def snapshots_applied(self) -> int:
        return self._snapshots_applied

    def search(self, query: Optional[str]) -> List[ProjectedEntry]:
        return self._view.search(query)

    def truncate(self) -> None:
        self._view = LedgerView(totals=LedgerTotals())

    def snapshot(self) -> Dict[str, Any]:
        return {
            "entry_count": len(self._view.rows),
            "snapshots_applied": self._snapshots_applied,
            **self._view.totals.to_dict(),
        }


__all__ = [
    "LedgerReadModel",
    "LedgerView",
    "assign_running_balances",
    "canonical_order",
    "compute_totals",
    "filter_by_remark",
    "project_ledger",
]
