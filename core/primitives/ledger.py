"""
CBM Ledger Primitive — Cash Book Entries
==========================================
Single-sided cash movements recorded in a cash book.

RULES:
- An entry is either IN (adds to the balance) or OUT (subtracts from it)
- Amounts are Decimal magnitudes; direction comes from the type, never the sign
- `date` is a calendar date and is the primary ordering key
- `created_at` is assigned by the store and only breaks ties between equal dates
- Totals and running balances are derived, never stored

This file contains NO persistence logic.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional


DEFAULT_REMARK = "Cash"


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class EntryType(Enum):
    """Direction of a cash movement."""
    IN = "in"
    OUT = "out"


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed value (0.1 → Decimal("0.1"))
    return Decimal(str(value))


# ══════════════════════════════════════════════════════════════
# ENTRY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Entry:
    """
    One recorded cash movement, as delivered by the store.

    created_at may be None while the store has not yet confirmed the
    write; such entries sort as the oldest among their date.
    """
    entry_id: uuid.UUID
    type: EntryType
    amount: Decimal
    date: date
    remark: str
    created_at: Optional[datetime]
    created_by: str

    def __post_init__(self):
        if not isinstance(self.type, EntryType):
            object.__setattr__(self, "type", EntryType(self.type))
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", _as_decimal(self.amount))
        if isinstance(self.date, datetime):
            object.__setattr__(self, "date", self.date.date())
        if not isinstance(self.date, date):
            raise ValueError("date must be a datetime.date.")

    @property
    def effect(self) -> Decimal:
        """Signed contribution of this entry to the cash book balance."""
        return self.amount if self.type == EntryType.IN else -self.amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.entry_id),
            "type": self.type.value,
            "amount": str(self.amount),
            "date": self.date.isoformat(),
            "remark": self.remark,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "created_by": self.created_by,
        }


@dataclass(frozen=True)
class ProjectedEntry(Entry):
    """Entry plus the cash book balance immediately after it was applied."""
    balance: Decimal = Decimal(0)

    @classmethod
    def from_entry(cls, entry: Entry, balance: Decimal) -> ProjectedEntry:
        values = {f.name: getattr(entry, f.name) for f in fields(Entry)}
        return cls(balance=balance, **values)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["balance"] = str(self.balance)
        return data


# ══════════════════════════════════════════════════════════════
# TOTALS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerTotals:
    """Aggregate of a whole cash book, independent of any search filter."""
    total_in: Decimal = Decimal(0)
    total_out: Decimal = Decimal(0)

    @property
    def balance(self) -> Decimal:
        return self.total_in - self.total_out

    def to_dict(self) -> Dict[str, str]:
        return {
            "total_in": str(self.total_in),
            "total_out": str(self.total_out),
            "balance": str(self.balance),
        }


# ══════════════════════════════════════════════════════════════
# EDITABLE FIELDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EntryFields:
    """
    The part of an entry a member may write.

    id, created_at and created_by are owned by the store and never
    appear here, so an edit cannot touch them.
    """
    type: EntryType
    amount: Decimal
    date: date
    remark: str = DEFAULT_REMARK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "amount": str(self.amount),
            "date": self.date.isoformat(),
            "remark": self.remark,
        }
