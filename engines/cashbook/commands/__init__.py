"""
CBM Cash Book Engine — Request Commands
==========================================
Typed requests for cash book and entry mutations.

Every request validates in __post_init__, so a malformed request never
reaches the permission gate or the store.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from core.errors import ReasonCode, ValidationError
from core.primitives.ledger import DEFAULT_REMARK, EntryFields, EntryType

INVALID_AMOUNT_MESSAGE = "Please enter a valid amount."

_CENTS = Decimal("0.01")

# entry amounts are stored with 18 digits, 2 of them after the point
MAX_AMOUNT = Decimal("9999999999999999.99")


# ══════════════════════════════════════════════════════════════
# FIELD PARSERS
# ══════════════════════════════════════════════════════════════

def parse_entry_type(value: Any) -> EntryType:
    if isinstance(value, EntryType):
        return value
    try:
        return EntryType(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            f"type must be 'in' or 'out', got '{value}'.",
        ) from None


def parse_amount(value: Any) -> Decimal:
    """Positive, finite, rounded to paise. Anything else is rejected."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(INVALID_AMOUNT_MESSAGE, ReasonCode.INVALID_AMOUNT)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(INVALID_AMOUNT_MESSAGE, ReasonCode.INVALID_AMOUNT) from None
    if not amount.is_finite() or amount > MAX_AMOUNT:
        raise ValidationError(INVALID_AMOUNT_MESSAGE, ReasonCode.INVALID_AMOUNT)
    try:
        amount = amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(INVALID_AMOUNT_MESSAGE, ReasonCode.INVALID_AMOUNT) from None
    if amount <= 0 or amount > MAX_AMOUNT:
        raise ValidationError(INVALID_AMOUNT_MESSAGE, ReasonCode.INVALID_AMOUNT)
    return amount


def parse_entry_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"date must be YYYY-MM-DD, got '{value}'.") from None


def normalize_remark(value: Optional[str]) -> str:
    remark = (value or "").strip()
    return remark or DEFAULT_REMARK


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EntryCreateRequest:
    """
    Request to record a cash movement.

    Missing date means "today" by the service clock.
    Blank remark becomes "Cash".
    """
    type: EntryType
    amount: Decimal
    date: Optional[date] = None
    remark: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "type", parse_entry_type(self.type))
        object.__setattr__(self, "amount", parse_amount(self.amount))
        object.__setattr__(self, "date", parse_entry_date(self.date))
        object.__setattr__(self, "remark", normalize_remark(self.remark))

    def to_fields(self, *, today: date) -> EntryFields:
        return EntryFields(
            type=self.type,
            amount=self.amount,
            date=self.date or today,
            remark=self.remark,
        )


@dataclass(frozen=True)
class EntryUpdateRequest:
    """Request to overwrite the editable fields of an existing entry."""
    entry_id: uuid.UUID
    type: EntryType
    amount: Decimal
    date: date
    remark: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.entry_id, uuid.UUID):
            try:
                object.__setattr__(self, "entry_id", uuid.UUID(str(self.entry_id)))
            except ValueError:
                raise ValidationError("entry_id must be a UUID.") from None
        object.__setattr__(self, "type", parse_entry_type(self.type))
        object.__setattr__(self, "amount", parse_amount(self.amount))
        parsed = parse_entry_date(self.date)
        if parsed is None:
            raise ValidationError("date must be provided.")
        object.__setattr__(self, "date", parsed)
        object.__setattr__(self, "remark", normalize_remark(self.remark))

    def to_fields(self) -> EntryFields:
        return EntryFields(
            type=self.type,
            amount=self.amount,
            date=self.date,
            remark=self.remark,
        )


@dataclass(frozen=True)
class CashBookCreateRequest:
    """Request to open a new named cash book in a business."""
    name: str

    def __post_init__(self):
        name = (self.name or "").strip() if isinstance(self.name, str) else ""
        if not name:
            raise ValidationError("Cash book name must be non-empty.")
        object.__setattr__(self, "name", name)
