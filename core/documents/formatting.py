"""
CBM Documents — Currency and Date Formatting
==============================================
Indian Rupee convention used on screen and in every export:

    format_inr(Decimal("100000"))  → "₹1,00,000.00"
    format_inr(Decimal("-40.5"))   → "-₹40.50"

- Two decimal places, half away from zero
- Last three integer digits grouped, then groups of two (lakh/crore)
- Minus sign precedes the rupee symbol, and stays when a negative
  value rounds to zero ("-₹0.00"), as the en-IN number format does

Dates use the en-IN short form: day/month/year, no zero padding.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

RUPEE = "₹"

_CENTS = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def group_indian(digits: str) -> str:
    """'10000000' → '1,00,00,000'."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_inr(value: Number) -> str:
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    quantized = abs(amount).quantize(_CENTS, rounding=ROUND_HALF_UP)
    negative = amount < 0
    whole, _, fraction = f"{quantized:f}".partition(".")
    text = f"{RUPEE}{group_indian(whole)}.{fraction or '00'}"
    return f"-{text}" if negative else text


def format_entry_date(value: Union[date, datetime]) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.day}/{value.month}/{value.year}"


def export_filename(title: str, extension: str) -> str:
    """Title with spaces replaced by underscores, plus the extension."""
    return f"{title.replace(' ', '_')}.{extension.lstrip('.')}"
