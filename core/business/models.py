"""
CBM Core Business — Tenant, Membership and Cash Book Models
=============================================================
A Business owns its CashBooks and Members. A CashBook owns its Entries.
Totals and balances are never stored on a CashBook; they are projected.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from core.permissions.models import MemberRole


# ══════════════════════════════════════════════════════════════
# USER PROFILE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class UserProfile:
    """Directory record created the first time a user signs in."""

    user_id: str
    email: str
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("user_id must be a non-empty string.")
        if not isinstance(self.email, str):
            raise ValueError("email must be a string.")


# ══════════════════════════════════════════════════════════════
# BUSINESS ENTITY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Business:
    """
    Tenant container.

    `members` is the coarse list of user ids used for "my businesses"
    lookups; the role of each lives on the Member record.
    """

    business_id: uuid.UUID
    name: str
    owner_id: str
    created_at: datetime
    members: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.business_id, uuid.UUID):
            raise ValueError("business_id must be UUID.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")
        object.__setattr__(self, "members", tuple(self.members))

    def has_member(self, user_id: str) -> bool:
        return user_id in self.members


# ══════════════════════════════════════════════════════════════
# MEMBER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Member:
    """One user's role within one business. Email is a snapshot."""

    user_id: str
    email: str
    role: MemberRole

    def __post_init__(self):
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("user_id must be a non-empty string.")
        if not isinstance(self.role, MemberRole):
            object.__setattr__(self, "role", MemberRole.parse(self.role))

    def to_dict(self) -> dict:
        return {"id": self.user_id, "email": self.email, "role": self.role.value}


# ══════════════════════════════════════════════════════════════
# CASH BOOK
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CashBookRef:
    """Address of a cash book: (business, cash book)."""

    business_id: uuid.UUID
    cashbook_id: uuid.UUID

    def __str__(self) -> str:
        return f"{self.business_id}/{self.cashbook_id}"


@dataclass(frozen=True)
class CashBook:
    """Named ledger within a business."""

    cashbook_id: uuid.UUID
    business_id: uuid.UUID
    name: str
    created_at: datetime

    def __post_init__(self):
        if not isinstance(self.cashbook_id, uuid.UUID):
            raise ValueError("cashbook_id must be UUID.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")

    @property
    def ref(self) -> CashBookRef:
        return CashBookRef(business_id=self.business_id, cashbook_id=self.cashbook_id)

    def to_dict(self) -> dict:
        return {
            "id": str(self.cashbook_id),
            "business_id": str(self.business_id),
            "name": self.name,
            "created_at": self.created_at.isoformat(),
        }
