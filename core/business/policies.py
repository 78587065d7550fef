"""
CBM Core Business — Membership and Naming Policies
====================================================
Pure validation functions.
Return RejectionReason on failure, None on success.
"""

from __future__ import annotations

from typing import Iterable, Optional

from core.business.models import CashBook, Member
from core.errors import ReasonCode, RejectionReason


def validate_member_of_business(
    member: Optional[Member], user_id: str
) -> Optional[RejectionReason]:
    """Reject callers with no Member record for the business."""
    if member is None:
        return RejectionReason(
            code=ReasonCode.NOT_A_MEMBER,
            message=f"User '{user_id}' is not a member of this business.",
            policy_name="validate_member_of_business",
        )
    return None


def validate_not_already_member(
    email: str, members: Iterable[Member], user_id: Optional[str] = None
) -> Optional[RejectionReason]:
    """
    Reject an invitation whose email already belongs to a member.
    With user_id given, a matching member id is rejected too (the member's
    email snapshot may be stale).
    """
    wanted = email.strip().lower()
    if any(
        m.email.strip().lower() == wanted or (user_id is not None and m.user_id == user_id)
        for m in members
    ):
        return RejectionReason(
            code=ReasonCode.DUPLICATE_MEMBER,
            message="This user is already a member of the business.",
            policy_name="validate_not_already_member",
        )
    return None


def filter_cashbooks_by_name(
    cashbooks: Iterable[CashBook], query: Optional[str]
) -> list[CashBook]:
    """Case-insensitive substring match on cash book name."""
    needle = (query or "").lower()
    return [book for book in cashbooks if needle in book.name.lower()]
