"""
CBM Cash Book Engine — Policies
=================================
Membership first, then role. Both checks run before any store write.
"""

from __future__ import annotations

from typing import Optional

from core.business.models import Member
from core.business.policies import validate_member_of_business
from core.errors import RejectionReason
from core.permissions import PermissionGate


def member_may_perform_policy(
    member: Optional[Member],
    user_id: str,
    operation: str,
    gate=PermissionGate,
) -> Optional[RejectionReason]:
    """
    Reject non-members, then members whose role is below the operation's
    minimum.
    """
    rejection = validate_member_of_business(member, user_id)
    if rejection is not None:
        return rejection
    return gate.evaluate(member.role, operation).to_rejection(
        policy_name="member_may_perform_policy",
    )
