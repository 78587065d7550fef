"""
CBM Permissions — Operation to Minimum Role Registry
======================================================
"""

from __future__ import annotations

from core.permissions.constants import (
    OPERATION_CASHBOOK_CREATE,
    OPERATION_CASHBOOK_DELETE,
    OPERATION_ENTRY_CREATE,
    OPERATION_ENTRY_DELETE,
    OPERATION_ENTRY_EDIT,
    OPERATION_MEMBERS_MANAGE,
)
from core.permissions.models import MemberRole

OPERATION_MINIMUM_ROLE = {
    OPERATION_CASHBOOK_CREATE: MemberRole.OPERATOR,
    OPERATION_CASHBOOK_DELETE: MemberRole.OWNER,
    OPERATION_ENTRY_CREATE: MemberRole.OPERATOR,
    OPERATION_ENTRY_EDIT: MemberRole.OPERATOR,
    OPERATION_ENTRY_DELETE: MemberRole.OWNER,
    OPERATION_MEMBERS_MANAGE: MemberRole.OWNER,
}


def resolve_minimum_role(operation: str) -> MemberRole | None:
    """Lowest role allowed to perform `operation`, or None if unmapped."""
    return OPERATION_MINIMUM_ROLE.get(operation)
