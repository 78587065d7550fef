"""
CBM Permissions — Public API
==============================
"""

from core.permissions.constants import (
    OPERATION_CASHBOOK_CREATE,
    OPERATION_CASHBOOK_DELETE,
    OPERATION_ENTRY_CREATE,
    OPERATION_ENTRY_DELETE,
    OPERATION_ENTRY_EDIT,
    OPERATION_MEMBERS_MANAGE,
    VALID_OPERATIONS,
)
from core.permissions.evaluator import PermissionEvaluationResult, PermissionGate
from core.permissions.models import MemberRole
from core.permissions.registry import resolve_minimum_role

__all__ = [
    "OPERATION_CASHBOOK_CREATE",
    "OPERATION_CASHBOOK_DELETE",
    "OPERATION_ENTRY_CREATE",
    "OPERATION_ENTRY_EDIT",
    "OPERATION_ENTRY_DELETE",
    "OPERATION_MEMBERS_MANAGE",
    "VALID_OPERATIONS",
    "MemberRole",
    "PermissionGate",
    "PermissionEvaluationResult",
    "resolve_minimum_role",
]
