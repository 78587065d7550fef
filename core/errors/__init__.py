"""
CBM Errors — Public API
=========================
"""

from core.errors.exceptions import (
    CascadeDeleteError,
    CashBookError,
    NotFoundError,
    PermissionDeniedError,
    StoreOperationError,
    ValidationError,
)
from core.errors.rejection import ReasonCode, RejectionReason

__all__ = [
    "CashBookError",
    "ValidationError",
    "PermissionDeniedError",
    "NotFoundError",
    "StoreOperationError",
    "CascadeDeleteError",
    "ReasonCode",
    "RejectionReason",
]
