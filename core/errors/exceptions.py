"""
CBM Errors — Exception Taxonomy
=================================
(a) ValidationError       — bad input, raised before the store is touched.
(b) PermissionDeniedError — role too low, or caller is not a member.
(c) StoreOperationError   — the backing store failed. No retry, no rollback.
(d) CascadeDeleteError    — cash book cascade stopped part way.
"""

from __future__ import annotations

from typing import Optional

from core.errors.rejection import ReasonCode, RejectionReason


class CashBookError(Exception):
    """Base error for all cash book operations."""
    pass


class ValidationError(CashBookError, ValueError):
    """Input rejected at the request boundary."""

    def __init__(self, message: str, code: str = ReasonCode.INVALID_FIELD):
        self.code = code
        super().__init__(message)


class PermissionDeniedError(CashBookError):
    """Caller's role does not allow the attempted operation."""

    def __init__(self, reason: RejectionReason):
        self.reason = reason
        self.code = reason.code
        super().__init__(reason.message)


class NotFoundError(CashBookError):
    """A referenced business, cash book, entry or member does not exist."""

    def __init__(self, kind: str, ref: object):
        self.kind = kind
        self.ref = ref
        self.code = ReasonCode.NOT_FOUND
        super().__init__(f"{kind} '{ref}' not found.")


class StoreOperationError(CashBookError):
    """The backing store rejected or failed an operation."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.code = ReasonCode.STORE_FAILURE
        super().__init__(f"{operation} failed: {message}")


class CascadeDeleteError(StoreOperationError):
    """
    Cash book cascade did not complete.

    entries_deleted counts the children removed before the failure;
    they are not restored.
    """

    def __init__(
        self,
        cashbook_id: object,
        entries_deleted: int,
        entries_total: int,
        cause: Optional[BaseException] = None,
    ):
        self.cashbook_id = cashbook_id
        self.entries_deleted = entries_deleted
        self.entries_total = entries_total
        super().__init__(
            "cashbook.delete_cascade",
            (
                f"cash book {cashbook_id} left partially deleted "
                f"({entries_deleted}/{entries_total} entries removed): {cause}"
            ),
        )
        self.code = ReasonCode.CASCADE_INCOMPLETE
