"""
CBM Errors — Rejection Model
==============================
Structured reasons for refused operations.

A RejectionReason is an explanation, not an exception. Gate and policy
functions return one (or None on success); services raise it wrapped in
the matching exception from core.errors.exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a refused operation.

    Fields:
        code:        Machine-readable rejection code (e.g. 'PERMISSION_DENIED').
        message:     Human-readable explanation, safe to show inline.
        policy_name: Name of the gate or policy that refused.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Authorization ─────────────────────────────────────────
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    UNKNOWN_OPERATION = "UNKNOWN_OPERATION"
    SELF_REMOVAL_FORBIDDEN = "SELF_REMOVAL_FORBIDDEN"
    SELF_DEMOTION_FORBIDDEN = "SELF_DEMOTION_FORBIDDEN"

    # ── Validation ────────────────────────────────────────────
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_FIELD = "INVALID_FIELD"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    DUPLICATE_MEMBER = "DUPLICATE_MEMBER"

    # ── Lookup ────────────────────────────────────────────────
    NOT_FOUND = "NOT_FOUND"

    # ── Store ─────────────────────────────────────────────────
    STORE_FAILURE = "STORE_FAILURE"
    CASCADE_INCOMPLETE = "CASCADE_INCOMPLETE"
