"""
CBM Membership Engine — Request Commands
===========================================
Typed requests for business and member management.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import ValidationError
from core.permissions.models import MemberRole


def _parse_role(value) -> MemberRole:
    try:
        return MemberRole.parse(value)
    except ValueError:
        raise ValidationError(
            f"role must be one of owner, operator, viewer; got '{value}'.",
        ) from None


def _require_text(value, field_name: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{field_name} must be non-empty.")
    return text


@dataclass(frozen=True)
class BusinessCreateRequest:
    """Request to open a business. The caller becomes its owner."""
    name: str

    def __post_init__(self):
        object.__setattr__(self, "name", _require_text(self.name, "Business name"))


@dataclass(frozen=True)
class MemberInviteRequest:
    """
    Request to add an existing user to a business by email.
    Email is matched case-insensitively; invited members start as viewers.
    """
    email: str
    role: MemberRole = MemberRole.VIEWER

    def __post_init__(self):
        email = _require_text(self.email, "email").lower()
        if "@" not in email:
            raise ValidationError(f"'{email}' is not an email address.")
        object.__setattr__(self, "email", email)
        object.__setattr__(self, "role", _parse_role(self.role))


@dataclass(frozen=True)
class MemberRoleChangeRequest:
    user_id: str
    role: MemberRole

    def __post_init__(self):
        object.__setattr__(self, "user_id", _require_text(self.user_id, "user_id"))
        object.__setattr__(self, "role", _parse_role(self.role))


@dataclass(frozen=True)
class MemberRemoveRequest:
    user_id: str

    def __post_init__(self):
        object.__setattr__(self, "user_id", _require_text(self.user_id, "user_id"))
