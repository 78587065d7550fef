"""
CBM Permissions — Member Roles
================================
viewer < operator < owner. Only the ordering matters to the gate.
"""

from __future__ import annotations

from enum import Enum


class MemberRole(Enum):
    VIEWER = "viewer"
    OPERATOR = "operator"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def at_least(self, other: MemberRole) -> bool:
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: object) -> MemberRole:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"role '{value}' not valid. "
                f"Must be one of: {sorted(r.value for r in cls)}"
            ) from None


_ROLE_RANK = {
    MemberRole.VIEWER: 0,
    MemberRole.OPERATOR: 1,
    MemberRole.OWNER: 2,
}
