"""
CBM Permissions — Role/Permission Gate
========================================
Pure predicate over (role, operation). No I/O, no state.

Consulted by every mutation entry point before the store is called.
The store's own access rules may still refuse independently.

Member changes carry one extra rule: nobody may remove themself, and an
owner may not move themself off `owner`. This does NOT stop one owner
from demoting or removing another, so a business can still end up with
no owner.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.errors import ReasonCode, RejectionReason
from core.permissions.constants import OPERATION_MEMBERS_MANAGE
from core.permissions.models import MemberRole
from core.permissions.registry import resolve_minimum_role


@dataclass(frozen=True)
class PermissionEvaluationResult:
    allowed: bool
    rejection_code: Optional[str] = None
    message: str = ""

    def to_rejection(self, policy_name: str = "permission_gate") -> Optional[RejectionReason]:
        if self.allowed:
            return None
        return RejectionReason(
            code=self.rejection_code or ReasonCode.PERMISSION_DENIED,
            message=self.message or "Permission denied.",
            policy_name=policy_name,
        )


class PermissionGate:
    @staticmethod
    def _allow() -> PermissionEvaluationResult:
        return PermissionEvaluationResult(allowed=True)

    @staticmethod
    def _deny(code: str, message: str) -> PermissionEvaluationResult:
        return PermissionEvaluationResult(
            allowed=False,
            rejection_code=code,
            message=message,
        )

    @staticmethod
    def evaluate(
        role: MemberRole | str | None,
        operation: str,
    ) -> PermissionEvaluationResult:
        """Check the permission matrix for one (role, operation) pair."""
        if role is None:
            return PermissionGate._deny(
                ReasonCode.NOT_A_MEMBER,
                "Caller is not a member of this business.",
            )

        minimum = resolve_minimum_role(operation)
        if minimum is None:
            return PermissionGate._deny(
                ReasonCode.UNKNOWN_OPERATION,
                f"No permission mapping for operation '{operation}'.",
            )

        role = MemberRole.parse(role)
        if not role.at_least(minimum):
            return PermissionGate._deny(
                ReasonCode.PERMISSION_DENIED,
                (
                    f"Role '{role.value}' may not perform '{operation}'; "
                    f"requires '{minimum.value}' or higher."
                ),
            )
        return PermissionGate._allow()

    @staticmethod
    def allows(role: MemberRole | str | None, operation: str) -> bool:
        return PermissionGate.evaluate(role, operation).allowed

    @staticmethod
    def evaluate_member_change(
        *,
        actor_id: str,
        actor_role: MemberRole | str | None,
        target_id: str,
        new_role: MemberRole | str | None = None,
    ) -> PermissionEvaluationResult:
        """
        Gate for add/remove/change-role on a member.

        new_role=None means the target is being removed.
        Self-removal and self-demotion from owner are refused whatever
        the caller's role.
        """
        if actor_id == target_id:
            if new_role is None:
                return PermissionGate._deny(
                    ReasonCode.SELF_REMOVAL_FORBIDDEN,
                    "You cannot remove yourself.",
                )
            if MemberRole.parse(new_role) != MemberRole.OWNER and (
                actor_role is not None
                and MemberRole.parse(actor_role) == MemberRole.OWNER
            ):
                return PermissionGate._deny(
                    ReasonCode.SELF_DEMOTION_FORBIDDEN,
                    "You cannot demote yourself from the owner role.",
                )

        return PermissionGate.evaluate(actor_role, OPERATION_MEMBERS_MANAGE)
