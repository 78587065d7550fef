"""
CBM Membership Engine — Application Service
==============================================
User directory, businesses and member roles.

Rules:
- Registering a user is idempotent; the first profile written wins
- The creator of a business is its first member and its owner
- Only owners manage members (add, change role, remove)
- Nobody removes themself; an owner never demotes themself
- One owner CAN demote or remove another owner, so a business can be
  left without an owner
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, List, Optional, TypeVar

from core.business.models import Business, Member, UserProfile
from core.business.policies import (
    validate_member_of_business,
    validate_not_already_member,
)
from core.cashbook_store import CashBookStore
from core.errors import (
    CashBookError,
    PermissionDeniedError,
    ReasonCode,
    RejectionReason,
    StoreOperationError,
    ValidationError,
)
from core.permissions import OPERATION_MEMBERS_MANAGE, PermissionGate
from engines.membership.commands import (
    BusinessCreateRequest,
    MemberInviteRequest,
    MemberRemoveRequest,
    MemberRoleChangeRequest,
)

logger = logging.getLogger("cbm.membership")

R = TypeVar("R")

USER_NOT_FOUND_MESSAGE = "User with this email does not exist."


class MembershipService:
    """Membership engine application service."""

    def __init__(self, store: CashBookStore, *, gate=PermissionGate):
        self._store = store
        self._gate = gate

    def _call(self, operation: str, fn: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        try:
            return fn(*args, **kwargs)
        except CashBookError:
            raise
        except Exception as exc:
            logger.error(f"Store call {operation} failed: {exc}", exc_info=True)
            raise StoreOperationError(operation, str(exc)) from exc

    def _deny(self, actor_id: str, operation: str, reason: Optional[RejectionReason]) -> None:
        if reason is None:
            return
        logger.info(
            f"Rejected {operation} for '{actor_id}': "
            f"{reason.code} ({reason.message})"
        )
        raise PermissionDeniedError(reason)

    def _member(self, actor_id: str, business_id: uuid.UUID, operation: str) -> Member:
        member = self._call("member.get", self._store.get_member, business_id, actor_id)
        self._deny(actor_id, operation, validate_member_of_business(member, actor_id))
        return member

    # ══════════════════════════════════════════════════════════
    # USERS & BUSINESSES
    # ══════════════════════════════════════════════════════════

    def register_user(
        self,
        user_id: str,
        email: str,
        display_name: Optional[str] = None,
    ) -> UserProfile:
        if not isinstance(email, str) or not email.strip():
            raise ValidationError("email must be non-empty.")
        try:
            profile = UserProfile(
                user_id=user_id,
                email=email.strip().lower(),
                display_name=display_name,
            )
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        return self._call("user.ensure", self._store.ensure_user, profile)

    def create_business(self, owner: UserProfile, request: BusinessCreateRequest) -> Business:
        owner = self._call("user.ensure", self._store.ensure_user, owner)
        business = self._call(
            "business.create",
            self._store.create_business, name=request.name, owner=owner,
        )
        logger.info(
            f"Business '{business.name}' ({business.business_id}) "
            f"created by '{owner.user_id}'"
        )
        return business

    def list_businesses(self, user_id: str) -> List[Business]:
        return self._call(
            "business.list", self._store.list_businesses_for_user, user_id,
        )

    def list_members(self, actor_id: str, business_id: uuid.UUID) -> List[Member]:
        self._member(actor_id, business_id, "members.list")
        return self._call("member.list", self._store.list_members, business_id)

    # ══════════════════════════════════════════════════════════
    # MEMBER MANAGEMENT
    # ══════════════════════════════════════════════════════════

    def add_member(
        self,
        actor_id: str,
        business_id: uuid.UUID,
        request: MemberInviteRequest,
    ) -> Member:
        actor = self._member(actor_id, business_id, OPERATION_MEMBERS_MANAGE)
        self._deny(
            actor_id,
            OPERATION_MEMBERS_MANAGE,
            self._gate.evaluate(actor.role, OPERATION_MEMBERS_MANAGE).to_rejection(),
        )

        user = self._call("user.find", self._store.find_user_by_email, request.email)
        if user is None:
            raise ValidationError(USER_NOT_FOUND_MESSAGE, ReasonCode.USER_NOT_FOUND)

        members = self._call("member.list", self._store.list_members, business_id)
        duplicate = validate_not_already_member(request.email, members, user.user_id)
        if duplicate is not None:
            raise ValidationError(duplicate.message, duplicate.code)

        member = Member(user_id=user.user_id, email=user.email, role=request.role)
        self._call("member.add", self._store.add_member, business_id, member)
        logger.info(
            f"'{member.email}' added to {business_id} as {member.role.value} "
            f"by '{actor_id}'"
        )
        return member

    def change_member_role(
        self,
        actor_id: str,
        business_id: uuid.UUID,
        request: MemberRoleChangeRequest,
    ) -> None:
        actor = self._member(actor_id, business_id, OPERATION_MEMBERS_MANAGE)
        self._deny(
            actor_id,
            OPERATION_MEMBERS_MANAGE,
            self._gate.evaluate_member_change(
                actor_id=actor_id,
                actor_role=actor.role,
                target_id=request.user_id,
                new_role=request.role,
            ).to_rejection(),
        )
        self._call(
            "member.set_role",
            self._store.set_member_role, business_id, request.user_id, request.role,
        )
        logger.info(
            f"'{request.user_id}' in {business_id} is now {request.role.value} "
            f"(by '{actor_id}')"
        )

    def remove_member(
        self,
        actor_id: str,
        business_id: uuid.UUID,
        request: MemberRemoveRequest,
    ) -> None:
        actor = self._member(actor_id, business_id, OPERATION_MEMBERS_MANAGE)
        self._deny(
            actor_id,
            OPERATION_MEMBERS_MANAGE,
            self._gate.evaluate_member_change(
                actor_id=actor_id,
                actor_role=actor.role,
                target_id=request.user_id,
            ).to_rejection(),
        )
        self._call("member.remove", self._store.remove_member, business_id, request.user_id)
        logger.info(f"'{request.user_id}' removed from {business_id} by '{actor_id}'")
