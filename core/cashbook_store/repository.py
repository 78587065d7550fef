"""
CBM Cash Book Store — Django Backend
======================================
Relational implementation of the CashBookStore protocol.

Snapshots are published from transaction.on_commit(), so a feed never
sees a write that is later rolled back. Publishing and subscribing share
a lock, so a new feed cannot miss a publish or get it out of order.
Paired writes (business + owner member, members list + member record)
share one transaction.
"""

from __future__ import annotations

import logging
import uuid
from threading import RLock
from typing import ContextManager, List, Optional

from django.db import transaction

from core.business.models import Business, CashBook, CashBookRef, Member, UserProfile
from core.cashbook_store import models as rows
from core.cashbook_store.protocol import EntrySnapshot
from core.errors import NotFoundError
from core.feeds import FeedHub, SnapshotFeed
from core.permissions.models import MemberRole
from core.primitives.ledger import Entry, EntryFields
from core.time import Clock, SystemClock

logger = logging.getLogger("cbm.store")


# ══════════════════════════════════════════════════════════════
# ROW → DOMAIN
# ══════════════════════════════════════════════════════════════

def _to_user(row: rows.UserProfile) -> UserProfile:
    return UserProfile(
        user_id=row.user_id,
        email=row.email,
        display_name=row.display_name,
        created_at=row.created_at,
    )


def _to_business(row: rows.Business) -> Business:
    return Business(
        business_id=row.business_id,
        name=row.name,
        owner_id=row.owner_id,
        created_at=row.created_at,
        members=tuple(row.members or ()),
    )


def _to_member(row: rows.Member) -> Member:
    return Member(user_id=row.user_id, email=row.email, role=MemberRole(row.role))


def _to_cashbook(row: rows.CashBook) -> CashBook:
    return CashBook(
        cashbook_id=row.cashbook_id,
        business_id=row.business_id,
        name=row.name,
        created_at=row.created_at,
    )


def _to_entry(row: rows.Entry) -> Entry:
    return Entry(
        entry_id=row.entry_id,
        type=row.type,
        amount=row.amount,
        date=row.date,
        remark=row.remark,
        created_at=row.created_at,
        created_by=row.created_by,
    )


# ══════════════════════════════════════════════════════════════
# STORE
# ══════════════════════════════════════════════════════════════

class DjangoCashBookStore:
    supports_transactions = True

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        feeds: FeedHub | None = None,
    ) -> None:
        self._clock = clock or SystemClock()
        self._feeds = feeds or FeedHub()
        # orders snapshot reads against feed registration in this process
        self._publish_lock = RLock()

    @property
    def feeds(self) -> FeedHub:
        return self._feeds

    # ── users ─────────────────────────────────────────────────

    def ensure_user(self, profile: UserProfile) -> UserProfile:
        row, created = rows.UserProfile.objects.get_or_create(
            user_id=profile.user_id,
            defaults={
                "email": profile.email.strip().lower(),
                "display_name": profile.display_name,
                "created_at": profile.created_at or self._clock.now_utc(),
            },
        )
        if created:
            logger.info(f"User profile created for '{profile.user_id}'")
        return _to_user(row)

    def find_user_by_email(self, email: str) -> Optional[UserProfile]:
        row = (
            rows.UserProfile.objects.filter(email=email.strip().lower())
            .order_by("user_id")
            .first()
        )
        return _to_user(row) if row is not None else None

    # ── businesses & members ──────────────────────────────────

    def create_business(self, *, name: str, owner: UserProfile) -> Business:
        with transaction.atomic():
            row = rows.Business.objects.create(
                business_id=uuid.uuid4(),
                name=name,
                owner_id=owner.user_id,
                created_at=self._clock.now_utc(),
                members=[owner.user_id],
            )
            rows.Member.objects.create(
                business=row,
                user_id=owner.user_id,
                email=owner.email,
                role=MemberRole.OWNER.value,
            )
        return _to_business(row)

    def get_business(self, business_id: uuid.UUID) -> Optional[Business]:
        row = rows.Business.objects.filter(business_id=business_id).first()
        return _to_business(row) if row is not None else None

    def list_businesses_for_user(self, user_id: str) -> List[Business]:
        # JSON containment lookups are unavailable on SQLite; the member
        # rows are written in the same transaction as the members list.
        queryset = rows.Business.objects.filter(
            member_records__user_id=user_id
        ).distinct()
        return [_to_business(row) for row in queryset]

    def list_members(self, business_id: uuid.UUID) -> List[Member]:
        queryset = rows.Member.objects.filter(business_id=business_id)
        return [_to_member(row) for row in queryset]

    def get_member(self, business_id: uuid.UUID, user_id: str) -> Optional[Member]:
        row = rows.Member.objects.filter(
            business_id=business_id, user_id=user_id
        ).first()
        return _to_member(row) if row is not None else None

    def add_member(self, business_id: uuid.UUID, member: Member) -> None:
        with transaction.atomic():
            business = self._locked_business(business_id)
            members = list(business.members or [])
            if member.user_id not in members:
                members.append(member.user_id)
                business.members = members
                business.save(update_fields=["members"])
            rows.Member.objects.update_or_create(
                business=business,
                user_id=member.user_id,
                defaults={"email": member.email, "role": member.role.value},
            )

    def set_member_role(
        self, business_id: uuid.UUID, user_id: str, role: MemberRole
    ) -> None:
        updated = rows.Member.objects.filter(
            business_id=business_id, user_id=user_id
        ).update(role=role.value)
        if not updated:
            raise NotFoundError("Member", user_id)

    def remove_member(self, business_id: uuid.UUID, user_id: str) -> None:
        with transaction.atomic():
            business = self._locked_business(business_id)
            business.members = [uid for uid in (business.members or []) if uid != user_id]
            business.save(update_fields=["members"])
            rows.Member.objects.filter(business=business, user_id=user_id).delete()

    # ── cash books ────────────────────────────────────────────

    def create_cashbook(self, business_id: uuid.UUID, name: str) -> CashBook:
        if not rows.Business.objects.filter(business_id=business_id).exists():
            raise NotFoundError("Business", business_id)
        row = rows.CashBook.objects.create(
            cashbook_id=uuid.uuid4(),
            business_id=business_id,
            name=name,
            created_at=self._clock.now_utc(),
        )
        return _to_cashbook(row)

    def get_cashbook(self, ref: CashBookRef) -> Optional[CashBook]:
        row = self._cashbook_rows(ref).first()
        return _to_cashbook(row) if row is not None else None

    def list_cashbooks(self, business_id: uuid.UUID) -> List[CashBook]:
        queryset = rows.CashBook.objects.filter(business_id=business_id)
        return [_to_cashbook(row) for row in queryset]

    def delete_cashbook(self, ref: CashBookRef) -> None:
        # raises ProtectedError while entries remain
        deleted, _ = self._cashbook_rows(ref).delete()
        if not deleted:
            raise NotFoundError("CashBook", ref)
        transaction.on_commit(lambda: self._feeds.close_all(ref))

    # ── entries ───────────────────────────────────────────────

    def create_entry(
        self, ref: CashBookRef, fields: EntryFields, *, created_by: str
    ) -> uuid.UUID:
        if not self._cashbook_rows(ref).exists():
            raise NotFoundError("CashBook", ref)
        row = rows.Entry.objects.create(
            entry_id=uuid.uuid4(),
            cashbook_id=ref.cashbook_id,
            type=fields.type.value,
            amount=fields.amount,
            date=fields.date,
            remark=fields.remark,
            created_at=self._clock.now_utc(),
            created_by=created_by,
        )
        self._publish_on_commit(ref)
        return row.entry_id

    def update_entry(
        self, ref: CashBookRef, entry_id: uuid.UUID, fields: EntryFields
    ) -> None:
        updated = self._entry_rows(ref).filter(entry_id=entry_id).update(
            type=fields.type.value,
            amount=fields.amount,
            date=fields.date,
            remark=fields.remark,
        )
        if not updated:
            raise NotFoundError("Entry", entry_id)
        self._publish_on_commit(ref)

    def delete_entry(self, ref: CashBookRef, entry_id: uuid.UUID) -> None:
        deleted, _ = self._entry_rows(ref).filter(entry_id=entry_id).delete()
        if not deleted:
            raise NotFoundError("Entry", entry_id)
        self._publish_on_commit(ref)

    def list_entries(self, ref: CashBookRef) -> List[Entry]:
        queryset = self._entry_rows(ref).order_by("-date", "-created_at")
        return [_to_entry(row) for row in queryset]

    def subscribe(self, ref: CashBookRef) -> SnapshotFeed[EntrySnapshot]:
        with self._publish_lock:
            feed = self._feeds.subscribe(ref)
            feed.deliver(tuple(self.list_entries(ref)))
        return feed

    def atomic(self) -> ContextManager[None]:
        return transaction.atomic()

    # ── internals ─────────────────────────────────────────────

    def _locked_business(self, business_id: uuid.UUID) -> rows.Business:
        row = (
            rows.Business.objects.select_for_update()
            .filter(business_id=business_id)
            .first()
        )
        if row is None:
            raise NotFoundError("Business", business_id)
        return row

    def _cashbook_rows(self, ref: CashBookRef):
        return rows.CashBook.objects.filter(
            business_id=ref.business_id, cashbook_id=ref.cashbook_id
        )

    def _entry_rows(self, ref: CashBookRef):
        return rows.Entry.objects.filter(
            cashbook_id=ref.cashbook_id, cashbook__business_id=ref.business_id
        )

    def _publish_on_commit(self, ref: CashBookRef) -> None:
        def _publish() -> None:
            with self._publish_lock:
                self._feeds.publish(ref, tuple(self.list_entries(ref)))

        transaction.on_commit(_publish)
