"""
CBM Cash Book Store — In-Memory Backend
=========================================
Deterministic store used by tests and local runs.

Mirrors the replicated document store it stands in for:
- ids are generated on create, created_at comes from the injected clock
- each write is applied immediately (last write wins)
- there are no multi-record transactions; atomic() is a no-op
- snapshots are taken and published under the write lock, and a new
  feed is registered under it too, so no write falls between the two
"""

from __future__ import annotations

import contextlib
import logging
import uuid
from dataclasses import replace
from threading import RLock
from typing import Dict, Iterator, List, Optional

from core.business.models import Business, CashBook, CashBookRef, Member, UserProfile
from core.cashbook_store.protocol import EntrySnapshot
from core.errors import NotFoundError
from core.feeds import FeedHub, SnapshotFeed
from core.permissions.models import MemberRole
from core.primitives.ledger import Entry, EntryFields
from core.time import Clock, SystemClock

logger = logging.getLogger("cbm.store")


class InMemoryCashBookStore:
    supports_transactions = False

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        feeds: FeedHub | None = None,
    ) -> None:
        self._clock = clock or SystemClock()
        self._feeds = feeds or FeedHub()
        self._lock = RLock()
        self._users: Dict[str, UserProfile] = {}
        self._businesses: Dict[uuid.UUID, Business] = {}
        # business_id → user_id → Member
        self._members: Dict[uuid.UUID, Dict[str, Member]] = {}
        self._cashbooks: Dict[CashBookRef, CashBook] = {}
        # cash book → entry_id → Entry (insertion order kept)
        self._entries: Dict[CashBookRef, Dict[uuid.UUID, Entry]] = {}

    @property
    def feeds(self) -> FeedHub:
        return self._feeds

    # ── users ─────────────────────────────────────────────────

    def ensure_user(self, profile: UserProfile) -> UserProfile:
        with self._lock:
            existing = self._users.get(profile.user_id)
            if existing is not None:
                return existing
            stored = replace(
                profile,
                email=profile.email.strip().lower(),
                created_at=profile.created_at or self._clock.now_utc(),
            )
            self._users[profile.user_id] = stored
            return stored

    def find_user_by_email(self, email: str) -> Optional[UserProfile]:
        wanted = email.strip().lower()
        with self._lock:
            for profile in self._users.values():
                if profile.email == wanted:
                    return profile
        return None

    # ── businesses & members ──────────────────────────────────

    def create_business(self, *, name: str, owner: UserProfile) -> Business:
        with self._lock:
            business = Business(
                business_id=uuid.uuid4(),
                name=name,
                owner_id=owner.user_id,
                created_at=self._clock.now_utc(),
                members=(owner.user_id,),
            )
            self._businesses[business.business_id] = business
            self._members[business.business_id] = {
                owner.user_id: Member(
                    user_id=owner.user_id,
                    email=owner.email,
                    role=MemberRole.OWNER,
                ),
            }
            return business

    def get_business(self, business_id: uuid.UUID) -> Optional[Business]:
        with self._lock:
            return self._businesses.get(business_id)

    def list_businesses_for_user(self, user_id: str) -> List[Business]:
        with self._lock:
            return [b for b in self._businesses.values() if b.has_member(user_id)]

    def list_members(self, business_id: uuid.UUID) -> List[Member]:
        with self._lock:
            return list(self._members.get(business_id, {}).values())

    def get_member(self, business_id: uuid.UUID, user_id: str) -> Optional[Member]:
        with self._lock:
            return self._members.get(business_id, {}).get(user_id)

    def add_member(self, business_id: uuid.UUID, member: Member) -> None:
        with self._lock:
            business = self._require_business(business_id)
            members = business.members
            if member.user_id not in members:
                members = members + (member.user_id,)
            self._businesses[business_id] = replace(business, members=members)
            self._members.setdefault(business_id, {})[member.user_id] = member

    def set_member_role(
        self, business_id: uuid.UUID, user_id: str, role: MemberRole
    ) -> None:
        with self._lock:
            member = self._members.get(business_id, {}).get(user_id)
            if member is None:
                raise NotFoundError("Member", user_id)
            self._members[business_id][user_id] = replace(member, role=role)

    def remove_member(self, business_id: uuid.UUID, user_id: str) -> None:
        with self._lock:
            business = self._require_business(business_id)
            self._businesses[business_id] = replace(
                business,
                members=tuple(uid for uid in business.members if uid != user_id),
            )
            self._members.get(business_id, {}).pop(user_id, None)

    # ── cash books ────────────────────────────────────────────

    def create_cashbook(self, business_id: uuid.UUID, name: str) -> CashBook:
        with self._lock:
            self._require_business(business_id)
            cashbook = CashBook(
                cashbook_id=uuid.uuid4(),
                business_id=business_id,
                name=name,
                created_at=self._clock.now_utc(),
            )
            self._cashbooks[cashbook.ref] = cashbook
            self._entries[cashbook.ref] = {}
            return cashbook

    def get_cashbook(self, ref: CashBookRef) -> Optional[CashBook]:
        with self._lock:
            return self._cashbooks.get(ref)

    def list_cashbooks(self, business_id: uuid.UUID) -> List[CashBook]:
        with self._lock:
            return [
                book for ref, book in self._cashbooks.items()
                if ref.business_id == business_id
            ]

    def delete_cashbook(self, ref: CashBookRef) -> None:
        with self._lock:
            if self._cashbooks.pop(ref, None) is None:
                raise NotFoundError("CashBook", ref)
            # orphaned children stay addressable by ref, as in the
            # document store, until someone deletes them
            if not self._entries.get(ref):
                self._entries.pop(ref, None)
            self._feeds.close_all(ref)

    # ── entries ───────────────────────────────────────────────

    def create_entry(
        self, ref: CashBookRef, fields: EntryFields, *, created_by: str
    ) -> uuid.UUID:
        with self._lock:
            self._require_cashbook(ref)
            entry = Entry(
                entry_id=uuid.uuid4(),
                type=fields.type,
                amount=fields.amount,
                date=fields.date,
                remark=fields.remark,
                created_at=self._clock.now_utc(),
                created_by=created_by,
            )
            self._entries[ref][entry.entry_id] = entry
            self._publish(ref)
        return entry.entry_id

    def update_entry(
        self, ref: CashBookRef, entry_id: uuid.UUID, fields: EntryFields
    ) -> None:
        with self._lock:
            current = self._entries.get(ref, {}).get(entry_id)
            if current is None:
                raise NotFoundError("Entry", entry_id)
            self._entries[ref][entry_id] = replace(
                current,
                type=fields.type,
                amount=fields.amount,
                date=fields.date,
                remark=fields.remark,
            )
            self._publish(ref)

    def delete_entry(self, ref: CashBookRef, entry_id: uuid.UUID) -> None:
        with self._lock:
            entries = self._entries.get(ref, {})
            if entries.pop(entry_id, None) is None:
                raise NotFoundError("Entry", entry_id)
            self._publish(ref)

    def list_entries(self, ref: CashBookRef) -> List[Entry]:
        with self._lock:
            return list(self._entries.get(ref, {}).values())

    def subscribe(self, ref: CashBookRef) -> SnapshotFeed[EntrySnapshot]:
        with self._lock:
            initial = tuple(self._entries.get(ref, {}).values())
            return self._feeds.subscribe(ref, initial=initial)

    @contextlib.contextmanager
    def atomic(self) -> Iterator[None]:
        yield

    # ── internals ─────────────────────────────────────────────

    def _publish(self, ref: CashBookRef) -> None:
        # caller holds self._lock, so snapshots go out in write order
        self._feeds.publish(ref, tuple(self._entries.get(ref, {}).values()))

    def _require_business(self, business_id: uuid.UUID) -> Business:
        business = self._businesses.get(business_id)
        if business is None:
            raise NotFoundError("Business", business_id)
        return business

    def _require_cashbook(self, ref: CashBookRef) -> CashBook:
        cashbook = self._cashbooks.get(ref)
        if cashbook is None:
            raise NotFoundError("CashBook", ref)
        return cashbook
