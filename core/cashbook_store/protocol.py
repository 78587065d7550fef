"""
CBM Cash Book Store — Collaborator Protocol
=============================================
The replicated datastore is an external collaborator. Services only see
this protocol, so tests hand in an InMemoryCashBookStore and the Django
adapter hands in a DjangoCashBookStore.

Contract:
- Every entry or cash book mutation publishes the COMPLETE current entry
  list of the affected cash book to open feeds
- subscribe() delivers the current snapshot first, then one per change
- Concurrent writers: last write wins, no conflict detection
- delete_cashbook() removes only the cash book record; children must be
  removed first (see core.cashbook_store.cascade)
"""

from __future__ import annotations

import uuid
from typing import ContextManager, Optional, Protocol, Tuple

from core.business.models import Business, CashBook, CashBookRef, Member, UserProfile
from core.feeds import SnapshotFeed
from core.permissions.models import MemberRole
from core.primitives.ledger import Entry, EntryFields

EntrySnapshot = Tuple[Entry, ...]


class CashBookStore(Protocol):
    # ── users ─────────────────────────────────────────────────
    def ensure_user(self, profile: UserProfile) -> UserProfile:
        ...

    def find_user_by_email(self, email: str) -> Optional[UserProfile]:
        ...

    # ── businesses & members ──────────────────────────────────
    def create_business(self, *, name: str, owner: UserProfile) -> Business:
        ...

    def get_business(self, business_id: uuid.UUID) -> Optional[Business]:
        ...

    def list_businesses_for_user(self, user_id: str) -> list[Business]:
        ...

    def list_members(self, business_id: uuid.UUID) -> list[Member]:
        ...

    def get_member(self, business_id: uuid.UUID, user_id: str) -> Optional[Member]:
        ...

    def add_member(self, business_id: uuid.UUID, member: Member) -> None:
        ...

    def set_member_role(
        self, business_id: uuid.UUID, user_id: str, role: MemberRole
    ) -> None:
        ...

    def remove_member(self, business_id: uuid.UUID, user_id: str) -> None:
        ...

    # ── cash books ────────────────────────────────────────────
    def create_cashbook(self, business_id: uuid.UUID, name: str) -> CashBook:
        ...

    def get_cashbook(self, ref: CashBookRef) -> Optional[CashBook]:
        ...

    def list_cashbooks(self, business_id: uuid.UUID) -> list[CashBook]:
        ...

    def delete_cashbook(self, ref: CashBookRef) -> None:
        ...

    # ── entries ───────────────────────────────────────────────
    def create_entry(
        self, ref: CashBookRef, fields: EntryFields, *, created_by: str
    ) -> uuid.UUID:
        ...

    def update_entry(
        self, ref: CashBookRef, entry_id: uuid.UUID, fields: EntryFields
    ) -> None:
        ...

    def delete_entry(self, ref: CashBookRef, entry_id: uuid.UUID) -> None:
        ...

    def list_entries(self, ref: CashBookRef) -> list[Entry]:
        ...

    def subscribe(self, ref: CashBookRef) -> SnapshotFeed[EntrySnapshot]:
        ...

    # ── transactions ──────────────────────────────────────────
    supports_transactions: bool

    def atomic(self) -> ContextManager[None]:
        """Transaction scope if the backend has one, otherwise a no-op."""
        ...
