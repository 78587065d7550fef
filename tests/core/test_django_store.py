"""
Tests for core.cashbook_store.repository — the ORM-backed store.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from django.db.models import ProtectedError

from core.business.models import CashBookRef, Member, UserProfile
from core.cashbook_store import delete_cashbook_cascade
from core.cashbook_store import models as rows
from core.cashbook_store.repository import DjangoCashBookStore
from core.errors import CascadeDeleteError, NotFoundError
from core.permissions import MemberRole
from core.primitives.ledger import EntryFields, EntryType
from core.time import TickingClock

pytestmark = pytest.mark.django_db(transaction=True)

START = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def _store() -> DjangoCashBookStore:
    return DjangoCashBookStore(clock=TickingClock(START))


def _book(store: DjangoCashBookStore) -> CashBookRef:
    owner = store.ensure_user(UserProfile(user_id="o1", email="O1@example.com"))
    business = store.create_business(name="Shop", owner=owner)
    return store.create_cashbook(business.business_id, "Main").ref


def _fields(type_=EntryType.IN, amount="10.50", day=date(2024, 1, 1), remark="Cash"):
    return EntryFields(type=type_, amount=Decimal(amount), date=day, remark=remark)


def test_user_directory_is_idempotent_and_case_insensitive() -> None:
    store = _store()
    first = store.ensure_user(UserProfile(user_id="u1", email="Mixed@Example.com"))
    second = store.ensure_user(UserProfile(user_id="u1", email="other@example.com"))
    assert first == second
    assert store.find_user_by_email("MIXED@example.com").user_id == "u1"
    assert store.find_user_by_email("nobody@example.com") is None


def test_business_creation_writes_owner_member() -> None:
    store = _store()
    owner = store.ensure_user(UserProfile(user_id="o1", email="o1@example.com"))
    business = store.create_business(name="Shop", owner=owner)
    assert business.members == ("o1",)
    assert store.get_member(business.business_id, "o1").role is MemberRole.OWNER
    assert [b.business_id for b in store.list_businesses_for_user("o1")] == [business.business_id]


def test_member_add_role_remove_keep_list_and_records_paired() -> None:
    store = _store()
    owner = store.ensure_user(UserProfile(user_id="o1", email="o1@example.com"))
    business = store.create_business(name="Shop", owner=owner)
    bid = business.business_id

    store.add_member(bid, Member(user_id="u2", email="u2@example.com", role="viewer"))
    assert store.get_business(bid).members == ("o1", "u2")
    assert store.list_businesses_for_user("u2")[0].business_id == bid

    store.set_member_role(bid, "u2", MemberRole.OPERATOR)
    assert store.get_member(bid, "u2").role is MemberRole.OPERATOR

    store.remove_member(bid, "u2")
    assert store.get_business(bid).members == ("o1",)
    assert store.get_member(bid, "u2") is None

    with pytest.raises(NotFoundError):
        store.set_member_role(bid, "u2", MemberRole.VIEWER)


def test_entries_round_trip_with_decimal_and_created_fields() -> None:
    store = _store()
    ref = _book(store)
    entry_id = store.create_entry(ref, _fields(), created_by="o1")
    [entry] = store.list_entries(ref)
    assert entry.entry_id == entry_id
    assert entry.amount == Decimal("10.50")
    assert entry.type is EntryType.IN
    assert entry.created_by == "o1"
    created_at = entry.created_at

    store.update_entry(ref, entry_id, _fields(EntryType.OUT, "3", date(2024, 1, 5), "Fuel"))
    [entry] = store.list_entries(ref)
    assert (entry.type, entry.amount, entry.date, entry.remark) == (
        EntryType.OUT, Decimal("3"), date(2024, 1, 5), "Fuel",
    )
    assert entry.created_at == created_at


def test_entries_are_scoped_to_their_business() -> None:
    store = _store()
    ref = _book(store)
    entry_id = store.create_entry(ref, _fields(), created_by="o1")
    wrong = CashBookRef(uuid.uuid4(), ref.cashbook_id)
    assert store.list_entries(wrong) == []
    with pytest.raises(NotFoundError):
        store.delete_entry(wrong, entry_id)


def test_subscription_receives_snapshot_after_commit() -> None:
    store = _store()
    ref = _book(store)
    feed = store.subscribe(ref)
    assert feed.get(timeout=1) == ()

    store.create_entry(ref, _fields(), created_by="o1")
    assert len(feed.get(timeout=1)) == 1
    feed.close()


def test_database_refuses_parent_delete_while_children_exist() -> None:
    store = _store()
    ref = _book(store)
    store.create_entry(ref, _fields(), created_by="o1")
    with pytest.raises(ProtectedError):
        store.delete_cashbook(ref)


def test_cascade_delete_in_one_transaction() -> None:
    store = _store()
    ref = _book(store)
    for n in range(3):
        store.create_entry(ref, _fields(day=date(2024, 1, n + 1)), created_by="o1")
    feed = store.subscribe(ref)

    assert delete_cashbook_cascade(store, ref) == 3
    assert store.get_cashbook(ref) is None
    assert rows.Entry.objects.filter(cashbook_id=ref.cashbook_id).count() == 0
    assert feed.closed


def test_cascade_failure_rolls_back_everything() -> None:
    class FailingParentStore(DjangoCashBookStore):
        def delete_cashbook(self, ref):
            raise RuntimeError("disk full")

    store = FailingParentStore(clock=TickingClock(START))
    ref = _book(store)
    for n in range(2):
        store.create_entry(ref, _fields(day=date(2024, 1, n + 1)), created_by="o1")

    with pytest.raises(CascadeDeleteError) as excinfo:
        delete_cashbook_cascade(store, ref)

    assert excinfo.value.entries_deleted == 0
    assert excinfo.value.entries_total == 2
    assert len(store.list_entries(ref)) == 2
    assert store.get_cashbook(ref) is not None
