"""
Tests for core.cashbook_store.cascade — children first, then the cash book.
"""

from __future__ import annotations

import contextlib
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from core.business.models import CashBookRef, UserProfile
from core.cashbook_store import InMemoryCashBookStore, delete_cashbook_cascade
from core.errors import CascadeDeleteError, NotFoundError, ReasonCode, StoreOperationError
from core.primitives.ledger import EntryFields, EntryType
from core.time import TickingClock

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


class RecordingStore(InMemoryCashBookStore):
    """Records the order of deletes and can fail on demand."""

    def __init__(self, *, fail_entry_after=None, fail_cashbook=False, **kwargs):
        super().__init__(**kwargs)
        self.calls = []
        self._fail_entry_after = fail_entry_after
        self._fail_cashbook = fail_cashbook

    def delete_entry(self, ref, entry_id):
        if self._fail_entry_after is not None and len(self.calls) >= self._fail_entry_after:
            raise ConnectionError("store unavailable")
        super().delete_entry(ref, entry_id)
        self.calls.append(("entry", entry_id))

    def delete_cashbook(self, ref):
        if self._fail_cashbook:
            raise ConnectionError("store unavailable")
        super().delete_cashbook(ref)
        self.calls.append(("cashbook", ref))


class TransactionalStore(RecordingStore):
    supports_transactions = True

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.atomic_entered = 0

    @contextlib.contextmanager
    def atomic(self):
        self.atomic_entered += 1
        yield


def _seed(store, count: int = 3) -> CashBookRef:
    owner = store.ensure_user(UserProfile(user_id="o1", email="o1@example.com"))
    business = store.create_business(name="Shop", owner=owner)
    ref = store.create_cashbook(business.business_id, "Main").ref
    for n in range(count):
        store.create_entry(
            ref,
            EntryFields(
                type=EntryType.IN,
                amount=Decimal(n + 1),
                date=date(2024, 1, n + 1),
            ),
            created_by="o1",
        )
    return ref


class TestCascadeDelete:
    def test_children_then_parent(self):
        store = RecordingStore(clock=TickingClock(START))
        ref = _seed(store)
        assert delete_cashbook_cascade(store, ref) == 3
        assert [kind for kind, _ in store.calls] == ["entry", "entry", "entry", "cashbook"]
        assert store.get_cashbook(ref) is None
        assert store.list_entries(ref) == []

    def test_empty_cashbook(self):
        store = RecordingStore(clock=TickingClock(START))
        ref = _seed(store, count=0)
        assert delete_cashbook_cascade(store, ref) == 0
        assert store.calls == [("cashbook", ref)]

    def test_nothing_reachable_by_subscription_afterwards(self):
        store = InMemoryCashBookStore(clock=TickingClock(START))
        ref = _seed(store)
        feed = store.subscribe(ref)
        delete_cashbook_cascade(store, ref)
        assert feed.closed
        assert store.subscribe(ref).get(timeout=1) == ()

    def test_missing_cashbook(self):
        store = InMemoryCashBookStore()
        with pytest.raises(NotFoundError):
            delete_cashbook_cascade(store, CashBookRef(uuid.uuid4(), uuid.uuid4()))


class TestCascadePartialFailure:
    def test_entry_failure_leaves_deleted_entries_deleted(self):
        store = RecordingStore(clock=TickingClock(START), fail_entry_after=1)
        ref = _seed(store)
        with pytest.raises(CascadeDeleteError) as excinfo:
            delete_cashbook_cascade(store, ref)

        err = excinfo.value
        assert isinstance(err, StoreOperationError)
        assert err.code == ReasonCode.CASCADE_INCOMPLETE
        assert err.entries_deleted == 1
        assert err.entries_total == 3
        assert isinstance(err.__cause__, ConnectionError)
        # no rollback without transactions
        assert len(store.list_entries(ref)) == 2
        assert store.get_cashbook(ref) is not None

    def test_parent_failure_after_all_children(self):
        store = RecordingStore(clock=TickingClock(START), fail_cashbook=True)
        ref = _seed(store)
        with pytest.raises(CascadeDeleteError) as excinfo:
            delete_cashbook_cascade(store, ref)
        assert excinfo.value.entries_deleted == 3
        assert store.list_entries(ref) == []
        assert store.get_cashbook(ref) is not None

    def test_transactional_store_reports_nothing_deleted(self):
        store = TransactionalStore(clock=TickingClock(START), fail_cashbook=True)
        ref = _seed(store)
        with pytest.raises(CascadeDeleteError) as excinfo:
            delete_cashbook_cascade(store, ref)
        assert store.atomic_entered == 1
        assert excinfo.value.entries_deleted == 0


class ConcurrentDeleteStore(InMemoryCashBookStore):
    """Another writer removes the first listed entry right after enumeration."""

    raced = False

    def list_entries(self, ref):
        listed = super().list_entries(ref)
        if listed and not self.raced:
            self.raced = True
            super().delete_entry(ref, listed[0].entry_id)
        return listed


class TestCascadeConcurrentWriters:
    def test_entry_deleted_by_another_writer_is_skipped(self):
        store = ConcurrentDeleteStore(clock=TickingClock(START))
        ref = _seed(store, count=2)
        assert delete_cashbook_cascade(store, ref) == 1
        assert store.get_cashbook(ref) is None
        assert store.list_entries(ref) == []
