"""
CBM Cash Book Engine — Application Service
=============================================
Cash book and entry operations for one business, on behalf of one caller.

Order of checks for every operation:
1. request validated (request dataclasses, before we get here)
2. caller must be a member of the business
3. caller's role must satisfy the permission gate
4. only then is the store called

Store failures are logged and re-raised as StoreOperationError. Nothing
is retried and nothing is rolled back here. The store pushes a fresh
snapshot to subscribers once a write lands.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, List, Optional, TypeVar

from core.business.models import CashBook, CashBookRef, Member
from core.business.policies import filter_cashbooks_by_name, validate_member_of_business
from core.cashbook_store import CashBookStore, delete_cashbook_cascade
from core.documents import ExportArtifact, export_ledger_pdf, export_ledger_xlsx
from core.errors import (
    CashBookError,
    NotFoundError,
    PermissionDeniedError,
    RejectionReason,
    StoreOperationError,
)
from core.permissions import (
    OPERATION_CASHBOOK_CREATE,
    OPERATION_CASHBOOK_DELETE,
    OPERATION_ENTRY_CREATE,
    OPERATION_ENTRY_DELETE,
    OPERATION_ENTRY_EDIT,
    PermissionGate,
)
from core.time import Clock, SystemClock, today_from
from engines.cashbook.commands import (
    CashBookCreateRequest,
    EntryCreateRequest,
    EntryUpdateRequest,
)
from engines.cashbook.policies import member_may_perform_policy
from engines.cashbook.subscriptions import LedgerSubscription
from projections.ledger import LedgerView, project_ledger

logger = logging.getLogger("cbm.cashbook")

R = TypeVar("R")


class CashBookService:
    """Cash book engine application service."""

    def __init__(
        self,
        store: CashBookStore,
        *,
        clock: Clock | None = None,
        gate=PermissionGate,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._gate = gate

    # ══════════════════════════════════════════════════════════
    # GUARDS
    # ══════════════════════════════════════════════════════════

    def _reject(self, actor_id: str, operation: str, reason: RejectionReason):
        logger.info(
            f"Rejected {operation} for '{actor_id}': "
            f"{reason.code} ({reason.message})"
        )
        raise PermissionDeniedError(reason)

    def _require_member(self, actor_id: str, business_id: uuid.UUID, operation: str) -> Member:
        """Read access: any role will do."""
        member = self._call(
            "member.get", self._store.get_member, business_id, actor_id,
        )
        rejection = validate_member_of_business(member, actor_id)
        if rejection is not None:
            self._reject(actor_id, operation, rejection)
        return member

    def _require_role(self, actor_id: str, business_id: uuid.UUID, operation: str) -> Member:
        member = self._call(
            "member.get", self._store.get_member, business_id, actor_id,
        )
        rejection = member_may_perform_policy(member, actor_id, operation, gate=self._gate)
        if rejection is not None:
            self._reject(actor_id, operation, rejection)
        return member

    def _require_cashbook(self, ref: CashBookRef) -> CashBook:
        cashbook = self._call("cashbook.get", self._store.get_cashbook, ref)
        if cashbook is None:
            raise NotFoundError("CashBook", ref)
        return cashbook

    def _call(self, operation: str, fn: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        try:
            return fn(*args, **kwargs)
        except CashBookError:
            raise
        except Exception as exc:
            logger.error(f"Store call {operation} failed: {exc}", exc_info=True)
            raise StoreOperationError(operation, str(exc)) from exc

    # ══════════════════════════════════════════════════════════
    # CASH BOOKS
    # ══════════════════════════════════════════════════════════

    def list_cashbooks(
        self,
        actor_id: str,
        business_id: uuid.UUID,
        query: Optional[str] = None,
    ) -> List[CashBook]:
        self._require_member(actor_id, business_id, "cashbook.list")
        cashbooks = self._call("cashbook.list", self._store.list_cashbooks, business_id)
        return filter_cashbooks_by_name(cashbooks, query)

    def create_cashbook(
        self,
        actor_id: str,
        business_id: uuid.UUID,
        request: CashBookCreateRequest,
    ) -> CashBook:
        self._require_role(actor_id, business_id, OPERATION_CASHBOOK_CREATE)
        cashbook = self._call(
            OPERATION_CASHBOOK_CREATE,
            self._store.create_cashbook, business_id, request.name,
        )
        logger.info(f"Cash book '{cashbook.name}' created as {cashbook.ref} by '{actor_id}'")
        return cashbook

    def delete_cashbook(self, actor_id: str, ref: CashBookRef) -> int:
        """Delete every entry, then the cash book. Returns entries removed."""
        self._require_role(actor_id, ref.business_id, OPERATION_CASHBOOK_DELETE)
        deleted = delete_cashbook_cascade(self._store, ref)
        logger.info(f"Cash book {ref} deleted by '{actor_id}' ({deleted} entries)")
        return deleted

    # ══════════════════════════════════════════════════════════
    # ENTRIES
    # ══════════════════════════════════════════════════════════

    def create_entry(
        self,
        actor_id: str,
        ref: CashBookRef,
        request: EntryCreateRequest,
    ) -> uuid.UUID:
        self._require_role(actor_id, ref.business_id, OPERATION_ENTRY_CREATE)
        fields = request.to_fields(today=today_from(self._clock))
        entry_id = self._call(
            OPERATION_ENTRY_CREATE,
            self._store.create_entry, ref, fields, created_by=actor_id,
        )
        logger.info(
            f"Entry {entry_id} ({fields.type.value} {fields.amount}) "
            f"recorded in {ref} by '{actor_id}'"
        )
        return entry_id

    def update_entry(
        self,
        actor_id: str,
        ref: CashBookRef,
        request: EntryUpdateRequest,
    ) -> None:
        self._require_role(actor_id, ref.business_id, OPERATION_ENTRY_EDIT)
        self._call(
            OPERATION_ENTRY_EDIT,
            self._store.update_entry, ref, request.entry_id, request.to_fields(),
        )
        logger.info(f"Entry {request.entry_id} in {ref} updated by '{actor_id}'")

    def delete_entry(self, actor_id: str, ref: CashBookRef, entry_id: uuid.UUID) -> None:
        self._require_role(actor_id, ref.business_id, OPERATION_ENTRY_DELETE)
        self._call(OPERATION_ENTRY_DELETE, self._store.delete_entry, ref, entry_id)
        logger.info(f"Entry {entry_id} in {ref} deleted by '{actor_id}'")

    # ══════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════

    def read_ledger(self, actor_id: str, ref: CashBookRef) -> LedgerView:
        """One-shot projection of the current entry set."""
        self._require_member(actor_id, ref.business_id, "ledger.read")
        self._require_cashbook(ref)
        entries = self._call("entry.list", self._store.list_entries, ref)
        return project_ledger(entries)

    def subscribe(
        self,
        actor_id: str,
        ref: CashBookRef,
        query: Optional[str] = None,
    ) -> LedgerSubscription:
        """
        Live ledger. The first view is the current state; each later one
        follows a change. Close it (or use it as a context manager) when
        the consumer goes away.
        """
        self._require_member(actor_id, ref.business_id, "ledger.subscribe")
        self._require_cashbook(ref)
        feed = self._call("entry.subscribe", self._store.subscribe, ref)
        return LedgerSubscription(feed, query=query)

    # ══════════════════════════════════════════════════════════
    # EXPORTS
    # ══════════════════════════════════════════════════════════

    def _export(self, actor_id: str, ref: CashBookRef, query: Optional[str], render) -> ExportArtifact:
        self._require_member(actor_id, ref.business_id, "ledger.export")
        cashbook = self._require_cashbook(ref)
        entries = self._call("entry.list", self._store.list_entries, ref)
        view = project_ledger(entries)
        return render(cashbook.name, view.search(query), view.totals)

    def export_pdf(
        self, actor_id: str, ref: CashBookRef, query: Optional[str] = None,
    ) -> ExportArtifact:
        return self._export(actor_id, ref, query, export_ledger_pdf)

    def export_xlsx(
        self, actor_id: str, ref: CashBookRef, query: Optional[str] = None,
    ) -> ExportArtifact:
        return self._export(actor_id, ref, query, export_ledger_xlsx)
