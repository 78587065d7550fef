"""
CBM Django Adapter Wiring
=========================
Builds the services the HTTP views call.

One store handle per process, built lazily under a lock on first use and
passed explicitly into each service. Nothing in core/ or engines/ reaches
for it globally; tests build their own services around an in-memory store.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from core.cashbook_store import CashBookStore
from core.feeds import FeedHub
from core.time import Clock, SystemClock
from engines.cashbook.services import CashBookService
from engines.membership.services import MembershipService


@dataclass(frozen=True)
class ApiDependencies:
    store: CashBookStore
    feeds: FeedHub
    clock: Clock
    cashbooks: CashBookService
    membership: MembershipService


_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: ApiDependencies | None = None


def _create_dependencies() -> ApiDependencies:
    from core.cashbook_store.repository import DjangoCashBookStore

    clock = SystemClock()
    feeds = FeedHub()
    store = DjangoCashBookStore(clock=clock, feeds=feeds)
    return ApiDependencies(
        store=store,
        feeds=feeds,
        clock=clock,
        cashbooks=CashBookService(store, clock=clock),
        membership=MembershipService(store),
    )


def build_dependencies() -> ApiDependencies:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = _create_dependencies()
        return _DEPENDENCIES


def reset_dependencies() -> None:
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        _DEPENDENCIES = None
