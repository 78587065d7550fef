"""
CBM Cash Book Store — Public API
==================================
External datastore collaborator: protocol, in-memory backend, Django
backend and the two-phase cash book cascade.
"""

from core.cashbook_store.cascade import delete_cashbook_cascade
from core.cashbook_store.memory import InMemoryCashBookStore
from core.cashbook_store.protocol import CashBookStore, EntrySnapshot


def __getattr__(name: str):
    # the Django backend needs configured settings; import it on demand
    if name == "DjangoCashBookStore":
        from core.cashbook_store.repository import DjangoCashBookStore

        return DjangoCashBookStore
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "CashBookStore",
    "DjangoCashBookStore",
    "EntrySnapshot",
    "InMemoryCashBookStore",
    "delete_cashbook_cascade",
]
