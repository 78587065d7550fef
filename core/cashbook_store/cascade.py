"""
CBM Cash Book Store — Cascade Delete
======================================
The store has no server-side cascade, so deleting a cash book is two
phases, always in this order:

1. enumerate and delete every entry of the cash book
2. delete the cash book record

An entry that disappears between enumeration and its delete was removed
by another writer; it is skipped and not counted.

Backends with transactions run both phases inside store.atomic(). Without
one, a failure leaves whatever was already deleted; nothing is restored.
The caller gets a CascadeDeleteError saying how far it got.
"""

from __future__ import annotations

import logging

from core.business.models import CashBookRef
from core.cashbook_store.protocol import CashBookStore
from core.errors import CascadeDeleteError, NotFoundError

logger = logging.getLogger("cbm.store")


def delete_cashbook_cascade(store: CashBookStore, ref: CashBookRef) -> int:
    """
    Delete all entries of `ref`, then `ref` itself.

    Returns:
        Number of entries deleted.

    Raises:
        NotFoundError:      the cash book does not exist.
        CascadeDeleteError: a delete failed part way through.
    """
    if store.get_cashbook(ref) is None:
        raise NotFoundError("CashBook", ref)

    deleted = 0
    total = 0
    try:
        with store.atomic():
            entries = store.list_entries(ref)
            total = len(entries)
            logger.info(f"Cascade delete of {ref}: {total} entries")

            for entry in entries:
                try:
                    store.delete_entry(ref, entry.entry_id)
                except NotFoundError:
                    # already removed by another writer
                    logger.debug(f"Entry {entry.entry_id} of {ref} already gone")
                    continue
                deleted += 1

            store.delete_cashbook(ref)
    except Exception as exc:
        logger.error(
            f"Cascade delete of {ref} stopped after "
            f"{deleted}/{total} entries: {exc}",
            exc_info=True,
        )
        if store.supports_transactions:
            # the transaction rolled every delete back
            deleted = 0
        raise CascadeDeleteError(ref, deleted, total, exc) from exc

    logger.info(f"Cascade delete of {ref} complete")
    return deleted
