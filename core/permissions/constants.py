"""
CBM Permissions — Operation Constants
=======================================
Every mutation entry point names one of these before touching the store.
"""

OPERATION_CASHBOOK_CREATE = "cashbook.create"
OPERATION_CASHBOOK_DELETE = "cashbook.delete"
OPERATION_ENTRY_CREATE = "entry.create"
OPERATION_ENTRY_EDIT = "entry.edit"
OPERATION_ENTRY_DELETE = "entry.delete"
OPERATION_MEMBERS_MANAGE = "members.manage"

VALID_OPERATIONS = frozenset({
    OPERATION_CASHBOOK_CREATE,
    OPERATION_CASHBOOK_DELETE,
    OPERATION_ENTRY_CREATE,
    OPERATION_ENTRY_EDIT,
    OPERATION_ENTRY_DELETE,
    OPERATION_MEMBERS_MANAGE,
})
