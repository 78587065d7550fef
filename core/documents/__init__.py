"""
CBM Documents — Public API
==========================
"""

from core.documents.builder import (
    DEFAULT_TITLE,
    LEDGER_COLUMNS,
    LedgerRenderPlan,
    LedgerRow,
    build_ledger_plan,
)
from core.documents.export import (
    MEDIA_TYPE_PDF,
    MEDIA_TYPE_XLSX,
    ExportArtifact,
    export_ledger_pdf,
    export_ledger_xlsx,
)
from core.documents.formatting import (
    RUPEE,
    export_filename,
    format_entry_date,
    format_inr,
    group_indian,
)

__all__ = [
    "DEFAULT_TITLE",
    "LEDGER_COLUMNS",
    "LedgerRenderPlan",
    "LedgerRow",
    "build_ledger_plan",
    "MEDIA_TYPE_PDF",
    "MEDIA_TYPE_XLSX",
    "ExportArtifact",
    "export_ledger_pdf",
    "export_ledger_xlsx",
    "RUPEE",
    "export_filename",
    "format_entry_date",
    "format_inr",
    "group_indian",
]
