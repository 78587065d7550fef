"""
CBM Documents — Ledger Export
===============================
Turns projected rows plus whole-book totals into a downloadable file.

The rows are whatever the reader is looking at (a remark search narrows
them); the totals are always those of the entire cash book.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from core.documents.builder import build_ledger_plan
from core.documents.formatting import export_filename
from core.documents.renderer import render_ledger_pdf, render_ledger_xlsx
from core.primitives.ledger import LedgerTotals, ProjectedEntry

logger = logging.getLogger("cbm.documents")

MEDIA_TYPE_PDF = "application/pdf"
MEDIA_TYPE_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: bytes
    media_type: str

    def __post_init__(self):
        if not self.filename:
            raise ValueError("filename must be non-empty.")
        if not isinstance(self.content, (bytes, bytearray)):
            raise TypeError("content must be bytes.")


def export_ledger_pdf(
    title: Optional[str],
    rows: Iterable[ProjectedEntry],
    totals: LedgerTotals,
) -> ExportArtifact:
    plan = build_ledger_plan(title, rows, totals)
    content = render_ledger_pdf(plan)
    logger.info(f"Rendered PDF '{plan.title}': {len(plan.rows)} rows, {len(content)} bytes")
    return ExportArtifact(
        filename=export_filename(plan.title, "pdf"),
        content=content,
        media_type=MEDIA_TYPE_PDF,
    )


def export_ledger_xlsx(
    title: Optional[str],
    rows: Iterable[ProjectedEntry],
    totals: LedgerTotals,
) -> ExportArtifact:
    plan = build_ledger_plan(title, rows, totals)
    content = render_ledger_xlsx(plan)
    logger.info(f"Rendered XLSX '{plan.title}': {len(plan.rows)} rows, {len(content)} bytes")
    return ExportArtifact(
        filename=export_filename(plan.title, "xlsx"),
        content=content,
        media_type=MEDIA_TYPE_XLSX,
    )
