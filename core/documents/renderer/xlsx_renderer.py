"""
CBM Documents — Spreadsheet Renderer
======================================
One sheet named "Entries": header row, then one row per exported entry.
Amounts stay numeric; the non-applicable amount column is left blank.
"""

from __future__ import annotations

import io

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from core.documents.builder import LedgerRenderPlan

SHEET_NAME = "Entries"

# Date, Remark, Cash In, Cash Out, Balance
COLUMN_WIDTHS = (12, 30, 15, 15, 18)


def render_ledger_xlsx(plan: LedgerRenderPlan) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_NAME

    sheet.append(list(plan.columns))
    for row in plan.rows:
        sheet.append([row.date, row.remark, row.cash_in, row.cash_out, row.balance])

    for index, width in enumerate(COLUMN_WIDTHS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width

    out = io.BytesIO()
    workbook.save(out)
    return out.getvalue()
