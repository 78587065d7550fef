"""
Tests for core.documents — render plan, PDF and spreadsheet exports.
"""

from __future__ import annotations

import io
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from openpyxl import load_workbook

from core.documents import (
    MEDIA_TYPE_PDF,
    MEDIA_TYPE_XLSX,
    build_ledger_plan,
    export_ledger_pdf,
    export_ledger_xlsx,
)
from core.documents.renderer import render_ledger_pdf
from core.primitives.ledger import Entry
from projections.ledger import project_ledger

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _view():
    entries = [
        Entry(uuid.uuid4(), "in", Decimal("100000"), date(2024, 1, 1), "Opening float", T0, "u1"),
        Entry(uuid.uuid4(), "out", Decimal("40"), date(2024, 1, 2), "Tea (office)", T0, "u1"),
        Entry(uuid.uuid4(), "in", Decimal("20.5"), date(2024, 1, 3), "Sale", T0, "u1"),
    ]
    return project_ledger(entries)


class TestRenderPlan:
    def test_rows_split_amount_by_type(self):
        view = _view()
        plan = build_ledger_plan("Main", view.rows, view.totals)
        assert plan.columns == ("Date", "Remark", "Cash In", "Cash Out", "Balance")
        newest, middle, _ = plan.rows
        assert newest.date == "3/1/2024"
        assert newest.cash_in == Decimal("20.5") and newest.cash_out is None
        assert middle.cash_out == Decimal("40") and middle.cash_in is None
        assert newest.balance == view.totals.balance

    def test_blank_title_defaults(self):
        view = _view()
        assert build_ledger_plan("  ", view.rows, view.totals).title == "Cash Book"
        assert build_ledger_plan(None, view.rows, view.totals).title == "Cash Book"


class TestPdfExport:
    def test_artifact(self):
        view = _view()
        artifact = export_ledger_pdf("Main Shop", view.rows, view.totals)
        assert artifact.filename == "Main_Shop.pdf"
        assert artifact.media_type == MEDIA_TYPE_PDF
        assert artifact.content.startswith(b"%PDF-1.4")
        assert artifact.content.rstrip().endswith(b"%%EOF")

    def test_content_uses_rupee_formatting(self):
        view = _view()
        content = export_ledger_pdf("Main", view.rows, view.totals).content
        assert b"Total In: Rs.1,00,020.50" in content
        assert b"Total Out: Rs.40.00" in content
        assert b"Net Balance: Rs.99,980.50" in content
        # parentheses are escaped in PDF strings
        assert b"Tea \\(office\\)" in content
        # the non-applicable amount column shows a dash
        assert b"(-)" in content

    def test_search_narrows_rows_not_totals(self):
        view = _view()
        content = export_ledger_pdf("Main", view.search("sale"), view.totals).content
        assert b"(Sale)" in content
        assert b"Opening float" not in content
        assert b"Net Balance: Rs.99,980.50" in content

    def test_deterministic(self):
        view = _view()
        plan = build_ledger_plan("Main", view.rows, view.totals)
        assert render_ledger_pdf(plan) == render_ledger_pdf(plan)

    def test_long_ledger_paginates(self):
        entries = [
            Entry(uuid.uuid4(), "in", Decimal("1"), date(2024, 1, 1), f"Row {n}", T0, "u1")
            for n in range(120)
        ]
        view = project_ledger(entries)
        content = export_ledger_pdf("Main", view.rows, view.totals).content
        assert content.count(b"/Type /Page ") >= 3


class TestXlsxExport:
    def test_sheet_layout(self):
        view = _view()
        artifact = export_ledger_xlsx("Main Shop", view.rows, view.totals)
        assert artifact.filename == "Main_Shop.xlsx"
        assert artifact.media_type == MEDIA_TYPE_XLSX

        workbook = load_workbook(io.BytesIO(artifact.content))
        sheet = workbook["Entries"]
        rows = list(sheet.iter_rows(values_only=True))
        assert rows[0] == ("Date", "Remark", "Cash In", "Cash Out", "Balance")
        assert rows[1][0] == "3/1/2024"
        assert rows[1][1] == "Sale"
        assert rows[1][2] == 20.5
        assert rows[1][3] is None
        assert rows[2][3] == 40
        assert rows[2][2] is None
        assert len(rows) == 4

    def test_column_widths(self):
        view = _view()
        workbook = load_workbook(io.BytesIO(export_ledger_xlsx("Main", view.rows, view.totals).content))
        sheet = workbook["Entries"]
        widths = [sheet.column_dimensions[c].width for c in "ABCDE"]
        assert widths == [12, 30, 15, 15, 18]

    def test_search_narrows_rows(self):
        view = _view()
        artifact = export_ledger_xlsx(None, view.search("tea"), view.totals)
        assert artifact.filename == "Cash_Book.xlsx"
        sheet = load_workbook(io.BytesIO(artifact.content))["Entries"]
        assert sheet.max_row == 2
