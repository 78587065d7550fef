"""
CBM Documents — PDF Renderer
==============================
Writes a minimal, valid PDF 1.4 cash book report from a LedgerRenderPlan.

Pure Python: Helvetica is one of the fourteen standard PDF fonts, so
nothing is embedded. The built-in fonts are latin-1 only; the rupee sign
is written as "Rs." and any other non-ASCII character becomes "?".

Layout (A4, portrait):
    Title
    Total In: ... / Total Out: ... / Net Balance: ...
    Date | Remark | Cash In | Cash Out | Balance
    one row per exported entry, "-" in the column that does not apply
"""

from __future__ import annotations

import io
from decimal import Decimal
from typing import List, Optional, Sequence

from core.documents.builder import LedgerRenderPlan
from core.documents.formatting import RUPEE, format_inr


# ═══════════════════════════════════════════════════════════════
# PDF STRING ENCODING
# ═══════════════════════════════════════════════════════════════

def _pdf_str(value) -> str:
    """Encode a value as a PDF literal string (parentheses form)."""
    text = str(value) if value is not None else ""
    text = text.replace(RUPEE, "Rs.")
    text = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
    safe = "".join(c if ord(c) < 128 else "?" for c in text)
    return f"({safe})"


def _money(value: Optional[Decimal]) -> str:
    return "-" if value is None else format_inr(value)


# ═══════════════════════════════════════════════════════════════
# MINIMAL PDF WRITER
# ═══════════════════════════════════════════════════════════════

class _PdfWriter:
    """
    Page size: A4 (595 x 842 pts)
    Content model: lines of text, auto-pagination.

    Object ids 1 (Catalog) and 2 (Pages) are reserved; content streams
    and pages are numbered from 3 as they are added.
    """

    PAGE_W = 595
    PAGE_H = 842
    MARGIN_LEFT = 40
    MARGIN_RIGHT = 40
    MARGIN_TOP = 800
    MARGIN_BOTTOM = 40
    LINE_HEIGHT_NORMAL = 16
    LINE_HEIGHT_TITLE = 26
    FONT_SIZE_NORMAL = 10
    FONT_SIZE_TITLE = 16

    _RESERVED = 2

    def __init__(self):
        self._objects: List[str] = []
        self._pages: List[int] = []
        self._stream: List[str] = []
        self._y: float = self.MARGIN_TOP
        self._table_header: Optional[tuple] = None

    def _add_object(self, content: str) -> int:
        self._objects.append(content)
        return len(self._objects) + self._RESERVED

    def _text(self, x: float, text: str, *, bold: bool = False, size: Optional[int] = None) -> None:
        font = "/F2" if bold else "/F1"
        sz = size or self.FONT_SIZE_NORMAL
        self._stream.append(
            f"BT {font} {sz} Tf {x:.2f} {self._y:.2f} Td {_pdf_str(text)} Tj ET"
        )

    def _hline(self) -> None:
        x1 = self.MARGIN_LEFT
        x2 = self.PAGE_W - self.MARGIN_RIGHT
        self._stream.append(f"{x1} {self._y:.2f} m {x2} {self._y:.2f} l S")

    # -- page management -----------------------------------------------------

    def _finish_page(self) -> None:
        stream_text = "\n".join(self._stream)
        length = len(stream_text.encode("latin-1"))
        stream_id = self._add_object(
            f"<< /Length {length} >>\nstream\n{stream_text}\nendstream"
        )
        page_id = self._add_object(
            f"<< /Type /Page /Parent 2 0 R "
            f"/MediaBox [0 0 {self.PAGE_W} {self.PAGE_H}] "
            f"/Contents {stream_id} 0 R "
            f"/Resources << /Font << "
            f"/F1 << /Type /Font /Subtype /Type1 /BaseFont /Helvetica >> "
            f"/F2 << /Type /Font /Subtype /Type1 /BaseFont /Helvetica-Bold >> "
            f">> >> >>"
        )
        self._pages.append(page_id)
        self._stream = []
        self._y = self.MARGIN_TOP

    def _ensure_space(self, needed: float) -> None:
        if self._y - needed < self.MARGIN_BOTTOM:
            self._finish_page()
            # Repeat the column header on continuation pages.
            if self._table_header is not None:
                columns, widths = self._table_header
                self._write_table_header(columns, widths)

    # -- content helpers -----------------------------------------------------

    def add_title(self, text: str) -> None:
        self._ensure_space(self.LINE_HEIGHT_TITLE)
        self._text(self.MARGIN_LEFT, text, bold=True, size=self.FONT_SIZE_TITLE)
        self._y -= self.LINE_HEIGHT_TITLE

    def add_text(self, text: str, *, bold: bool = False) -> None:
        self._ensure_space(self.LINE_HEIGHT_NORMAL)
        self._text(self.MARGIN_LEFT, text, bold=bold)
        self._y -= self.LINE_HEIGHT_NORMAL

    def add_vspace(self, pts: float = 8) -> None:
        self._y -= pts

    def _write_table_header(self, columns: Sequence[str], widths: Sequence[float]) -> None:
        x = self.MARGIN_LEFT
        for column, width in zip(columns, widths):
            self._text(x, column, bold=True)
            x += width
        self._y -= self.LINE_HEIGHT_NORMAL - 4
        self._hline()
        self._y -= self.LINE_HEIGHT_NORMAL - 4

    def add_table_header(self, columns: Sequence[str], widths: Sequence[float]) -> None:
        self._ensure_space(self.LINE_HEIGHT_NORMAL * 2)
        self._write_table_header(columns, widths)
        self._table_header = (tuple(columns), tuple(widths))

    def add_table_row(self, cells: Sequence[str], widths: Sequence[float]) -> None:
        self._ensure_space(self.LINE_HEIGHT_NORMAL)
        x = self.MARGIN_LEFT
        for text, width in zip(cells, widths):
            # ~5.5pt per Helvetica glyph at 10pt
            max_chars = max(4, int(width / 5.5))
            if len(text) > max_chars:
                text = text[: max_chars - 3] + "..."
            self._text(x, text)
            x += width
        self._y -= self.LINE_HEIGHT_NORMAL

    # -- finalise ------------------------------------------------------------

    def build(self) -> bytes:
        if self._stream or not self._pages:
            self._finish_page()

        kids = " ".join(f"{pid} 0 R" for pid in self._pages)
        header_objects = [
            "<< /Type /Catalog /Pages 2 0 R >>",
            f"<< /Type /Pages /Kids [{kids}] /Count {len(self._pages)} >>",
        ]

        out = io.BytesIO()
        out.write(b"%PDF-1.4\n")
        out.write(b"%\xe2\xe3\xcf\xd3\n")

        offsets: List[int] = []
        for obj_id, content in enumerate(header_objects + self._objects, start=1):
            offsets.append(out.tell())
            out.write(f"{obj_id} 0 obj\n".encode("latin-1"))
            out.write(content.encode("latin-1"))
            out.write(b"\nendobj\n")

        xref_offset = out.tell()
        total = len(offsets) + 1
        out.write(f"xref\n0 {total}\n".encode("latin-1"))
        out.write(b"0000000000 65535 f \n")
        for offset in offsets:
            out.write(f"{offset:010d} 00000 n \n".encode("latin-1"))
        out.write(
            f"trailer\n<< /Size {total} /Root 1 0 R >>\n"
            f"startxref\n{xref_offset}\n%%EOF\n".encode("latin-1")
        )
        return out.getvalue()


# ═══════════════════════════════════════════════════════════════
# PUBLIC API
# ═══════════════════════════════════════════════════════════════

# Date, Remark, Cash In, Cash Out, Balance
COLUMN_WIDTHS = (70.0, 185.0, 85.0, 85.0, 90.0)


def render_ledger_pdf(plan: LedgerRenderPlan) -> bytes:
    """Render a cash book report. Same plan, same bytes."""
    writer = _PdfWriter()

    writer.add_title(plan.title)
    totals = plan.totals
    writer.add_text(
        f"Total In: {format_inr(totals.total_in)} / "
        f"Total Out: {format_inr(totals.total_out)} / "
        f"Net Balance: {format_inr(totals.balance)}"
    )
    writer.add_vspace(10)

    writer.add_table_header(plan.columns, COLUMN_WIDTHS)
    for row in plan.rows:
        writer.add_table_row(
            [
                row.date,
                row.remark,
                _money(row.cash_in),
                _money(row.cash_out),
                format_inr(row.balance),
            ],
            COLUMN_WIDTHS,
        )

    return writer.build()
