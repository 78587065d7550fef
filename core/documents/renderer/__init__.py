"""
CBM Documents — Renderer Public API
=====================================
"""

from core.documents.renderer.pdf_renderer import render_ledger_pdf
from core.documents.renderer.xlsx_renderer import render_ledger_xlsx

__all__ = [
    "render_ledger_pdf",
    "render_ledger_xlsx",
]
