"""
Rendering Context

Responsibilities:
- Projects a ResumeDocument onto one shared two-column layout
- Draws that layout as an interactive HTML preview, a public HTML page and an A4 PDF
- Names downloaded PDFs

Owns: ResumeLayout, templates, PDF page templates
Never: Mutates documents, persists anything
"""

from folio.contexts.rendering.dates import format_date_range
from folio.contexts.rendering.filenames import pdf_filename
from folio.contexts.rendering.html_renderer import (
    clamp_scale,
    render_preview,
    render_public,
    zoom_in,
    zoom_out,
)
from folio.contexts.rendering.layout import (
    LEFT_COLUMN,
    MAIN_COLUMN,
    PLACEHOLDER_NAME,
    LayoutEntry,
    LayoutHeader,
    LayoutSection,
    ResumeLayout,
    build_layout,
)
from folio.contexts.rendering.pdf_renderer import PdfRenderResult, render_pdf

__all__ = [
    "LEFT_COLUMN",
    "MAIN_COLUMN",
    "PLACEHOLDER_NAME",
    "LayoutEntry",
    "LayoutHeader",
    "LayoutSection",
    "ResumeLayout",
    "build_layout",
    "format_date_range",
    "render_preview",
    "render_public",
    "clamp_scale",
    "zoom_in",
    "zoom_out",
    "PdfRenderResult",
    "render_pdf",
    "pdf_filename",
]
