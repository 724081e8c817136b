"""
PDF backend of the shared resume layout.

Builds an A4 document with reportlab platypus. The first page has three frames: a
full-width header, a narrow left column (30%) and a wide main column (70%). Later
pages repeat the two columns at full height. Each column is paginated on its own,
so left-column content never flows into the main column and the other way round.

Rendering is best-effort per element: a photo that cannot be loaded or an entry whose
markup cannot be laid out is left out and recorded in PdfRenderResult.omitted. Only a
failure of the document as a whole raises RenderError.
"""

import time
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape, quoteattr

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import (
    BaseDocTemplate,
    Frame,
    FrameBreak,
    Image,
    KeepInFrame,
    ListFlowable,
    ListItem,
    NextPageTemplate,
    PageTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)
from reportlab.platypus.flowables import HRFlowable

from folio.contexts.rendering.images import load_image
from folio.contexts.rendering.layout import LayoutEntry, LayoutHeader, LayoutSection, build_layout
from folio.contexts.rendering.logger import (
    log_element_omitted,
    log_render_result,
    log_render_start,
)
from folio.contexts.schema import ResumeDocument
from folio.exceptions import ImageLoadError, RenderError
from folio.utils.pdf_processing import page_count

PAGE_SIZE = A4
PAGE_MARGIN = 14 * mm
HEADER_HEIGHT = 32 * mm
COLUMN_GAP = 7 * mm
LEFT_COLUMN_RATIO = 0.30
PHOTO_SIZE = 24 * mm

PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE
CONTENT_WIDTH = PAGE_WIDTH - 2 * PAGE_MARGIN
LEFT_WIDTH = CONTENT_WIDTH * LEFT_COLUMN_RATIO - COLUMN_GAP / 2
MAIN_WIDTH = CONTENT_WIDTH - LEFT_WIDTH - COLUMN_GAP
MAIN_X = PAGE_MARGIN + LEFT_WIDTH + COLUMN_GAP
FIRST_BODY_HEIGHT = PAGE_HEIGHT - 2 * PAGE_MARGIN - HEADER_HEIGHT
LATER_BODY_HEIGHT = PAGE_HEIGHT - 2 * PAGE_MARGIN
BODY_HEIGHTS = (FIRST_BODY_HEIGHT, LATER_BODY_HEIGHT)

INK = colors.HexColor("#1f2933")
MUTED = colors.HexColor("#52606d")
RULE = colors.HexColor("#cbd2d9")

_FUZZ = 1e-6


@dataclass(frozen=True)
class PdfRenderResult:
    """
    Result of rendering a document to PDF.

    Attributes:
        pdf_bytes: Complete PDF file content
        page_count: Number of pages in the PDF
        omitted: Descriptions of elements left out (e.g. "photo", "work[2]")
    """

    pdf_bytes: bytes
    page_count: Optional[int]
    omitted: Tuple[str, ...] = ()


def _build_styles() -> dict:
    base = getSampleStyleSheet()
    body = ParagraphStyle(
        "CVBody", parent=base["Normal"], fontName="Helvetica", fontSize=9, leading=12, textColor=INK
    )
    return {
        "name": ParagraphStyle(
            "CVName", parent=body, fontName="Helvetica-Bold", fontSize=22, leading=26, alignment=TA_LEFT
        ),
        "placeholder": ParagraphStyle(
            "CVPlaceholder", parent=body, fontName="Helvetica-Bold", fontSize=22, leading=26, textColor=MUTED
        ),
        "label": ParagraphStyle("CVLabel", parent=body, fontSize=11, leading=14, textColor=MUTED),
        "section": ParagraphStyle(
            "CVSection", parent=body, fontName="Helvetica-Bold", fontSize=10, leading=12, spaceBefore=8
        ),
        "title": ParagraphStyle("CVEntryTitle", parent=body, fontName="Helvetica-Bold", fontSize=9.5),
        "subtitle": ParagraphStyle("CVEntrySubtitle", parent=body, fontName="Helvetica-Oblique"),
        "meta": ParagraphStyle("CVEntryMeta", parent=body, fontSize=8.5, leading=11, textColor=MUTED),
        "body": body,
    }


STYLES = _build_styles()


class _ResumeDocTemplate(BaseDocTemplate):
    """A4 template: header + two columns on page one, the same two columns after."""

    def __init__(self, buffer, **kwargs):
        super().__init__(
            buffer,
            pagesize=PAGE_SIZE,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            **kwargs,
        )
        frame_options = dict(leftPadding=0, rightPadding=0, topPadding=0, bottomPadding=0)

        def column_frames(suffix: str, height: float) -> List[Frame]:
            return [
                Frame(PAGE_MARGIN, PAGE_MARGIN, LEFT_WIDTH, height, id=f"left-{suffix}", **frame_options),
                Frame(MAIN_X, PAGE_MARGIN, MAIN_WIDTH, height, id=f"main-{suffix}", **frame_options),
            ]

        header = Frame(
            PAGE_MARGIN, PAGE_HEIGHT - PAGE_MARGIN - HEADER_HEIGHT, CONTENT_WIDTH, HEADER_HEIGHT,
            id="header", **frame_options,
        )

        self._divider_y = PAGE_HEIGHT - PAGE_MARGIN - HEADER_HEIGHT + 3 * mm
        self.addPageTemplates(
            [
                PageTemplate(
                    id="first",
                    frames=[header, *column_frames("first", FIRST_BODY_HEIGHT)],
                    onPage=self._draw_first_page,
                ),
                PageTemplate(id="later", frames=column_frames("later", LATER_BODY_HEIGHT)),
            ]
        )

    def _draw_first_page(self, canvas, doc):
        canvas.saveState()
        canvas.setStrokeColor(INK)
        canvas.setLineWidth(1.5)
        canvas.line(PAGE_MARGIN, self._divider_y, PAGE_WIDTH - PAGE_MARGIN, self._divider_y)
        canvas.restoreState()


def _text(value: str) -> str:
    return escape(value)


def _linked(text: str, url: Optional[str]) -> str:
    if not url:
        return _text(text)
    return f"<link href={quoteattr(url)}>{_text(text)}</link>"


def _photo_flowable(reference: str, base_dir: Optional[Path], allow_private_hosts: bool) -> Image:
    data = load_image(reference, base_dir=base_dir, allow_private_hosts=allow_private_hosts)
    width, height = ImageReader(BytesIO(data)).getSize()
    if not width or not height:
        raise ValueError("image has no size")
    scale = PHOTO_SIZE / max(width, height)
    return Image(BytesIO(data), width=width * scale, height=height * scale)


def _header_flowables(
    header: LayoutHeader,
    omitted: List[str],
    base_dir: Optional[Path] = None,
    allow_private_hosts: bool = False,
) -> list:
    name_style = STYLES["placeholder"] if header.is_placeholder else STYLES["name"]
    text_block = [Paragraph(_text(header.name), name_style)]
    if header.label:
        text_block.append(Paragraph(_text(header.label), STYLES["label"]))

    if not header.image:
        return text_block

    try:
        photo = _photo_flowable(header.image, base_dir, allow_private_hosts)
    except (ImageLoadError, OSError, ValueError) as e:
        log_element_omitted("photo", e)
        omitted.append("photo")
        return text_block

    table = Table([[photo, text_block]], colWidths=[PHOTO_SIZE + 6 * mm, None])
    table.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ("RIGHTPADDING", (0, 0), (-1, -1), 0),
            ]
        )
    )
    return [table]


def _entry_flowables(section: LayoutSection, entry: LayoutEntry) -> list:
    flowables = []
    title_style = STYLES["body"] if section.key == "contact" else STYLES["title"]

    if entry.title:
        flowables.append(Paragraph(_linked(entry.title, entry.url), title_style))
    if entry.subtitle:
        flowables.append(Paragraph(_text(entry.subtitle), STYLES["subtitle"]))

    meta = " | ".join(part for part in (entry.dates, entry.meta) if part)
    if meta:
        flowables.append(Paragraph(_text(meta), STYLES["meta"]))
    if entry.description:
        flowables.append(Paragraph(_text(entry.description), STYLES["body"]))

    if entry.bullets:
        flowables.append(
            ListFlowable(
                [ListItem(Paragraph(_text(bullet), STYLES["body"]), leftIndent=10) for bullet in entry.bullets],
                bulletType="bullet",
                start="•",
                bulletFontSize=7,
                leftIndent=10,
            )
        )
    if entry.tags:
        flowables.append(Paragraph(_text(", ".join(entry.tags)), STYLES["body"]))

    flowables.append(Spacer(1, 4))
    return flowables


def _section_flowables(section: LayoutSection, omitted: List[str]) -> list:
    body = []
    for index, entry in enumerate(section.entries):
        try:
            body.extend(_entry_flowables(section, entry))
        except ValueError as e:
            element = f"{section.key}[{index}]"
            log_element_omitted(element, e)
            omitted.append(element)

    if not body:
        return []

    return [
        Paragraph(_text(section.title.upper()), STYLES["section"]),
        HRFlowable(width="100%", thickness=0.5, color=RULE, spaceBefore=1, spaceAfter=4),
        *body,
    ]


def _column_flowables(sections: Tuple[LayoutSection, ...], omitted: List[str]) -> list:
    flowables = []
    for section in sections:
        flowables.extend(_section_flowables(section, omitted))
    return flowables


def _fill_frame(canv: Canvas, pending: list, width: float, height: float) -> Tuple[list, list]:
    """Take the leading flowables that fit one frame, splitting the first that overflows."""
    chunk = []
    available = height
    while pending:
        flowable = pending[0]
        space = flowable.getSpaceBefore() if chunk else 0
        room = available - space
        if room > _FUZZ:
            _, needed = flowable.wrapOn(canv, width, room)
            if needed <= room + _FUZZ:
                chunk.append(pending.pop(0))
                available = room - needed - flowable.getSpaceAfter()
                continue
            parts = flowable.splitOn(canv, width, room)
            if parts and not (len(parts) == 1 and parts[0] is flowable):
                pending[0:1] = parts
                continue
        if not chunk:
            # Unsplittable and taller than an empty frame; KeepInFrame shrinks it
            chunk.append(pending.pop(0))
        break
    return chunk, pending


def _paginate(flowables: list, width: float, heights: Sequence[float]) -> List[list]:
    """
    Split one column into per-page chunks.

    heights gives the frame height of each page; the last value repeats.
    """
    canv = Canvas(BytesIO(), pagesize=PAGE_SIZE)
    pending = list(flowables)
    pages = []
    while pending:
        height = heights[min(len(pages), len(heights) - 1)]
        chunk, pending = _fill_frame(canv, pending, width, height)
        pages.append(chunk)
    return pages


def _framed(content: list, width: float, height: float) -> KeepInFrame:
    return KeepInFrame(width, height, content or [Spacer(1, 1)], mode="shrink")


def _page_height(index: int) -> float:
    return BODY_HEIGHTS[min(index, len(BODY_HEIGHTS) - 1)]


def _build_story(header: list, left: list, main: list) -> list:
    left_pages = _paginate(left, LEFT_WIDTH, BODY_HEIGHTS)
    main_pages = _paginate(main, MAIN_WIDTH, BODY_HEIGHTS)
    total_pages = max(len(left_pages), len(main_pages), 1)

    story = [NextPageTemplate("later"), _framed(header, CONTENT_WIDTH, HEADER_HEIGHT), FrameBreak()]
    for index in range(total_pages):
        height = _page_height(index)
        story.append(_framed(left_pages[index] if index < len(left_pages) else [], LEFT_WIDTH, height))
        story.append(FrameBreak())
        story.append(_framed(main_pages[index] if index < len(main_pages) else [], MAIN_WIDTH, height))
        if index < total_pages - 1:
            story.append(FrameBreak())
    return story


def render_pdf(
    document: ResumeDocument,
    base_dir: Optional[Path] = None,
    allow_private_hosts: bool = False,
) -> PdfRenderResult:
    """
    Render a document to an A4 PDF.

    Args:
        document: Resume document (any fill level, including empty)
        base_dir: Directory for local photo paths; without it local photos are omitted
        allow_private_hosts: Allow photo URLs on loopback/private hosts

    Returns:
        PdfRenderResult with the bytes, page count and omitted elements

    Raises:
        RenderError: If the document as a whole cannot be laid out
    """
    layout = build_layout(document)
    resume_name = (document.basics.name or "").strip()
    log_render_start(resume_name, "pdf", layout)
    start_time = time.time()

    omitted: List[str] = []
    buffer = BytesIO()
    try:
        story = _build_story(
            _header_flowables(layout.header, omitted, base_dir, allow_private_hosts),
            _column_flowables(layout.left, omitted),
            _column_flowables(layout.main, omitted),
        )
        doc = _ResumeDocTemplate(
            buffer,
            title=f"{layout.header.name} - CV",
            author=resume_name,
            creator="folio",
        )
        doc.build(story)
    except Exception as e:
        raise RenderError("PDF rendering failed", output="pdf", original_error=e) from e

    pdf_bytes = buffer.getvalue()
    result = PdfRenderResult(
        pdf_bytes=pdf_bytes,
        page_count=page_count(pdf_bytes),
        omitted=tuple(omitted),
    )
    log_render_result(resume_name, result, time.time() - start_time)
    return result
