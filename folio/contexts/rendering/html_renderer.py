"""
HTML backend of the shared resume layout.

render_preview() produces the live editor preview (A4 canvas with zoom controls);
render_public() produces the read-only public page with a print button. Both draw the
same ResumeLayout, so section order and visibility match the PDF.
"""

from typing import Optional

from jinja2 import TemplateError

from folio.contexts.rendering.layout import build_layout
from folio.contexts.rendering.template_registry import TemplateRegistry
from folio.contexts.schema import ResumeDocument
from folio.exceptions import RenderError

DEFAULT_PREVIEW_SCALE = 0.6
MIN_PREVIEW_SCALE = 0.3
MAX_PREVIEW_SCALE = 1.0
PREVIEW_SCALE_STEP = 0.1

_registry: Optional[TemplateRegistry] = None


def _get_registry() -> TemplateRegistry:
    global _registry
    if _registry is None:
        _registry = TemplateRegistry()
    return _registry


def clamp_scale(scale: float) -> float:
    """Clamp a preview zoom factor to [0.3, 1.0], rounded to one decimal."""
    return round(min(max(float(scale), MIN_PREVIEW_SCALE), MAX_PREVIEW_SCALE), 1)


def zoom_in(scale: float) -> float:
    return clamp_scale(scale + PREVIEW_SCALE_STEP)


def zoom_out(scale: float) -> float:
    return clamp_scale(scale - PREVIEW_SCALE_STEP)


def _page_title(document: ResumeDocument) -> str:
    name = (document.basics.name or "").strip()
    return f"{name} - CV" if name else "CV"


def _render(template_name: str, document: ResumeDocument, **context) -> str:
    layout = build_layout(document)
    try:
        template = _get_registry().get_template(template_name)
        return template.render(layout=layout, title=_page_title(document), **context)
    except TemplateError as e:
        raise RenderError("HTML rendering failed", output="html", original_error=e) from e


def render_preview(
    document: ResumeDocument, scale: float = DEFAULT_PREVIEW_SCALE
) -> str:
    """
    Render the editor preview of a document.

    Args:
        document: Current document (any fill level)
        scale: Zoom factor, clamped to [0.3, 1.0]

    Returns:
        Complete HTML page. Zoom links point at ?scale=<next value>.

    Raises:
        RenderError: If the page template itself fails
    """
    scale = clamp_scale(scale)
    return _render(
        "preview",
        document,
        body_class="cv-preview",
        scale=scale,
        zoom_in_scale=zoom_in(scale),
        zoom_out_scale=zoom_out(scale),
        can_zoom_in=scale < MAX_PREVIEW_SCALE,
        can_zoom_out=scale > MIN_PREVIEW_SCALE,
    )


def render_public(document: ResumeDocument) -> str:
    """
    Render the read-only public page of a document.

    Raises:
        RenderError: If the page template itself fails
    """
    return _render("public", document, body_class="cv-public")
