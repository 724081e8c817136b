"""Download filenames for rendered resumes."""

from datetime import date
from typing import Optional

from folio.contexts.schema import ResumeDocument
from folio.utils.text_processing import sanitize_filename_part
from folio.utils.timestamp import today

DEFAULT_FILENAME_NAME = "Resume"


def pdf_filename(document: ResumeDocument, on: Optional[date] = None) -> str:
    """
    Build the download filename for a document's PDF.

    Format: CV_<Name>_<YYYY-MM-DD>.pdf, where every non-alphanumeric character of the
    name becomes "_" and an empty name falls back to "Resume".

    Examples:
        pdf_filename(doc)                        # "CV_Jane_Doe_2026-10-19.pdf"
        pdf_filename(ResumeDocument.empty())     # "CV_Resume_2026-10-19.pdf"
    """
    name = (document.basics.name or "").strip() or DEFAULT_FILENAME_NAME
    return f"CV_{sanitize_filename_part(name)}_{today(on)}.pdf"
