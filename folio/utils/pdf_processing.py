"""
PDF inspection helpers.

Used to check rendered CV output: page counts and extracted text.
"""

import io
from pathlib import Path
from typing import List, Optional, Union

import pdfplumber
from PyPDF2 import PdfReader

PdfSource = Union[Path, bytes]


def _as_stream(source: PdfSource):
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    return str(source)


def page_count(source: PdfSource) -> Optional[int]:
    """Get page count from PDF path or bytes, or None if unreadable."""
    try:
        reader = PdfReader(_as_stream(source))
        return len(reader.pages)
    except Exception:
        return None


def extract_page_texts(source: PdfSource) -> List[str]:
    """Extract the text of each page in reading order."""
    with pdfplumber.open(_as_stream(source)) as pdf:
        return [page.extract_text() or "" for page in pdf.pages]


def extract_text(source: PdfSource) -> str:
    """Extract all text from a PDF, pages joined by newlines."""
    return "\n".join(extract_page_texts(source))
