"""
Shared utilities for folio.

Common functionality used across contexts:
- Logging setup and lifecycle event log
- Slugs and filename sanitizing
- Timestamps
- PDF inspection and text report tables
"""

from folio.utils.text_processing import is_valid_slug, sanitize_filename_part, slugify
from folio.utils.timestamp import now, now_exact, today

__all__ = [
    "is_valid_slug",
    "now",
    "now_exact",
    "sanitize_filename_part",
    "slugify",
    "today",
]
