"""Text helpers shared across contexts: slugs, filenames, display truncation."""

import re
import unicodedata

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_NON_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9]")
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(text: str) -> str:
    """
    Turn a title into a URL-safe slug.

    Lowercases, strips accents, and collapses every run of other characters into
    a single hyphen, trimming hyphens at both ends.

    Examples:
        slugify("Jane Doe - CV 2025")  # "jane-doe-cv-2025"
        slugify("Crème Brûlée")        # "creme-brulee"
    """
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _NON_SLUG_CHARS.sub("-", ascii_text.lower()).strip("-")


def is_valid_slug(slug: str) -> bool:
    """True if slug is lowercase alphanumeric words joined by single hyphens."""
    return bool(SLUG_PATTERN.match(slug or ""))


def sanitize_filename_part(text: str) -> str:
    """Replace every non-alphanumeric character with an underscore."""
    return _NON_FILENAME_CHARS.sub("_", text)


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display, adding ellipsis if needed.

    Args:
        text: Text to truncate
        max_len: Maximum length including ellipsis

    Returns:
        Truncated text with "..." if longer than max_len
    """
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
