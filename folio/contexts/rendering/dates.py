"""Date range formatting shared by the HTML and PDF renderers."""

from typing import Optional

PRESENT = "Present"
RANGE_SEPARATOR = " – "


def format_date_range(
    start: Optional[str],
    end: Optional[str],
    ongoing: bool = False,
    open_ended: bool = True,
) -> Optional[str]:
    """
    Format a start/end pair for display.

    Dates are shown as entered (ISO "YYYY-MM" or "YYYY-MM-DD" in practice).

    Args:
        start: Start date, may be None or blank
        end: End date, may be None or blank
        ongoing: Entry is current regardless of end (e.g. isCurrentRole)
        open_ended: A missing end means "still running" (work, projects, volunteer).
            Education passes False so a missing end never reads "Present".

    Returns:
        "start – end", "start – Present", a single date, or None if nothing to show

    Examples:
        >>> format_date_range("2020-01", "2023-06")
        '2020-01 – 2023-06'
        >>> format_date_range("2020-01", None)
        '2020-01 – Present'
        >>> format_date_range("2020-01", "2023-06", ongoing=True)
        '2020-01 – Present'
        >>> format_date_range("2016-10", None, open_ended=False)
        '2016-10'
    """
    start = (start or "").strip() or None
    end = (end or "").strip() or None

    if ongoing or (open_ended and start and not end):
        return f"{start}{RANGE_SEPARATOR}{PRESENT}" if start else PRESENT

    if start and end:
        return f"{start}{RANGE_SEPARATOR}{end}"
    return start or end
