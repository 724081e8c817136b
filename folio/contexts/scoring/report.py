"""Plain-text score breakdown for terminals and logs."""

from folio.contexts.scoring.scorer import ATSScore
from folio.utils.report_formatter import Column, TableFormatter


def format_score_report(result: ATSScore, title: str = "ATS Score Breakdown") -> str:
    """
    Render an ATSScore as an aligned text table followed by its suggestions.

    Example output:
        ================================================
        ATS Score Breakdown: 63/100 (Good)
        ================================================
        Category                   Score    Max
        ------------------------------------------------
        Contact Information           18     20
        ...
        Suggestions:
          - Add your LinkedIn profile
    """
    band = result.band
    table = TableFormatter(
        columns=[Column("Category", 24), Column("Score", 8, ">"), Column("Max", 6, ">")],
        total_width=48,
    )
    table.add_section_header(f"{title}: {result.total}/100 ({band.label})")
    table.add_table_header().add_separator()

    for category in result.categories:
        table.add_row(category.name, category.score, category.max_points)

    table.add_separator()
    table.add_row("Total", result.total, 100)

    suggestions = result.all_suggestions
    table.add_line()
    if suggestions:
        table.add_line("Suggestions:")
        for suggestion in suggestions:
            table.add_line(f"  - {suggestion}")
    else:
        table.add_line("All checks passed!")

    return table.build()
