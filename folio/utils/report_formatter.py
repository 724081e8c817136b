"""
Utility functions for formatting text-based reports and tables.

Provides consistent table formatting for score breakdowns and record listings.
"""

from typing import Any, List


class Column:
    """Column definition for table formatting."""

    def __init__(self, name: str, width: int, align: str = "<"):
        """
        Args:
            name: Column header name
            width: Column width in characters
            align: Alignment ('<' left, '>' right, '^' center)
        """
        self.name = name
        self.width = width
        self.align = align

    def format_header(self) -> str:
        return f"{self.name:{self.align}{self.width}}"

    def format_value(self, value: Any) -> str:
        return f"{str(value):{self.align}{self.width}}"


class TableFormatter:
    """Builder for formatted text tables with aligned columns."""

    def __init__(self, columns: List[Column], total_width: int = 80):
        """
        Args:
            columns: List of Column definitions
            total_width: Total report width for separators
        """
        self.columns = columns
        self.total_width = total_width
        self.lines: List[str] = []

    def add_section_header(self, title: str) -> "TableFormatter":
        """Add section header with top/bottom separator lines."""
        self.lines.append("=" * self.total_width)
        self.lines.append(title)
        self.lines.append("=" * self.total_width)
        return self

    def add_table_header(self) -> "TableFormatter":
        """Add table header row with column names."""
        self.lines.append(" ".join(col.format_header() for col in self.columns))
        return self

    def add_separator(self, char: str = "-") -> "TableFormatter":
        """Add horizontal separator line."""
        self.lines.append(char * self.total_width)
        return self

    def add_row(self, *values: Any) -> "TableFormatter":
        """Add a data row; values are matched to columns positionally."""
        parts = [col.format_value(value) for col, value in zip(self.columns, values)]
        self.lines.append(" ".join(parts).rstrip())
        return self

    def add_line(self, text: str = "") -> "TableFormatter":
        """Add a free-form line."""
        self.lines.append(text)
        return self

    def build(self) -> str:
        """Join all lines into the final report."""
        return "\n".join(self.lines)
