"""Presentation of lint results as text, JSON or TOON."""

from .reporter import Report, ReportFormat, Reporter, format_text_line

__all__ = [
    "Report",
    "ReportFormat",
    "Reporter",
    "format_text_line",
]
