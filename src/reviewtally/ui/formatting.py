"""Text renderings of section reports for badges, status lines and tables."""

from __future__ import annotations

from typing import Sequence

from ..core.report import SectionReport

__all__ = [
    "format_badge",
    "format_status_summary",
    "format_focus_warning",
    "format_status_cell",
    "format_summary_table",
]

_TABLE_HEADERS = ("SectionId", "WordCount", "Status")


def format_badge(report: SectionReport) -> str:
    """Inline badge shown at a section header: ``[HC:120w WARN -380]``."""

    if report.is_ok:
        return f"[HC:{report.word_count}w OK]"
    return f"[HC:{report.word_count}w WARN -{report.deficit}]"


def format_status_summary(report: SectionReport | None) -> str:
    """One-line status for the focused section; blank when OK or unfocused."""

    if report is None or report.is_ok:
        return ""
    return f"HC P#{report.section_id}: {report.word_count}w (-{report.deficit})"


def format_focus_warning(report: SectionReport | None) -> str:
    if report is None or report.is_ok:
        return ""
    return (
        f"Paper #{report.section_id} review has {report.word_count} words; "
        f"{report.deficit} more needed to reach {report.threshold}."
    )


def format_status_cell(report: SectionReport) -> str:
    if report.is_ok:
        return "OK"
    return f"UNDER by {report.deficit}"


def format_summary_table(reports: Sequence[SectionReport]) -> str:
    """Render ``SectionId | WordCount | Status`` rows for a read-only view."""

    rows = [(report.section_id, str(report.word_count), format_status_cell(report)) for report in reports]
    widths = [len(header) for header in _TABLE_HEADERS]
    for row in rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

    def _line(cells: Sequence[str]) -> str:
        return " | ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    lines = [_line(_TABLE_HEADERS), "-+-".join("-" * width for width in widths)]
    lines.extend(_line(row) for row in rows)
    return "\n".join(lines)
