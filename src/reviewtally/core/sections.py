"""Section boundary scanning for review documents."""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = [
    "HEADER_PATTERN",
    "Section",
    "scan_sections",
    "section_at",
]


# ``==+== Paper #<digits>`` followed by whitespace or end of line.
HEADER_PATTERN = re.compile(r"^==\+== Paper #(?P<section_id>\d+)(?=[ \t\r]|$)", re.MULTILINE)


@dataclass(slots=True, frozen=True)
class Section:
    """A contiguous ``[start, end)`` span opened by a major header line.

    ``header_end`` is the offset where the header line's text stops (before
    its line terminator).
    """

    section_id: str
    start: int
    end: int
    header_end: int


def scan_sections(text: str) -> list[Section]:
    """Locate every section in ``text`` in a single left-to-right pass."""

    document = text or ""
    length = len(document)
    sections: list[Section] = []
    pending: re.Match[str] | None = None
    for match in HEADER_PATTERN.finditer(document):
        if pending is not None:
            sections.append(_section_from_match(document, pending, match.start()))
        pending = match
    if pending is not None:
        sections.append(_section_from_match(document, pending, length))
    return sections


def section_at(text: str, position: int) -> Section | None:
    """Return the section containing ``position``.

    Walks backward to the nearest header at or before ``position`` and then
    forward to the next header (or document end). Returns ``None`` when no
    header precedes ``position``.
    """

    document = text or ""
    length = len(document)
    offset = max(0, min(length, int(position)))
    line_start = document.rfind("\n", 0, offset) + 1
    while True:
        match = HEADER_PATTERN.match(document, line_start)
        if match is not None:
            following = HEADER_PATTERN.search(document, match.end())
            end = following.start() if following is not None else length
            return _section_from_match(document, match, end)
        if line_start == 0:
            return None
        line_start = document.rfind("\n", 0, line_start - 1) + 1


def _section_from_match(text: str, match: re.Match[str], end: int) -> Section:
    newline = text.find("\n", match.end(), end)
    header_end = end if newline < 0 else newline
    if header_end > match.end() and text[header_end - 1] == "\r":
        header_end -= 1
    return Section(
        section_id=match.group("section_id"),
        start=match.start(),
        end=end,
        header_end=header_end,
    )
