"""Tests for section boundary scanning."""

from __future__ import annotations

import pytest

from reviewtally.core.sections import Section, scan_sections, section_at
from tests.helpers import review_form


TWO_PAPERS = (
    "==+== Paper #1\n"
    "Overall merit:\n"
    "First review text.\n"
    "==+== Paper #2\n"
    "Overall merit:\n"
    "Second review text here.\n"
)


def _assert_contiguous(text: str, sections: list[Section]) -> None:
    for current, following in zip(sections, sections[1:]):
        assert current.start <= following.start
        assert current.end == following.start
    if sections:
        assert sections[-1].end == len(text)


def test_scan_sections_finds_headers_in_order() -> None:
    sections = scan_sections(TWO_PAPERS)

    assert [section.section_id for section in sections] == ["1", "2"]
    assert sections[0].start == 0
    assert sections[1].start == TWO_PAPERS.index("==+== Paper #2")
    _assert_contiguous(TWO_PAPERS, sections)


def test_scan_sections_without_headers_is_empty() -> None:
    assert scan_sections("") == []
    assert scan_sections("Just some notes\nwith no header.\n") == []


def test_text_before_first_header_is_ignored() -> None:
    text = review_form(("7", "Fine."), ("9", "Also fine."))
    sections = scan_sections(text)

    assert [section.section_id for section in sections] == ["7", "9"]
    assert sections[0].start == text.index("==+== Paper #7")
    _assert_contiguous(text, sections)


@pytest.mark.parametrize(
    "line",
    [
        "==+== Paper #abc",
        "==+== Paper #",
        "==*== Paper #3",
        " ==+== Paper #3",
        "==+== Paper #3a",
        "==+== paper #3",
    ],
)
def test_malformed_headers_are_not_boundaries(line: str) -> None:
    text = f"==+== Paper #1\nbody\n{line}\nmore body\n"
    sections = scan_sections(text)

    assert [section.section_id for section in sections] == ["1"]
    assert sections[0].end == len(text)


def test_header_allows_trailing_text_and_crlf() -> None:
    text = "==+== Paper #4 (resubmission)\r\nanswer\r\n==+== Paper #5\r\nanswer\r\n"
    sections = scan_sections(text)

    assert [section.section_id for section in sections] == ["4", "5"]
    assert text[sections[0].start : sections[0].header_end] == "==+== Paper #4 (resubmission)"
    assert text[sections[1].start : sections[1].header_end] == "==+== Paper #5"


def test_repeated_and_unordered_ids_are_preserved() -> None:
    text = "==+== Paper #9\na\n==+== Paper #2\nb\n==+== Paper #9\nc\n"

    assert [section.section_id for section in scan_sections(text)] == ["9", "2", "9"]


def test_header_at_end_without_newline() -> None:
    text = "intro\n==+== Paper #8"
    (section,) = scan_sections(text)

    assert section.start == 6
    assert section.end == len(text)
    assert section.header_end == len(text)


def test_section_at_returns_containing_section() -> None:
    position = TWO_PAPERS.index("Second review")
    section = section_at(TWO_PAPERS, position)

    assert section is not None
    assert section.section_id == "2"
    assert section == scan_sections(TWO_PAPERS)[1]


def test_section_at_on_header_line_and_boundaries() -> None:
    second_start = TWO_PAPERS.index("==+== Paper #2")

    assert section_at(TWO_PAPERS, 0).section_id == "1"
    assert section_at(TWO_PAPERS, second_start - 1).section_id == "1"
    assert section_at(TWO_PAPERS, second_start).section_id == "2"
    assert section_at(TWO_PAPERS, second_start + 5).section_id == "2"
    assert section_at(TWO_PAPERS, len(TWO_PAPERS)).section_id == "2"


def test_section_at_before_first_header_is_none() -> None:
    text = "preamble\n\n==+== Paper #1\nbody\n"

    assert section_at(text, 0) is None
    assert section_at(text, text.index("==+==") - 1) is None
    assert section_at("no headers at all", 5) is None


def test_section_at_clamps_position() -> None:
    assert section_at(TWO_PAPERS, -10).section_id == "1"
    assert section_at(TWO_PAPERS, 10_000).section_id == "2"


def test_section_at_agrees_with_scan_for_every_offset() -> None:
    text = review_form(("1", "a b c"), ("2", ""), ("3", "d\n\ne"))
    sections = scan_sections(text)

    for position in range(len(text) + 1):
        expected = next((s for s in sections if s.start <= position < s.end), None)
        if expected is None and sections and position == len(text):
            expected = sections[-1]
        assert section_at(text, position) == expected
