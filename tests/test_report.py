"""Tests for full and focus report construction."""

from __future__ import annotations

import pytest

from reviewtally.core.classifier import LineClassifier
from reviewtally.core.report import (
    ReportBuilder,
    SectionStatus,
    build_focus_report,
    build_full_report,
    evaluate_status,
    sections_under_threshold,
)
from tests.helpers import review_form


def test_single_section_meets_low_threshold(scenario_document: str) -> None:
    (report,) = build_full_report(scenario_document, threshold=5)

    assert report.section_id == "1"
    assert report.word_count == 8
    assert report.status is SectionStatus.OK
    assert report.deficit == 0
    assert report.is_ok


def test_single_section_under_higher_threshold(scenario_document: str) -> None:
    (report,) = build_full_report(scenario_document, threshold=10)

    assert report.status is SectionStatus.UNDER
    assert report.deficit == 2
    assert report.threshold == 10


def test_document_without_headers_has_empty_report() -> None:
    assert build_full_report("Overall merit:\nJust prose here.\n", threshold=1) == ()
    assert build_full_report("", threshold=1) == ()


def test_focus_report_only_covers_the_containing_section() -> None:
    text = review_form(("1", "one two three four five six"), ("2", "alpha beta"))
    position = text.index("alpha")

    report = build_focus_report(text, position, threshold=3)

    assert report is not None
    assert report.section_id == "2"
    assert report.word_count == 2
    assert report.deficit == 1


def test_focus_report_is_independent_of_other_sections() -> None:
    short = review_form(("1", "x"), ("2", "alpha beta"))
    long = review_form(("1", "word " * 200), ("2", "alpha beta"))

    first = build_focus_report(short, short.index("alpha"), threshold=3)
    second = build_focus_report(long, long.index("alpha"), threshold=3)

    assert first.word_count == second.word_count == 2


def test_focus_before_first_header_is_none() -> None:
    text = review_form(("1", "some words"))

    assert build_focus_report(text, 0, threshold=5) is None


def test_bracketed_note_in_body_contributes_zero() -> None:
    text = "==+== Paper #1\n[Note: be concise]\n"

    (report,) = build_full_report(text, threshold=1)

    assert report.word_count == 0
    assert report.deficit == 1


@pytest.mark.parametrize(
    ("word_count", "threshold", "expected"),
    [
        (9, 10, (SectionStatus.UNDER, 1)),
        (10, 10, (SectionStatus.OK, 0)),
        (11, 10, (SectionStatus.OK, 0)),
        (0, 0, (SectionStatus.OK, 0)),
        (0, -3, (SectionStatus.OK, 0)),
        (0, 1, (SectionStatus.UNDER, 1)),
    ],
)
def test_evaluate_status(word_count: int, threshold: int, expected: tuple[SectionStatus, int]) -> None:
    assert evaluate_status(word_count, threshold) == expected


def test_repeated_ids_are_reported_separately() -> None:
    text = "==+== Paper #4\none\n==+== Paper #4\none two\n"

    reports = build_full_report(text, threshold=2)

    assert [report.section_id for report in reports] == ["4", "4"]
    assert [report.word_count for report in reports] == [1, 2]
    assert [report.status for report in reports] == [SectionStatus.UNDER, SectionStatus.OK]


def test_full_report_is_idempotent() -> None:
    text = review_form(("1", "a b c"), ("2", "d e"))
    builder = ReportBuilder(threshold=3)

    assert builder.build_full_report(text) == builder.build_full_report(text)


def test_adding_response_words_never_lowers_the_count() -> None:
    builder = ReportBuilder(threshold=50)
    base = review_form(("1", "first answer"))
    grown = review_form(("1", "first answer with more words"))

    (before,) = builder.build_full_report(base)
    (after,) = builder.build_full_report(grown)

    assert after.word_count > before.word_count
    assert after.deficit < before.deficit


def test_appending_to_one_section_leaves_the_next_unchanged() -> None:
    builder = ReportBuilder(threshold=50)
    base = review_form(("1", "first answer"), ("2", "second answer here"))
    insert_at = base.index("first answer") + len("first answer")
    grown = base[:insert_at] + " plus three more" + base[insert_at:]

    before = builder.build_full_report(base)
    after = builder.build_full_report(grown)

    assert [report.word_count for report in before] == [2, 3]
    assert [report.word_count for report in after] == [5, 3]


def test_extending_a_form_line_leaves_the_count_unchanged() -> None:
    builder = ReportBuilder(threshold=50)
    base = review_form(("1", "first answer"))
    insert_at = base.index("Overall merit:") + len("Overall merit")
    grown = base[:insert_at] + " and novelty" + base[insert_at:]

    (before,) = builder.build_full_report(base)
    (after,) = builder.build_full_report(grown)

    assert "Overall merit and novelty:\n" in grown
    assert after.word_count == before.word_count == 2


def test_focus_and_full_reports_agree() -> None:
    text = review_form(("1", "a b c"), ("2", "d"), ("3", "e f g h"))
    builder = ReportBuilder(threshold=3)
    full = builder.build_full_report(text)

    for report in full:
        focus = builder.build_focus_report(text, report.section.start + 1)
        assert focus == report


def test_builder_uses_supplied_classifier() -> None:
    text = "==+== Paper #1\nOverall merit:\nyes\n"
    builder = ReportBuilder(LineClassifier([]), threshold=1)

    (report,) = builder.build_full_report(text)

    # With no rules the header and prompt words count too.
    assert report.word_count == 5


def test_sections_under_threshold_filters_reports() -> None:
    text = review_form(("1", "a b c"), ("2", "d"))
    reports = build_full_report(text, threshold=2)

    assert [report.section_id for report in sections_under_threshold(reports)] == ["2"]
