"""Full-document and focus reports combining the scanner and counter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .classifier import LineClassifier
from .counter import count_words
from .sections import Section, scan_sections, section_at

__all__ = [
    "DEFAULT_WORD_THRESHOLD",
    "SectionStatus",
    "SectionReport",
    "ReportBuilder",
    "build_full_report",
    "build_focus_report",
    "evaluate_status",
    "sections_under_threshold",
]

DEFAULT_WORD_THRESHOLD = 500


class SectionStatus(str, Enum):
    OK = "ok"
    UNDER = "under"


@dataclass(slots=True, frozen=True)
class SectionReport:
    """Word count and completion status for one section."""

    section: Section
    word_count: int
    threshold: int
    status: SectionStatus
    deficit: int = 0

    @property
    def section_id(self) -> str:
        return self.section.section_id

    @property
    def is_ok(self) -> bool:
        return self.status is SectionStatus.OK


def evaluate_status(word_count: int, threshold: int) -> tuple[SectionStatus, int]:
    """Return ``(status, deficit)`` for ``word_count`` against ``threshold``."""

    if threshold <= 0 or word_count >= threshold:
        return SectionStatus.OK, 0
    return SectionStatus.UNDER, threshold - word_count


class ReportBuilder:
    """Builds section reports for a fixed classifier and threshold."""

    __slots__ = ("_classifier", "_threshold")

    def __init__(
        self,
        classifier: LineClassifier | None = None,
        threshold: int = DEFAULT_WORD_THRESHOLD,
    ) -> None:
        self._classifier = classifier or LineClassifier()
        self._threshold = int(threshold)

    @property
    def classifier(self) -> LineClassifier:
        return self._classifier

    @property
    def threshold(self) -> int:
        return self._threshold

    def report_for(self, text: str, section: Section) -> SectionReport:
        word_count = count_words(text, section.start, section.end, classifier=self._classifier)
        status, deficit = evaluate_status(word_count, self._threshold)
        return SectionReport(
            section=section,
            word_count=word_count,
            threshold=self._threshold,
            status=status,
            deficit=deficit,
        )

    def build_full_report(self, text: str) -> tuple[SectionReport, ...]:
        """Report every section in document order."""

        document = text or ""
        return tuple(self.report_for(document, section) for section in scan_sections(document))

    def build_focus_report(self, text: str, position: int) -> SectionReport | None:
        """Report only the section containing ``position``."""

        document = text or ""
        section = section_at(document, position)
        if section is None:
            return None
        return self.report_for(document, section)


def build_full_report(
    text: str,
    *,
    threshold: int = DEFAULT_WORD_THRESHOLD,
    classifier: LineClassifier | None = None,
) -> tuple[SectionReport, ...]:
    return ReportBuilder(classifier, threshold).build_full_report(text)


def build_focus_report(
    text: str,
    position: int,
    *,
    threshold: int = DEFAULT_WORD_THRESHOLD,
    classifier: LineClassifier | None = None,
) -> SectionReport | None:
    return ReportBuilder(classifier, threshold).build_focus_report(text, position)


def sections_under_threshold(reports: Sequence[SectionReport]) -> list[SectionReport]:
    return [report for report in reports if not report.is_ok]
