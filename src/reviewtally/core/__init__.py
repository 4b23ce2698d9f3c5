"""Core scanning, classification and reporting for review documents.

Everything in this package is synchronous and side-effect free apart from the
debounce timer owned by :class:`RefreshScheduler`.
"""

from .classifier import DEFAULT_RULES, ClassifierRule, LineClassifier, LineKind, build_rules
from .counter import count_words, tokenize
from .report import (
    DEFAULT_WORD_THRESHOLD,
    ReportBuilder,
    SectionReport,
    SectionStatus,
    build_focus_report,
    build_full_report,
)
from .scheduler import AsyncioTimerBackend, RefreshScheduler, TimerBackend
from .sections import Section, scan_sections, section_at

__all__ = [
    "DEFAULT_RULES",
    "DEFAULT_WORD_THRESHOLD",
    "AsyncioTimerBackend",
    "ClassifierRule",
    "LineClassifier",
    "LineKind",
    "RefreshScheduler",
    "ReportBuilder",
    "Section",
    "SectionReport",
    "SectionStatus",
    "TimerBackend",
    "build_focus_report",
    "build_full_report",
    "build_rules",
    "count_words",
    "scan_sections",
    "section_at",
    "tokenize",
]
