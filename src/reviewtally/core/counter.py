"""Response word counting over document ranges."""

from __future__ import annotations

import re
from typing import Iterator

from .classifier import LineClassifier, LineKind

__all__ = ["WORD_PATTERN", "tokenize", "count_line_words", "count_words", "iter_response_lines"]

# Letters, digits and the underscore are word constituents.
WORD_PATTERN = re.compile(r"\w+")

_DEFAULT_CLASSIFIER = LineClassifier()


def tokenize(line: str) -> list[str]:
    """Return the maximal word-constituent runs in ``line``."""

    return WORD_PATTERN.findall(line or "")


def count_line_words(line: str) -> int:
    return len(tokenize(line))


def iter_response_lines(
    text: str,
    start: int = 0,
    end: int | None = None,
    *,
    classifier: LineClassifier | None = None,
) -> Iterator[str]:
    """Yield the lines of ``text[start:end]`` classified as response text."""

    active = classifier or _DEFAULT_CLASSIFIER
    # Only "\n" ends a line; form feeds and Unicode separators stay inside it.
    for line in _slice(text, start, end).split("\n"):
        if active.classify(line) is LineKind.RESPONSE:
            yield line.removesuffix("\r")


def count_words(
    text: str,
    start: int = 0,
    end: int | None = None,
    *,
    classifier: LineClassifier | None = None,
) -> int:
    """Count words on response lines inside ``text[start:end]``.

    Form lines contribute nothing even when they contain words. An unterminated
    final line is counted up to ``end``.
    """

    total = 0
    for line in iter_response_lines(text, start, end, classifier=classifier):
        total += count_line_words(line)
    return total


def _slice(text: str, start: int, end: int | None) -> str:
    length = len(text or "")
    lower = max(0, min(length, start))
    upper = length if end is None else max(lower, min(length, end))
    if lower == upper:
        return ""
    return text[lower:upper]
