"""Line classifier separating review form text from authored responses."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

__all__ = [
    "LineKind",
    "ClassifierRule",
    "LineClassifier",
    "BUILTIN_RULES",
    "DEFAULT_RULE_NAMES",
    "DEFAULT_RULES",
    "build_rules",
]

LOGGER = logging.getLogger(__name__)


class LineKind(str, Enum):
    """Classification of a single document line."""

    FORM = "form"
    RESPONSE = "response"


@dataclass(slots=True, frozen=True)
class ClassifierRule:
    """Named pattern; a full-line match marks the line as form text."""

    name: str
    pattern: re.Pattern[str]
    builtin: bool = False

    def matches(self, line: str) -> bool:
        return self.pattern.fullmatch(line) is not None


def _builtin(name: str, pattern: str) -> ClassifierRule:
    return ClassifierRule(name=name, pattern=re.compile(pattern), builtin=True)


# Major (==+==), minor (==*==) and instruction (==-==) markers.
_HEADER_RULE = _builtin("header", r"==[+*\-]==.*")
_BRACKETED_RULE = _builtin("bracketed", r"\s*\[.*\]\s*")
# Known limitation: a response line at column 0 ending with ":" is treated as a prompt.
_PROMPT_RULE = _builtin("prompt", r"(?=\S).*:\s*")
_BLANK_RULE = _builtin("blank", r"\s*")

BUILTIN_RULES: Mapping[str, ClassifierRule] = {
    rule.name: rule for rule in (_HEADER_RULE, _BRACKETED_RULE, _PROMPT_RULE, _BLANK_RULE)
}
DEFAULT_RULE_NAMES: tuple[str, ...] = ("header", "bracketed", "prompt", "blank")
DEFAULT_RULES: tuple[ClassifierRule, ...] = tuple(BUILTIN_RULES[name] for name in DEFAULT_RULE_NAMES)


class LineClassifier:
    """Classifies lines as form or response using an ordered rule list."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[ClassifierRule] | None = None) -> None:
        self._rules: tuple[ClassifierRule, ...] = DEFAULT_RULES if rules is None else tuple(rules)

    @property
    def rules(self) -> tuple[ClassifierRule, ...]:
        return self._rules

    @classmethod
    def from_config(cls, entries: Sequence[Any] | None) -> LineClassifier:
        """Build a classifier from configuration entries (see :func:`build_rules`)."""

        if entries is None:
            return cls()
        return cls(build_rules(entries))

    def classify(self, line: str) -> LineKind:
        text = (line or "").rstrip("\r\n")
        for rule in self._rules:
            if rule.matches(text):
                return LineKind.FORM
        return LineKind.RESPONSE


def build_rules(entries: Iterable[Any]) -> tuple[ClassifierRule, ...]:
    """Translate configuration entries into classifier rules.

    A string naming a built-in category (``header``, ``bracketed``, ``prompt``,
    ``blank``) selects that rule. Any other string is compiled as a user
    pattern. Mappings provide ``pattern`` and an optional ``name``. Entries that
    fail to compile are logged and skipped.
    """

    rules: list[ClassifierRule] = []
    for index, entry in enumerate(entries):
        rule = _coerce_rule(entry, index)
        if rule is not None:
            rules.append(rule)
    return tuple(rules)


def _coerce_rule(entry: Any, index: int) -> ClassifierRule | None:
    if isinstance(entry, ClassifierRule):
        return entry
    if isinstance(entry, str):
        builtin = BUILTIN_RULES.get(entry.strip().lower())
        if builtin is not None:
            return builtin
        return _compile_user_rule(f"custom-{index}", entry)
    if isinstance(entry, Mapping):
        pattern = entry.get("pattern")
        name = str(entry.get("name") or f"custom-{index}")
        if not isinstance(pattern, str):
            builtin = BUILTIN_RULES.get(name.strip().lower())
            if builtin is None:
                LOGGER.warning("Classifier rule %r is missing a pattern; skipping", name)
            return builtin
        return _compile_user_rule(name, pattern)
    LOGGER.warning("Ignoring classifier rule of unsupported type %s", type(entry).__name__)
    return None


def _compile_user_rule(name: str, pattern: str) -> ClassifierRule | None:
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        LOGGER.warning("Classifier rule %s has an invalid pattern %r: %s", name, pattern, exc)
        return None
    return ClassifierRule(name=name, pattern=compiled)
