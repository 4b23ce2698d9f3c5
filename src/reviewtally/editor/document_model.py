"""Dataclasses describing the host document snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.ranges import TextRange


@dataclass(slots=True)
class DocumentState:
    """Review document text owned by a host, with a version bumped per edit.

    The counting core never mutates a document; hosts call :meth:`update_text`
    and forward the returned edit span and ``version_id`` to the monitor.
    """

    text: str = ""
    path: Optional[Path] = None
    version_id: int = 1

    def update_text(self, new_text: str) -> TextRange:
        """Replace the text and return the span of ``new_text`` that differs from the old text."""

        edited = _diff_span(self.text, new_text)
        self.text = new_text
        self.version_id += 1
        return edited


def _diff_span(old: str, new: str) -> TextRange:
    limit = min(len(old), len(new))
    prefix = 0
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1
    suffix = 0
    while suffix < limit - prefix and old[len(old) - 1 - suffix] == new[len(new) - 1 - suffix]:
        suffix += 1
    return TextRange(prefix, len(new) - suffix)


__all__ = ["DocumentState"]
