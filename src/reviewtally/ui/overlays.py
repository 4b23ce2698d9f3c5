"""Badge overlay bookkeeping derived from the last full report.

The cache only mirrors what the surface has painted. It can be cleared and
rebuilt from a fresh report at any time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..core.report import SectionReport
from .formatting import format_badge

__all__ = ["Badge", "BadgeOverlayCache", "render_badges"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Badge:
    """Badge text anchored at the end of a section's header line."""

    section_id: str
    anchor: int
    text: str
    ok: bool


class BadgeOverlayCache:
    """Tracks the badges currently painted by the host surface."""

    def __init__(self) -> None:
        self._badges: tuple[Badge, ...] = ()

    def rebuild(self, reports: Sequence[SectionReport]) -> tuple[Badge, ...]:
        self._badges = tuple(_badge_for(report) for report in reports)
        LOGGER.debug("Badge overlay rebuilt: %d badge(s)", len(self._badges))
        return self._badges

    def clear(self) -> None:
        self._badges = ()

    def badges(self) -> tuple[Badge, ...]:
        return self._badges

    def __len__(self) -> int:
        return len(self._badges)


def render_badges(text: str, reports: Sequence[SectionReport]) -> str:
    """Return ``text`` with each section's badge appended to its header line."""

    document = text or ""
    pieces: list[str] = []
    cursor = 0
    for badge in (_badge_for(report) for report in reports):
        pieces.append(document[cursor : badge.anchor])
        pieces.append(f" {badge.text}")
        cursor = badge.anchor
    pieces.append(document[cursor:])
    return "".join(pieces)


def _badge_for(report: SectionReport) -> Badge:
    return Badge(
        section_id=report.section_id,
        anchor=report.section.header_end,
        text=format_badge(report),
        ok=report.is_ok,
    )
