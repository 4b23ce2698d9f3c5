"""Shared test helpers and stub classes.

Import from here instead of duplicating these classes in individual test files.
"""

from __future__ import annotations

from typing import Callable, Sequence


class FakeTimerHandle:
    def __init__(self, timer: "FakeTimerBackend", due: float, callback: Callable[[], None]) -> None:
        self._timer = timer
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimerBackend:
    """Manual clock for scheduler tests.

    ``call_later`` records the callback; ``advance`` moves the clock forward and
    fires every uncancelled callback that became due, in due order.

    Example:
        timer = FakeTimerBackend()
        scheduler = RefreshScheduler(callback, interval_ms=200, timer=timer)
        scheduler.schedule()
        timer.advance(0.2)
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[FakeTimerHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimerHandle:
        handle = FakeTimerHandle(self, self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> list[FakeTimerHandle]:
        return [handle for handle in self.handles if not handle.cancelled]

    def advance(self, seconds: float) -> int:
        self.now += seconds
        fired = 0
        due = sorted((h for h in self.active if h.due <= self.now + 1e-9), key=lambda h: h.due)
        for handle in due:
            if handle.cancelled:
                continue
            handle.cancelled = True
            handle.callback()
            fired += 1
        return fired


class RecordingSurface:
    """Report surface that remembers every call."""

    def __init__(self) -> None:
        self.badge_calls: list[tuple] = []
        self.summaries: list[str] = []
        self.warnings: list[str] = []

    def show_badges(self, badges: Sequence) -> None:
        self.badge_calls.append(tuple(badges))

    def set_status_summary(self, text: str) -> None:
        self.summaries.append(text)

    def set_focus_warning(self, text: str) -> None:
        self.warnings.append(text)


def review_form(*papers: tuple[str, str]) -> str:
    """Build a review form with one ``==+== Paper #<id>`` section per entry."""

    parts = ["==+== Review Form\n", "==-== Fill in every paper below.\n"]
    for section_id, body in papers:
        parts.append(f"==+== Paper #{section_id}\n")
        parts.append("==*== Overall merit\n")
        parts.append("Overall merit:\n")
        parts.append(body)
        if body and not body.endswith("\n"):
            parts.append("\n")
    return "".join(parts)
