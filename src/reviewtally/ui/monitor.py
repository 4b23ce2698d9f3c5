"""Host-facing controller keeping section word counts live while editing."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Protocol, Sequence

from ..core.ranges import TextRange
from ..core.report import ReportBuilder, SectionReport, sections_under_threshold
from ..core.scheduler import RefreshScheduler, TimerBackend
from ..services.settings import Settings
from ..services.telemetry import emit
from .events import (
    DocumentChanged,
    EventBus,
    FocusMoved,
    FocusReportUpdated,
    FullReportUpdated,
    SettingsChanged,
)
from .formatting import format_focus_warning, format_status_summary
from .overlays import Badge, BadgeOverlayCache

__all__ = ["ReportSurface", "ReviewCountMonitor"]

LOGGER = logging.getLogger(__name__)

TextProvider = Callable[[], str]


class ReportSurface(Protocol):
    """Rendering hooks implemented by the host editor surface."""

    def show_badges(self, badges: Sequence[Badge]) -> None:  # pragma: no cover - protocol stub
        ...

    def set_status_summary(self, text: str) -> None:  # pragma: no cover - protocol stub
        ...

    def set_focus_warning(self, text: str) -> None:  # pragma: no cover - protocol stub
        ...


class ReviewCountMonitor:
    """Turns host edit and focus notifications into rendered reports.

    ``on_document_changed`` feeds the debounced full refresh; ``on_focus_moved``
    recomputes only the focused section, immediately. The monitor reads the
    document through ``text_provider`` and never mutates it.
    """

    def __init__(
        self,
        text_provider: TextProvider,
        *,
        settings: Settings | None = None,
        surface: ReportSurface | None = None,
        event_bus: EventBus | None = None,
        timer: TimerBackend | None = None,
    ) -> None:
        if text_provider is None:
            raise ValueError("text_provider is required")
        self._text_provider = text_provider
        self._settings = settings or Settings()
        self._surface = surface
        self._bus = event_bus or EventBus()
        self._builder: ReportBuilder = self._settings.build_report_builder()
        self._overlays = BadgeOverlayCache()
        self._scheduler = RefreshScheduler(
            self._refresh_from_timer,
            interval_ms=self._settings.debounce_interval_ms,
            timer=timer,
        )
        self._focus = 0
        self._last_reports: tuple[SectionReport, ...] = ()
        self._last_focus_report: SectionReport | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    @property
    def overlays(self) -> BadgeOverlayCache:
        return self._overlays

    @property
    def focus(self) -> int:
        return self._focus

    @property
    def last_reports(self) -> tuple[SectionReport, ...]:
        return self._last_reports

    @property
    def last_focus_report(self) -> SectionReport | None:
        return self._last_focus_report

    # ------------------------------------------------------------------
    # Host notifications
    # ------------------------------------------------------------------
    def on_document_changed(
        self,
        edit_range: TextRange | tuple[int, int] | Any = None,
        *,
        version_id: int | None = None,
    ) -> None:
        """Record an edit and (re)arm the debounced full refresh."""

        span = TextRange.from_value(edit_range, fallback=(0, 0))
        self._bus.publish(DocumentChanged(start=span.start, end=span.end, version_id=version_id))
        self._scheduler.schedule()

    def on_focus_moved(self, position: int) -> SectionReport | None:
        """Recompute the focused section's report right away."""

        self._focus = max(0, int(position))
        self._bus.publish(FocusMoved(position=self._focus))
        return self._refresh_focus(trigger="focus")

    def refresh_now(self, *, trigger: str = "manual") -> tuple[SectionReport, ...]:
        """Drop any pending debounce and run a full refresh synchronously."""

        self._scheduler.cancel_pending()
        return self._refresh_full(trigger=trigger)

    def apply_settings(self, settings: Settings) -> None:
        self._settings = settings
        self._builder = settings.build_report_builder()
        self._scheduler.interval_ms = settings.debounce_interval_ms
        self._bus.publish(SettingsChanged(settings=settings))
        self.refresh_now(trigger="settings")

    def close(self) -> None:
        self._scheduler.cancel_pending()
        self._overlays.clear()

    # ------------------------------------------------------------------
    # Refresh internals
    # ------------------------------------------------------------------
    def _refresh_from_timer(self) -> None:
        self._refresh_full(trigger="debounce")

    def _refresh_full(self, *, trigger: str) -> tuple[SectionReport, ...]:
        text = self._text_provider() or ""
        started = time.perf_counter()
        reports = self._builder.build_full_report(text)
        latency_ms = (time.perf_counter() - started) * 1000.0
        self._last_reports = reports
        badges = self._overlays.rebuild(reports)
        self._call_surface("show_badges", badges)
        under = sections_under_threshold(reports)
        LOGGER.debug(
            "Full refresh (%s): %d section(s), %d under threshold, %.2fms",
            trigger,
            len(reports),
            len(under),
            latency_ms,
        )
        self._bus.publish(FullReportUpdated(reports=reports, trigger=trigger, latency_ms=latency_ms))
        emit(
            "report.refresh",
            {
                "trigger": trigger,
                "section_count": len(reports),
                "under_threshold": len(under),
                "document_length": len(text),
                "latency_ms": round(latency_ms, 3),
            },
        )
        self._refresh_focus(trigger=trigger, text=text)
        return reports

    def _refresh_focus(self, *, trigger: str, text: str | None = None) -> SectionReport | None:
        document = self._text_provider() if text is None else text
        report = self._builder.build_focus_report(document or "", self._focus)
        self._last_focus_report = report
        summary = format_status_summary(report) if self._settings.show_modeline_summary else ""
        warning = format_focus_warning(report) if self._settings.show_focus_warning else ""
        self._call_surface("set_status_summary", summary)
        self._call_surface("set_focus_warning", warning)
        self._bus.publish(FocusReportUpdated(position=self._focus, report=report))
        emit(
            "report.focus",
            {
                "trigger": trigger,
                "position": self._focus,
                "section_id": report.section_id if report else None,
                "word_count": report.word_count if report else None,
            },
        )
        return report

    def _call_surface(self, method: str, payload: Any) -> None:
        surface = self._surface
        if surface is None:
            return
        handler = getattr(surface, method, None)
        if handler is None:
            return
        try:
            handler(payload)
        except Exception:
            LOGGER.exception("Report surface %s failed", method)
