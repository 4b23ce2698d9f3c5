"""Status bar surface with optional Qt widgets and a Qt timer backend."""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

try:  # pragma: no cover - Qt imports are optional during tests
    from PySide6.QtCore import QTimer
    from PySide6.QtWidgets import QLabel
except Exception:  # pragma: no cover - PySide6 not available
    QTimer = None  # type: ignore[assignment]
    QLabel = None  # type: ignore[assignment]

from ..ui.overlays import Badge

__all__ = ["ReviewStatusBar", "QtTimerBackend"]

LOGGER = logging.getLogger(__name__)


class ReviewStatusBar:
    """Report surface that keeps plain state and mirrors it into Qt labels.

    ``install`` attaches labels to an existing ``QStatusBar``; without Qt the
    bar still tracks the rendered text so hosts and tests can read it back.
    """

    def __init__(self) -> None:
        self._summary: str = ""
        self._warning: str = ""
        self._badges: tuple[Badge, ...] = ()
        self._summary_label: Any = None
        self._warning_label: Any = None

    def install(self, status_bar: Any | None) -> None:
        if status_bar is None or QLabel is None:
            return
        self._summary_label = QLabel(self._summary)
        self._summary_label.setObjectName("rt-status-summary")
        self._summary_label.setContentsMargins(8, 0, 8, 0)
        self._warning_label = QLabel(self._warning)
        self._warning_label.setObjectName("rt-status-warning")
        self._warning_label.setStyleSheet("color: #b35900;")
        try:
            status_bar.addPermanentWidget(self._summary_label)
            status_bar.addWidget(self._warning_label)
        except Exception:
            LOGGER.debug("ReviewStatusBar.install: status bar rejected labels", exc_info=True)
            self._summary_label = None
            self._warning_label = None
        self._refresh_labels()

    # ------------------------------------------------------------------
    # ReportSurface hooks
    # ------------------------------------------------------------------
    def show_badges(self, badges: Sequence[Badge]) -> None:
        self._badges = tuple(badges)

    def set_status_summary(self, text: str) -> None:
        self._summary = (text or "").strip()
        self._update_label(self._summary_label, self._summary)

    def set_focus_warning(self, text: str) -> None:
        self._warning = (text or "").strip()
        self._update_label(self._warning_label, self._warning)

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------
    @property
    def summary_text(self) -> str:
        return self._summary

    @property
    def warning_text(self) -> str:
        return self._warning

    @property
    def badges(self) -> tuple[Badge, ...]:
        return self._badges

    @property
    def warning_visible(self) -> bool:
        return bool(self._warning)

    def _refresh_labels(self) -> None:
        self._update_label(self._summary_label, self._summary)
        self._update_label(self._warning_label, self._warning)

    @staticmethod
    def _update_label(label: Any, text: str) -> None:
        if label is None:
            return
        try:
            label.setText(text)
            label.setVisible(bool(text))
        except Exception:  # pragma: no cover - Qt widget errors
            LOGGER.debug("ReviewStatusBar: failed to update label", exc_info=True)


class _QtTimerHandle:
    __slots__ = ("_timer",)

    def __init__(self, timer: Any) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()
        self._timer.deleteLater()


class QtTimerBackend:
    """Timer backend that defers callbacks through single-shot ``QTimer`` objects."""

    def __init__(self, parent: Any | None = None) -> None:
        if QTimer is None:
            raise RuntimeError("PySide6 must be installed to use the Qt timer backend.")
        self._parent = parent

    def call_later(self, delay: float, callback: Callable[[], None]) -> _QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.timeout.connect(callback)
        timer.timeout.connect(timer.deleteLater)
        timer.start(max(0, int(round(delay * 1000))))
        return _QtTimerHandle(timer)
