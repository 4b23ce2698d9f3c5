"""Unit tests for the review status bar surface."""

from __future__ import annotations

from unittest.mock import MagicMock, call

import pytest

from reviewtally.services.settings import Settings
from reviewtally.ui.monitor import ReviewCountMonitor
from reviewtally.widgets import status_bar as status_bar_module
from reviewtally.widgets.status_bar import QtTimerBackend, ReviewStatusBar
from tests.helpers import FakeTimerBackend, review_form


def test_status_bar_tracks_state_without_qt() -> None:
    bar = ReviewStatusBar()
    bar.install(None)

    bar.set_status_summary("HC P#3: 120w (-380)  ")
    bar.set_focus_warning("Paper #3 review has 120 words; 380 more needed to reach 500.")

    assert bar.summary_text == "HC P#3: 120w (-380)"
    assert bar.warning_visible

    bar.set_focus_warning("")
    assert not bar.warning_visible


def test_status_bar_mirrors_text_into_labels() -> None:
    bar = ReviewStatusBar()
    label = MagicMock()
    bar._summary_label = label

    bar.set_status_summary("HC P#1: 2w (-3)")
    bar.set_status_summary("")

    label.setText.assert_called_with("")
    label.setVisible.assert_called_with(False)


def test_status_bar_as_monitor_surface() -> None:
    text = review_form(("1", "one"), ("2", "one two three"))
    bar = ReviewStatusBar()
    monitor = ReviewCountMonitor(
        lambda: text,
        settings=Settings(word_threshold=3),
        surface=bar,
        timer=FakeTimerBackend(),
    )

    monitor.on_focus_moved(text.index("one"))
    monitor.refresh_now()

    assert bar.summary_text == "HC P#1: 1w (-2)"
    assert [badge.text for badge in bar.badges] == ["[HC:1w WARN -2]", "[HC:3w OK]"]


def test_monitor_accepts_mock_surface() -> None:
    surface = MagicMock()
    monitor = ReviewCountMonitor(lambda: "==+== Paper #1\nword\n", surface=surface, timer=FakeTimerBackend())

    monitor.refresh_now()

    surface.show_badges.assert_called_once()
    surface.set_status_summary.assert_called_once_with("")


def test_qt_timer_backend_requires_pyside(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(status_bar_module, "QTimer", None)

    with pytest.raises(RuntimeError):
        QtTimerBackend()


def test_qt_timer_backend_uses_single_shot_timers(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[MagicMock] = []

    def _factory(parent=None):
        timer = MagicMock()
        created.append(timer)
        return timer

    monkeypatch.setattr(status_bar_module, "QTimer", _factory)
    callback = MagicMock()

    handle = QtTimerBackend().call_later(0.2, callback)
    handle.cancel()

    (timer,) = created
    timer.setSingleShot.assert_called_once_with(True)
    assert timer.timeout.connect.call_args_list == [call(callback), call(timer.deleteLater)]
    timer.start.assert_called_once_with(200)
    timer.stop.assert_called_once()
    timer.deleteLater.assert_called_once()


def test_qt_timer_backend_deletes_timer_after_firing(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[MagicMock] = []

    def _factory(parent=None):
        timer = MagicMock()
        created.append(timer)
        return timer

    monkeypatch.setattr(status_bar_module, "QTimer", _factory)
    callback = MagicMock()

    QtTimerBackend().call_later(0.05, callback)

    (timer,) = created
    for slot_call in timer.timeout.connect.call_args_list:
        slot_call.args[0]()
    callback.assert_called_once_with()
    timer.deleteLater.assert_called_once_with()
    timer.stop.assert_not_called()
