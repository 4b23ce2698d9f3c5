"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from reviewtally.services import telemetry


SCENARIO_DOCUMENT = "==+== Paper #1\nOverall merit:\nThis is a great paper with clear contributions.\n"


@pytest.fixture
def scenario_document() -> str:
    return SCENARIO_DOCUMENT


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("REVIEWTALLY_LOG_DIR", str(tmp_path / "logs"))
    for name in (
        "REVIEWTALLY_WORD_THRESHOLD",
        "REVIEWTALLY_DEBOUNCE_MS",
        "REVIEWTALLY_SHOW_FOCUS_WARNING",
        "REVIEWTALLY_SHOW_MODELINE_SUMMARY",
        "REVIEWTALLY_DEBUG_LOGGING",
        "REVIEWTALLY_DEBUG",
        "REVIEWTALLY_SETTINGS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    saved = {name: list(listeners) for name, listeners in telemetry._EVENT_LISTENERS.items()}
    yield
    telemetry._EVENT_LISTENERS.clear()
    telemetry._EVENT_LISTENERS.update(saved)
