"""Settings dataclass and JSON persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..core.classifier import DEFAULT_RULE_NAMES, LineClassifier
from ..core.report import DEFAULT_WORD_THRESHOLD, ReportBuilder
from ..core.scheduler import DEFAULT_DEBOUNCE_MS

__all__ = ["Settings", "SettingsStore"]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".reviewtally"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "REVIEWTALLY_WORD_THRESHOLD": "word_threshold",
    "REVIEWTALLY_DEBOUNCE_MS": "debounce_interval_ms",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "REVIEWTALLY_SHOW_FOCUS_WARNING": "show_focus_warning",
    "REVIEWTALLY_SHOW_MODELINE_SUMMARY": "show_modeline_summary",
    "REVIEWTALLY_DEBUG_LOGGING": "debug_logging",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}


@dataclass(slots=True)
class Settings:
    """User-configurable options for counting and display."""

    word_threshold: int = DEFAULT_WORD_THRESHOLD
    classifier_rules: list[Any] = field(default_factory=lambda: list(DEFAULT_RULE_NAMES))
    debounce_interval_ms: int = DEFAULT_DEBOUNCE_MS
    show_focus_warning: bool = True
    show_modeline_summary: bool = True
    debug_logging: bool = False

    def build_classifier(self) -> LineClassifier:
        return LineClassifier.from_config(self.classifier_rules)

    def build_report_builder(self) -> ReportBuilder:
        return ReportBuilder(self.build_classifier(), self.word_threshold)


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, then apply CLI and environment overrides."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            data = _filter_fields(payload)
            try:
                settings = _validated(Settings(**data))
            except TypeError as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()
            LOGGER.debug("Settings loaded from %s: %s", self._path, sorted(data))
            if payload.get("version") != _SETTINGS_VERSION:
                try:
                    self.save(settings)
                except OSError as exc:  # pragma: no cover - read-only home directories
                    LOGGER.warning("Failed to migrate settings payload: %s", exc)

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")

        return self._apply_env_overrides(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings with an atomic temp-file swap."""

        payload = asdict(settings)
        payload["version"] = _SETTINGS_VERSION
        body = json.dumps(payload, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain an object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {item.name for item in fields(Settings)}
        filtered = {key: value for key, value in overrides.items() if key in allowed and value is not None}
        if not filtered:
            return settings
        LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
        return _validated(replace(settings, **filtered))

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _INT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value, 10)
            except ValueError:
                LOGGER.warning("Environment override %s=%s is not a valid integer", env_name, value)
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {item.name for item in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}


def _validated(settings: Settings) -> Settings:
    """Replace values of the wrong type with defaults, logging each one."""

    defaults = Settings()
    updates: Dict[str, Any] = {}
    for name in ("word_threshold", "debounce_interval_ms"):
        value = getattr(settings, name)
        if isinstance(value, int) and not isinstance(value, bool):
            continue
        try:
            updates[name] = int(value)
        except (TypeError, ValueError):
            LOGGER.warning("Setting %s=%r is not an integer; using %s", name, value, getattr(defaults, name))
            updates[name] = getattr(defaults, name)
    if updates.get("debounce_interval_ms", settings.debounce_interval_ms) < 0:
        LOGGER.warning("Setting debounce_interval_ms must be >= 0; using %s", defaults.debounce_interval_ms)
        updates["debounce_interval_ms"] = defaults.debounce_interval_ms
    rules = settings.classifier_rules
    if isinstance(rules, str):
        updates["classifier_rules"] = [rules]
    elif isinstance(rules, tuple):
        updates["classifier_rules"] = list(rules)
    elif not isinstance(rules, list):
        LOGGER.warning("Setting classifier_rules must be a list; using defaults")
        updates["classifier_rules"] = list(DEFAULT_RULE_NAMES)
    for name in ("show_focus_warning", "show_modeline_summary", "debug_logging"):
        value = getattr(settings, name)
        if not isinstance(value, bool):
            updates[name] = str(value).strip().lower() in _TRUE_VALUES
    if not updates:
        return settings
    return replace(settings, **updates)
