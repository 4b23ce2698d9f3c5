"""Command-line entry point for reviewtally."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, TextIO

from .core.scheduler import AsyncioTimerBackend
from .editor.document_model import DocumentState
from .services.settings import Settings, SettingsStore
from .ui.events import FullReportUpdated
from .ui.formatting import format_status_summary, format_summary_table
from .ui.monitor import ReviewCountMonitor
from .ui.overlays import render_badges
from .utils import logging as logging_utils

_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}
_LOGGER = logging.getLogger(__name__)
_WATCH_POLL_SECONDS = 0.25


def configure_logging(debug: bool = False) -> None:
    logging_utils.setup_logging(debug)


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        return active_store.load(overrides=overrides)
    except OSError as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        return Settings()


def main(argv: Sequence[str] | None = None, *, stdout: TextIO | None = None) -> None:
    """Entry point invoked by the ``reviewtally`` console script."""

    out = stdout or sys.stdout
    args = _parse_cli_args(argv)

    debug = bool(args.debug) or _env_flag("REVIEWTALLY_DEBUG", default=False)
    configure_logging(debug)

    settings_path = args.settings_path or os.environ.get("REVIEWTALLY_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    store = SettingsStore(resolved_path)
    try:
        overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc
    if args.threshold is not None:
        overrides["word_threshold"] = args.threshold

    settings = load_settings(resolved_path, store=store, overrides=overrides or None)
    if settings.debug_logging and not debug:
        configure_logging(True)

    if args.dump_settings:
        _dump_settings(settings, store, out)
        return

    if args.file is None:
        print("reviewtally: a review FILE is required", file=sys.stderr)
        raise SystemExit(2)
    path = Path(args.file).expanduser()
    try:
        text = _read_document(path)
    except OSError as exc:
        print(f"reviewtally: cannot read {path}: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.watch:
        try:
            asyncio.run(watch_document(path, settings, out=out))
        except KeyboardInterrupt:  # pragma: no cover - manual shutdown path
            _LOGGER.info("Watch stopped by user.")
        return

    render_once(text, settings, out=out, badges=args.badges, position=args.position)


def render_once(
    text: str,
    settings: Settings,
    *,
    out: TextIO,
    badges: bool = False,
    position: int | None = None,
) -> None:
    """Print the summary table, the badge view, or one focus status line."""

    builder = settings.build_report_builder()
    if position is not None:
        report = builder.build_focus_report(text, position)
        out.write(format_status_summary(report) + "\n")
        return
    reports = builder.build_full_report(text)
    if badges:
        out.write(render_badges(text, reports))
        return
    out.write(format_summary_table(reports) + "\n")


async def watch_document(
    path: Path,
    settings: Settings,
    *,
    out: TextIO,
    poll_seconds: float = _WATCH_POLL_SECONDS,
    max_polls: int | None = None,
) -> None:
    """Poll ``path`` and reprint the summary after each debounced refresh."""

    document = DocumentState(text=_read_document(path), path=path)
    loop = asyncio.get_running_loop()
    monitor = ReviewCountMonitor(
        lambda: document.text,
        settings=settings,
        timer=AsyncioTimerBackend(loop),
    )

    def _print_report(event: FullReportUpdated) -> None:
        out.write(format_summary_table(event.reports) + "\n\n")
        out.flush()

    monitor.event_bus.subscribe(FullReportUpdated, _print_report)
    monitor.refresh_now(trigger="startup")
    last_mtime = _mtime(path)
    polls = 0
    try:
        while max_polls is None or polls < max_polls:
            await asyncio.sleep(poll_seconds)
            polls += 1
            mtime = _mtime(path)
            if mtime is None or mtime == last_mtime:
                continue
            last_mtime = mtime
            try:
                text = _read_document(path)
            except OSError as exc:
                _LOGGER.warning("Unable to re-read %s: %s", path, exc)
                continue
            if text == document.text:
                continue
            monitor.on_document_changed(document.update_text(text), version_id=document.version_id)
        # Let a refresh armed by the final poll fire before returning.
        if monitor.scheduler.pending:
            await asyncio.sleep(monitor.scheduler.interval_ms / 1000.0 + poll_seconds)
    finally:
        monitor.close()


def _read_document(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _mtime(path: Path) -> int | None:
    with contextlib.suppress(OSError):
        return path.stat().st_mtime_ns
    return None


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _parse_cli_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="reviewtally",
        description="Report response word counts for each paper in a review form.",
    )
    parser.add_argument("file", nargs="?", metavar="FILE", help="Review form to analyze.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--badges",
        action="store_true",
        help="Print the document with a word-count badge on each paper header.",
    )
    mode.add_argument(
        "--position",
        type=int,
        metavar="OFFSET",
        help="Print the status line for the paper containing character OFFSET.",
    )
    mode.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and reprint the summary whenever FILE changes.",
    )
    parser.add_argument("--threshold", type=int, metavar="N", help="Word threshold per paper.")
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.reviewtally/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override a persisted setting for this run (repeatable).",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings as JSON and exit.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    """Parse ``KEY=VALUE`` entries using the type of each setting's default."""

    defaults = Settings()
    overrides: Dict[str, Any] = {}
    for entry in items:
        key, separator, raw_value = entry.partition("=")
        key = key.strip()
        if not separator:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        if key not in Settings.__dataclass_fields__:
            raise ValueError(f"Unknown setting '{key}'.")
        parser = _VALUE_PARSERS[type(getattr(defaults, key))]
        overrides[key] = parser(raw_value.strip())
    return overrides


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot coerce '{value}' to a boolean.")


def _parse_rule_list(value: str) -> list[Any]:
    try:
        rules = json.loads(value or "[]")
    except json.JSONDecodeError as exc:
        raise ValueError("classifier_rules must be a JSON array") from exc
    if not isinstance(rules, list):
        raise ValueError("classifier_rules must be a JSON array")
    return rules


_VALUE_PARSERS: Dict[type, Callable[[str], Any]] = {
    bool: _parse_bool,
    int: lambda value: int(value, 10),
    list: _parse_rule_list,
}


def _dump_settings(settings: Settings, store: SettingsStore, out: TextIO) -> None:
    payload = asdict(settings)
    payload["settings_path"] = str(store.path)
    out.write(json.dumps(payload, indent=2, sort_keys=True) + "\n")


if __name__ == "__main__":  # pragma: no cover - manual invocation
    main()
