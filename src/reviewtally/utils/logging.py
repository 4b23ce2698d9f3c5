"""Log handlers for the CLI and editor hosts.

reviewtally owns exactly one file handler (and optionally one console handler)
on the root logger. Calling :func:`setup_logging` again swaps them, which is
how a ``debug_logging`` setting loaded after startup raises the verbosity.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

__all__ = ["LOG_FILE_NAME", "log_level", "resolve_log_path", "setup_logging", "teardown_logging"]

LOG_FILE_NAME = "reviewtally.log"
_LOG_DIR_ENV = "REVIEWTALLY_LOG_DIR"
_DEFAULT_LOG_DIR = Path.home() / ".reviewtally" / "logs"
_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
# Third-party loggers that stay at WARNING even when reviewtally logs at DEBUG.
_QUIET_LOGGERS: tuple[str, ...] = ("asyncio", "PySide6")

_installed: list[logging.Handler] = []


def log_level(debug: bool) -> int:
    return logging.DEBUG if debug else logging.WARNING


def resolve_log_path(log_dir: Path | str | None = None) -> Path:
    """Return the log file path: explicit directory, then ``REVIEWTALLY_LOG_DIR``, then ``~/.reviewtally/logs``."""

    directory = log_dir or os.environ.get(_LOG_DIR_ENV) or _DEFAULT_LOG_DIR
    return Path(directory).expanduser() / LOG_FILE_NAME


def setup_logging(debug: bool = False, *, log_dir: Path | str | None = None, console: bool = True) -> Path:
    """Install reviewtally's handlers at DEBUG (``debug``) or WARNING level."""

    teardown_logging()
    level = log_level(debug)
    path = resolve_log_path(log_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(_FORMAT)
    handlers: list[logging.Handler] = [RotatingFileHandler(path, maxBytes=512_000, backupCount=2, encoding="utf-8")]
    if console:
        handlers.append(logging.StreamHandler())

    root = logging.getLogger()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _installed.append(handler)
    root.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).debug("Logging to %s at %s", path, logging.getLevelName(level))
    return path


def teardown_logging() -> None:
    """Remove and close the handlers installed by :func:`setup_logging`."""

    root = logging.getLogger()
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()
