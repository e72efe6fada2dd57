"""
core/logging.py -- Logging setup for NoteKeeper.

All application loggers live under the "notekeeper" namespace
(notekeeper.api, notekeeper.auth, notekeeper.notes, ...). setup_logging()
attaches handlers to that namespace once:

  - combined.log: every record at the configured level, rotated at midnight
  - error.log:    ERROR and above only, same rotation
  - console:      stderr stream, skipped in production

Rotated files keep 14 days of history. An empty log_dir disables the files
entirely (tests do this).
"""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.config import Settings

_ROOT_LOGGER = "notekeeper"
_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_BACKUP_DAYS = 14


def _rotating_handler(path: Path, level: int) -> TimedRotatingFileHandler:
    handler = TimedRotatingFileHandler(path, when="midnight", backupCount=_BACKUP_DAYS, encoding="utf-8")
    handler.setLevel(level)
    return handler


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure the notekeeper logger tree. Safe to call more than once.

    Handlers installed by an earlier call are removed first so repeated
    create_app() calls (tests) do not duplicate every line.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root = logging.getLogger(_ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)
    handlers: list[logging.Handler] = []

    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_handler(log_dir / "combined.log", level))
        handlers.append(_rotating_handler(log_dir / "error.log", logging.ERROR))

    if not settings.is_production:
        console = logging.StreamHandler()
        console.setLevel(level)
        handlers.append(console)

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)

    return root
