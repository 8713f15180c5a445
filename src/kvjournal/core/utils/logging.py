"""
Logging configuration using loguru.

The CLI calls setup_logging() with the validated config before it opens a
ledger; library code just uses loguru directly. Every record carries the
ledger it was written against in ``extra["ledger"]``, so one log file can
be shared by several ledgers.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from kvjournal.core.config_schema import KvJournalConfig

CONSOLE_FORMAT = "<level>[{level.name}]</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[ledger]} | {name}:{function}:{line} | {message}"


def ledger_label(settings: KvJournalConfig) -> str:
    """Short name of the configured ledger, e.g. ``local:/srv/ledger``."""
    if settings.ledger.backend == "local":
        return f"local:{settings.ledger.path}"
    return settings.ledger.backend


def log_file_path(settings: KvJournalConfig) -> Path | None:
    """Where the file sink writes, or None when file logging is off.

    A relative ``logging.file`` is placed under ``paths.log_dir`` when one
    is configured.
    """
    if not settings.logging.file:
        return None
    path = Path(settings.logging.file).expanduser()
    if not path.is_absolute() and settings.paths.log_dir is not None:
        path = settings.paths.log_dir / path
    return path


def setup_logging(settings: KvJournalConfig) -> Path | None:
    """
    Replace loguru's sinks with a stderr sink and an optional rotating file.

    Args:
        settings: Validated config; ``logging.level``, ``logging.file``,
            ``logging.rotation`` and ``logging.retention`` are used.

    Returns:
        The log file path, or None when only stderr is used.
    """
    level = settings.logging.level
    logger.remove()
    logger.configure(extra={"ledger": ledger_label(settings)})
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    path = log_file_path(settings)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            level=level,
            format=FILE_FORMAT,
            rotation=settings.logging.rotation,
            retention=settings.logging.retention,
        )
    return path
