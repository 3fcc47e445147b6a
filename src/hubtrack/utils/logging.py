"""
Logging setup for hubtrack.

The tracker writes to a rotating log file. Logging must never interfere
with tracking, so file handler write errors are dropped and an unusable
log directory simply leaves the logger without a file handler.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from hubtrack.config.app import LoggingSettings

LOGGER_NAME = "hubtrack"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class QuietRotatingFileHandler(RotatingFileHandler):
    """RotatingFileHandler that drops records it fails to write."""

    def handleError(self, record: logging.LogRecord) -> None:  # noqa: N802
        pass


def setup_logging(
    settings: LoggingSettings | None = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Setup structured logging with rotation.

    Args:
        settings: Logging settings (default: LoggingSettings())
        verbose: Also log to stderr (used by the CLI)

    Returns:
        Configured "hubtrack" logger
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.level.upper()))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # Avoid duplicate handlers if logger already configured
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        try:
            log_file_path = Path(settings.file).expanduser()
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = QuietRotatingFileHandler(
                log_file_path,
                maxBytes=settings.max_size_mb * 1024 * 1024,
                backupCount=settings.backup_count,
            )
        except OSError:
            # Log directory unusable - keep tracking without a log file
            logger.addHandler(logging.NullHandler())
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    if verbose and not any(
        type(h) is logging.StreamHandler for h in logger.handlers
    ):
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    return logger
