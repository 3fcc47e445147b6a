"""Tests for src/hubtrack/utils/logging.py - Logging setup."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from hubtrack.config.app import LoggingSettings
from hubtrack.utils.logging import (
    LOGGER_NAME,
    QuietRotatingFileHandler,
    setup_logging,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clean_logger() -> Iterator[logging.Logger]:
    """Detach handlers added by setup_logging so tests stay independent."""
    logger = logging.getLogger(LOGGER_NAME)
    original = list(logger.handlers)
    level = logger.level
    yield logger
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if handler not in original:
            logger.removeHandler(handler)
            handler.close()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_writes_to_log_file(self, temp_dir: Path) -> None:
        """Records from child loggers land in the configured file."""
        log_file = temp_dir / "logs" / "hub-plugin.log"
        setup_logging(LoggingSettings(file=str(log_file)))

        logging.getLogger("hubtrack.hub.client").info('START: sessionId=s1, messageId=7')

        content = log_file.read_text()
        assert "INFO" in content
        assert "hubtrack.hub.client" in content
        assert "START: sessionId=s1, messageId=7" in content

    def test_level_applied(self, temp_dir: Path) -> None:
        logger = setup_logging(LoggingSettings(file=str(temp_dir / "t.log"), level="warning"))
        assert logger.level == logging.WARNING

    def test_no_duplicate_handlers(self, temp_dir: Path) -> None:
        settings = LoggingSettings(file=str(temp_dir / "t.log"))
        setup_logging(settings)
        logger = setup_logging(settings)

        file_handlers = [h for h in logger.handlers if isinstance(h, QuietRotatingFileHandler)]
        assert len(file_handlers) == 1

    def test_unusable_directory_falls_back(self, temp_dir: Path) -> None:
        """A log path below a regular file cannot be created; setup still succeeds."""
        blocker = temp_dir / "not-a-dir"
        blocker.write_text("")

        logger = setup_logging(LoggingSettings(file=str(blocker / "hub-plugin.log")))

        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)
        assert not any(isinstance(h, QuietRotatingFileHandler) for h in logger.handlers)
        logger.info("still fine")

    def test_verbose_adds_stream_handler(self, temp_dir: Path) -> None:
        logger = setup_logging(LoggingSettings(file=str(temp_dir / "t.log")), verbose=True)
        assert any(type(h) is logging.StreamHandler for h in logger.handlers)


class TestQuietRotatingFileHandler:
    def test_handle_error_is_silent(self, temp_dir: Path, capsys: pytest.CaptureFixture) -> None:
        handler = QuietRotatingFileHandler(temp_dir / "q.log")
        record = logging.LogRecord("hubtrack", logging.INFO, __file__, 1, "msg", None, None)
        try:
            handler.handleError(record)
        finally:
            handler.close()
        assert capsys.readouterr().err == ""
