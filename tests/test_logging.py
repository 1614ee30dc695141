"""Tests for logging configuration."""

import logging
import logging.handlers
from pathlib import Path

import pytest


@pytest.fixture
def package_logger():
    """The gamemaps logger, with its handlers removed after the test."""
    logger = logging.getLogger("gamemaps")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestFormatters:
    """Test the console and file formatters."""

    def _record(self, message: str, level: int = logging.WARNING) -> logging.LogRecord:
        return logging.LogRecord(
            "gamemaps.formats", level, "registry.py", 42, message, None, None
        )

    def test_colored_level(self) -> None:
        """Test only the level name is coloured."""
        from gamemaps.utils.logging_config import ColoredFormatter

        formatter = ColoredFormatter(fmt="%(levelname)s : %(message)s")
        output = formatter.format(self._record("WARNING in message"))
        assert output.startswith("\033[33mWARNING\033[0m")
        assert output.endswith("WARNING in message")

    def test_csv_escaping(self) -> None:
        """Test quotes in messages are doubled."""
        from gamemaps.utils.logging_config import CSVFormatter

        output = CSVFormatter(datefmt="%Y").format(self._record('bad "tile" code'))
        fields = output.split(";")
        assert fields[1].strip() == "WARNING"
        assert fields[3] == '"gamemaps.formats"'
        assert fields[4] == '"42"'
        assert fields[5] == '"bad ""tile"" code"'


class TestSetupLogging:
    """Test logging setup from settings."""

    def test_console_handler(self, settings, package_logger) -> None:
        """Test a coloured console handler is installed at the configured level."""
        from gamemaps.utils.logging_config import ColoredFormatter, setup_logging

        settings.console_log_level = "INFO"
        setup_logging(settings)

        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1
        handler = package_logger.handlers[0]
        assert handler.level == logging.INFO
        assert isinstance(handler.formatter, ColoredFormatter)

    def test_plain_console(self, settings, package_logger) -> None:
        """Test colours can be switched off."""
        from gamemaps.utils.logging_config import ColoredFormatter, setup_logging

        settings.console_use_colors = False
        setup_logging(settings)
        assert not isinstance(package_logger.handlers[0].formatter, ColoredFormatter)

    def test_file_handler(self, settings, package_logger, tmp_path: Path) -> None:
        """Test file logging writes CSV lines to a rotating file."""
        from gamemaps.utils.logging_config import setup_logging

        log_file = tmp_path / "logs" / "gamemaps.csv"
        settings.console_logging = False
        settings.file_logging = True
        settings.log_file_path = str(log_file)
        setup_logging(settings)

        handlers = package_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)
        assert handlers[0].maxBytes == 10 * 1024 * 1024
        assert handlers[0].backupCount == 5

        logging.getLogger("gamemaps.test").debug("written to file")
        handlers[0].flush()
        assert "written to file" in log_file.read_text(encoding="utf-8")

    def test_setup_replaces_handlers(self, settings, package_logger) -> None:
        """Test calling setup twice does not duplicate handlers."""
        from gamemaps.utils.logging_config import setup_logging

        setup_logging(settings)
        setup_logging(settings)
        assert len(package_logger.handlers) == 1

    def test_everything_disabled(self, settings, package_logger) -> None:
        """Test no handlers are installed when both outputs are off."""
        from gamemaps.utils.logging_config import setup_logging

        settings.console_logging = False
        setup_logging(settings)
        assert package_logger.handlers == []
