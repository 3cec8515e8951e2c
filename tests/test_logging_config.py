"""Tests for logging configuration."""

import logging

import pytest

from echo_server.logging_config import (
    LOG_FILE,
    PACKAGE_LOGGER,
    configure_logging,
    get_logger,
)


def _file_handlers() -> list[logging.Handler]:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    return [h for h in package_logger.handlers if isinstance(h, logging.FileHandler)]


@pytest.fixture
def log_file(tmp_path):
    """Redirect the package log to a temporary file for one test."""
    path = tmp_path / "logs" / "echo-server.log"
    configure_logging(path)
    yield path
    configure_logging(LOG_FILE)


class TestGetLogger:
    """Tests for module loggers."""

    def test_module_logger_is_package_child(self):
        """Loggers for package modules should sit under the package logger."""
        logger = get_logger("echo_server.session.handler")
        assert logger.name == "echo_server.session.handler"
        assert logger.parent.name.startswith(PACKAGE_LOGGER)

    def test_script_logger_is_prefixed(self):
        """A logger named __main__ should still report through the package."""
        assert get_logger("__main__").name == "echo_server.__main__"

    def test_single_file_handler(self):
        """Repeated lookups should not stack handlers."""
        get_logger("echo_server.a")
        get_logger("echo_server.b")
        get_logger("echo_server.a")

        assert len(_file_handlers()) == 1
        assert get_logger("echo_server.a").handlers == []


class TestConfigureLogging:
    """Tests for redirecting the log file."""

    def test_writes_formatted_records(self, log_file):
        """Records from module loggers should reach the configured file."""
        get_logger("echo_server.session.handler").info("Session abc closed")
        for handler in _file_handlers():
            handler.flush()

        content = log_file.read_text()
        assert "| echo_server.session.handler | INFO | Session abc closed" in content

    def test_debug_traffic_is_recorded(self, log_file):
        """Per-line DEBUG records should be kept."""
        get_logger("echo_server.session.handler").debug("read 6 bytes")
        for handler in _file_handlers():
            handler.flush()

        assert "DEBUG | read 6 bytes" in log_file.read_text()

    def test_redirect_replaces_handler(self, log_file, tmp_path):
        """Configuring a new file should swap, not add, the handler."""
        other = tmp_path / "other.log"
        configure_logging(other)

        handlers = _file_handlers()
        assert len(handlers) == 1
        assert handlers[0].baseFilename == str(other)
