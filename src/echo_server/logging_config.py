"""Logging configuration for echo-server.

All module loggers live under the ``echo_server`` package logger, which owns
a single file handler writing to ~/.echo-server/echo-server.log. Session
lifecycle events land there at INFO and per-line traffic at DEBUG.
"""

import logging
from pathlib import Path

# Log file location
LOG_DIR = Path.home() / ".echo-server"
LOG_FILE = LOG_DIR / "echo-server.log"

PACKAGE_LOGGER = "echo_server"
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
_FILE_HANDLER_NAME = "echo-server-file"


def configure_logging(log_file: Path | None = None, level: int = logging.DEBUG) -> logging.Logger:
    """Attach the log file handler to the package logger.

    Args:
        log_file: Where to write. When omitted, an existing handler is kept
            and LOG_FILE is used only if none is installed yet.
        level: Threshold for the package logger and its handler

    Returns:
        The package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    installed = [h for h in package_logger.handlers if h.get_name() == _FILE_HANDLER_NAME]
    if installed and log_file is None:
        return package_logger

    for handler in installed:
        package_logger.removeHandler(handler)
        handler.close()

    path = Path(log_file) if log_file is not None else LOG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(path)
    file_handler.set_name(_FILE_HANDLER_NAME)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    package_logger.addHandler(file_handler)
    package_logger.setLevel(level)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger that reports through the package log file.

    Args:
        name: Logger name (typically __name__ of the calling module)
    """
    configure_logging()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


class EchoServerError(Exception):
    """Base exception for echo-server errors."""

    pass


class BindError(EchoServerError):
    """The listening endpoint could not be bound."""

    pass


class SessionIOError(EchoServerError):
    """A read or write on a session stream failed."""

    pass


class SessionClosedError(SessionIOError):
    """I/O was attempted on a session that is already closed."""

    pass


class ClientError(EchoServerError):
    """Error on the client side of a connection."""

    pass
