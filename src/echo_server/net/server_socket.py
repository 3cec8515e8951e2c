"""Listening TCP socket for the echo server."""

import socket
from typing import Any

from ..config import LISTEN_BACKLOG
from ..logging_config import BindError, SessionIOError, get_logger

logger = get_logger(__name__)


class TcpServerSocket:
    """Server-side endpoint: bind, accept and close a stdlib TCP socket."""

    def __init__(self, backlog: int = LISTEN_BACKLOG):
        self.backlog = backlog
        self._sock: socket.socket | None = None

    @property
    def is_bound(self) -> bool:
        return self._sock is not None

    @property
    def port(self) -> int:
        """Port actually bound (resolves an ephemeral port 0)."""
        if self._sock is None:
            return 0
        return self._sock.getsockname()[1]

    def bind(self, host: str, port: int) -> None:
        """Bind and start listening on host:port."""
        if self._sock is not None:
            raise BindError(f"Already bound to port {self.port}")

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind((host, port))
            sock.listen(self.backlog)
        except OSError as e:
            sock.close()
            logger.error(f"Failed to bind {host}:{port}: {e}")
            raise BindError(f"Cannot bind {host}:{port}: {e}") from e

        self._sock = sock
        logger.info(f"Listening on {host}:{self.port}")

    def accept(self) -> tuple[socket.socket, Any]:
        """Block until a peer connects."""
        if self._sock is None:
            raise BindError("Socket is not bound")
        try:
            connection, address = self._sock.accept()
        except OSError as e:
            logger.error(f"Accept failed: {e}")
            raise SessionIOError(f"Accept failed: {e}") from e
        logger.debug(f"Accepted connection from {address}")
        return connection, address

    def close(self) -> None:
        """Stop listening. Safe to call when not bound."""
        if self._sock is None:
            return
        try:
            self._sock.close()
            logger.info("Listening socket closed")
        except OSError as e:
            logger.warning(f"Error closing listening socket: {e}")
        finally:
            self._sock = None
