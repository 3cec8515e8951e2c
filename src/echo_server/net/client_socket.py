"""Connecting TCP socket for talking to an echo server."""

import socket
from typing import BinaryIO

from ..logging_config import ClientError, get_logger

logger = get_logger(__name__)


class TcpClientSocket:
    """Client-side endpoint: connect, send and receive whole lines."""

    def __init__(self):
        self._sock: socket.socket | None = None
        self._reader: BinaryIO | None = None

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    def connect(self, host: str, port: int) -> None:
        """Open a connection to host:port."""
        if self._sock is not None:
            raise ClientError("Already connected")
        try:
            sock = socket.create_connection((host, port))
        except OSError as e:
            logger.error(f"Failed to connect to {host}:{port}: {e}")
            raise ClientError(f"Cannot connect to {host}:{port}: {e}") from e

        self._sock = sock
        self._reader = sock.makefile("rb")
        logger.info(f"Connected to {host}:{port}")

    def send_line(self, data: bytes) -> None:
        """Send one already-framed line."""
        if self._sock is None:
            raise ClientError("Not connected")
        try:
            self._sock.sendall(data)
            logger.debug(f"Sent {len(data)} bytes")
        except OSError as e:
            logger.error(f"Send failed: {e}")
            raise ClientError(f"Send failed: {e}") from e

    def receive_line(self) -> bytes:
        """Read one line; returns b"" once the server has closed."""
        if self._reader is None:
            raise ClientError("Not connected")
        try:
            data = self._reader.readline()
        except OSError as e:
            logger.error(f"Receive failed: {e}")
            raise ClientError(f"Receive failed: {e}") from e
        logger.debug(f"Received {len(data)} bytes")
        return data

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._sock is None:
            return
        try:
            if self._reader is not None:
                self._reader.close()
            self._sock.close()
            logger.info("Connection closed")
        except OSError as e:
            logger.warning(f"Error closing connection: {e}")
        finally:
            self._sock = None
            self._reader = None
