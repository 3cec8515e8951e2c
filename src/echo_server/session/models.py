"""Session data models."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, BinaryIO

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..config import ENCODING
from ..protocol import is_terminated, strip_terminator


class SessionState(str, Enum):
    """Lifecycle states of an accepted connection."""

    OPEN = "open"
    CLOSED = "closed"


class CloseReason(str, Enum):
    """Why a session was closed."""

    SENTINEL = "sentinel"  # Peer sent the termination token
    END_OF_STREAM = "end_of_stream"  # Peer closed its side
    IO_ERROR = "io_error"  # Read or write failed
    SHUTDOWN = "shutdown"  # Server closed it while shutting down


class Line(BaseModel):
    """One line of text as it travelled over the wire."""

    model_config = ConfigDict(frozen=True)

    raw: bytes

    @property
    def text(self) -> str:
        """Decoded content without the line separator."""
        return strip_terminator(self.raw).decode(ENCODING, errors="replace")

    @property
    def terminated(self) -> bool:
        return is_terminated(self.raw)


def _new_session_id() -> str:
    return uuid.uuid4().hex[:8]


class Session(BaseModel):
    """An accepted connection with its stream and bookkeeping."""

    id: str = Field(default_factory=_new_session_id)
    peer_host: str = ""
    peer_port: int = 0
    state: SessionState = SessionState.OPEN
    close_reason: CloseReason | None = None
    lines_read: int = 0
    lines_echoed: int = 0
    created_at: datetime = Field(default_factory=datetime.now)
    closed_at: datetime | None = None

    _connection: Any = PrivateAttr(default=None)
    _reader: BinaryIO | None = PrivateAttr(default=None)

    @classmethod
    def from_connection(cls, connection: Any, address: Any) -> "Session":
        """Wrap a freshly accepted connection."""
        host, port = _split_address(address)
        session = cls(peer_host=host, peer_port=port)
        session._connection = connection
        session._reader = connection.makefile("rb")
        return session

    @property
    def is_open(self) -> bool:
        """Liveness flag: whether the stream may still be used."""
        return self.state == SessionState.OPEN

    @property
    def peer(self) -> str:
        """Short display form of the peer address."""
        return f"{self.peer_host}:{self.peer_port}"

    @property
    def connection(self) -> Any:
        return self._connection

    @property
    def reader(self) -> BinaryIO | None:
        return self._reader

    def mark_closed(self, reason: CloseReason) -> None:
        """Record the close and drop references to the stream."""
        self.state = SessionState.CLOSED
        self.close_reason = reason
        self.closed_at = datetime.now()
        self._connection = None
        self._reader = None


def _split_address(address: Any) -> tuple[str, int]:
    """Extract host and port from a socket address of any family."""
    if isinstance(address, (tuple, list)) and len(address) >= 2:
        return str(address[0]), int(address[1])
    return str(address or ""), 0
