"""Connection handling: accept one peer and echo its lines back."""

from pydantic import ValidationError

from ..config import DEFAULT_HOST, DEFAULT_PORT, SENTINEL, ServerConfig
from ..logging_config import (
    BindError,
    EchoServerError,
    SessionClosedError,
    SessionIOError,
    get_logger,
)
from ..net.contracts import ServerSocketOps
from ..net.server_socket import TcpServerSocket
from ..protocol import is_sentinel, sentinel_pattern
from .models import CloseReason, Line, Session

logger = get_logger(__name__)

# A peer that closes without reading its echoes ends the session like EOF
PEER_HANGUP_ERRORS = (BrokenPipeError, ConnectionResetError)


class ConnectionHandler:
    """Serves exactly one connection per lifetime.

    The handler binds a listening endpoint, accepts a single peer and runs a
    blocking read/echo loop until the peer sends the sentinel line or closes
    its side. Every I/O failure is terminal for the session.
    """

    def __init__(
        self,
        server_socket: ServerSocketOps | None = None,
        sentinel: str = SENTINEL,
    ):
        self.server_socket = server_socket or TcpServerSocket()
        self.sentinel = sentinel
        self._sentinel_pattern = sentinel_pattern(sentinel)
        self._session: Session | None = None

    @property
    def port(self) -> int:
        """Port the listening endpoint is bound to."""
        return self.server_socket.port

    @property
    def session(self) -> Session | None:
        """The session accepted by this handler, if any."""
        return self._session

    def open(self, port: int = DEFAULT_PORT, host: str = DEFAULT_HOST) -> None:
        """Bind the listening endpoint.

        Raises:
            BindError: If the port is invalid, unavailable or not permitted.
        """
        try:
            config = ServerConfig(host=host, port=port)
        except ValidationError as e:
            logger.error(f"Invalid listening endpoint {host}:{port}: {e}")
            raise BindError(f"Invalid port: {port}") from e

        self.server_socket.bind(config.host, config.port)
        logger.info(f"Handler open on {config.host}:{self.port}")

    def accept_one(self) -> Session:
        """Block until a peer connects and wrap it in a Session."""
        if self._session is not None:
            raise EchoServerError("A connection has already been accepted")

        connection, address = self.server_socket.accept()
        session = Session.from_connection(connection, address)
        self._session = session
        logger.info(f"Session {session.id} accepted from {session.peer}")
        return session

    def read_line(self, session: Session) -> Line | None:
        """Read the next line, or None once the peer has closed the stream."""
        self._require_open(session, "read from")
        try:
            raw = session.reader.readline()
        except PEER_HANGUP_ERRORS as e:
            logger.info(f"Session {session.id}: peer hung up while reading: {e}")
            self.close(session, CloseReason.END_OF_STREAM)
            return None
        except (OSError, ValueError) as e:
            logger.error(f"Session {session.id}: read failed: {e}")
            self.close(session, CloseReason.IO_ERROR)
            raise SessionIOError(f"Read failed on session {session.id}: {e}") from e

        if not raw:
            logger.debug(f"Session {session.id}: end of stream")
            return None

        session.lines_read += 1
        logger.debug(f"Session {session.id}: read {len(raw)} bytes")
        return Line(raw=raw)

    def is_sentinel(self, line: Line) -> bool:
        """Whether the line is this handler's termination token."""
        return is_sentinel(line.raw, self._sentinel_pattern)

    def echo(self, session: Session, line: Line) -> bool:
        """Write the line back to the peer.

        Returns:
            True if the line was echoed. False if it was the sentinel, or if
            the peer had already hung up; in that case the session is closed
            as end of stream.
        """
        self._require_open(session, "write to")
        if self.is_sentinel(line):
            logger.debug(f"Session {session.id}: sentinel received")
            return False

        try:
            session.connection.sendall(line.raw)
        except PEER_HANGUP_ERRORS as e:
            logger.info(f"Session {session.id}: peer hung up before echo: {e}")
            self.close(session, CloseReason.END_OF_STREAM)
            return False
        except OSError as e:
            logger.error(f"Session {session.id}: write failed: {e}")
            self.close(session, CloseReason.IO_ERROR)
            raise SessionIOError(f"Write failed on session {session.id}: {e}") from e

        session.lines_echoed += 1
        return True

    def close(self, session: Session, reason: CloseReason = CloseReason.SHUTDOWN) -> None:
        """Release the session's stream. Later calls are ignored."""
        if not session.is_open:
            logger.debug(f"Session {session.id} already closed ({session.close_reason})")
            return

        reader, connection = session.reader, session.connection
        try:
            if reader is not None:
                reader.close()
        except OSError as e:
            logger.warning(f"Session {session.id}: error closing reader: {e}")
        finally:
            try:
                if connection is not None:
                    connection.close()
            except OSError as e:
                logger.warning(f"Session {session.id}: error closing connection: {e}")
            finally:
                session.mark_closed(reason)

        logger.info(
            f"Session {session.id} closed ({reason.value}): "
            f"{session.lines_read} read, {session.lines_echoed} echoed"
        )

    def serve(self) -> Session:
        """Accept one session and echo lines until it ends.

        Raises:
            SessionIOError: If the stream failed; the session is closed.
        """
        session = self.accept_one()
        try:
            while True:
                line = self.read_line(session)
                if line is None:
                    self.close(session, CloseReason.END_OF_STREAM)
                    break
                if not self.echo(session, line):
                    self.close(session, CloseReason.SENTINEL)
                    break
        finally:
            if session.is_open:
                self.close(session, CloseReason.SHUTDOWN)
        return session

    def shutdown(self) -> None:
        """Close any open session and the listening endpoint."""
        if self._session is not None and self._session.is_open:
            self.close(self._session, CloseReason.SHUTDOWN)
        self.server_socket.close()

    def __enter__(self) -> "ConnectionHandler":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def _require_open(self, session: Session, action: str) -> None:
        if not session.is_open:
            raise SessionClosedError(f"Cannot {action} closed session {session.id}")
