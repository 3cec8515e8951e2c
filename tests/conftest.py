"""Shared fixtures: recording doubles for the server capability contract."""

import io
import socket
import threading

import pytest

from echo_server.logging_config import BindError


class FailingReader(io.BytesIO):
    """Reader that raises the configured errors on readline or close."""

    def __init__(self, data: bytes, read_error=None, close_error=None):
        super().__init__(data)
        self.read_error = read_error
        self.close_error = close_error

    def readline(self, size=-1):
        if self.read_error is not None:
            raise self.read_error
        return super().readline(size)

    def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        super().close()


class RecordingConnection:
    """Accepted stream double that records every operation invoked."""

    def __init__(
        self,
        incoming: bytes = b"",
        read_error: OSError | None = None,
        write_error: OSError | None = None,
        reader_close_error: OSError | None = None,
    ):
        self.incoming = incoming
        self.read_error = read_error
        self.write_error = write_error
        self.reader_close_error = reader_close_error
        self.calls: list[str] = []
        self.sent: list[bytes] = []
        self.closed = False

    def makefile(self, mode: str = "r"):
        self.calls.append("makefile")
        return FailingReader(self.incoming, self.read_error, self.reader_close_error)

    def sendall(self, data: bytes) -> None:
        self.calls.append("sendall")
        if self.write_error is not None:
            raise self.write_error
        self.sent.append(data)

    def close(self) -> None:
        self.calls.append("close")
        self.closed = True


class RecordingServerSocket:
    """Listening endpoint double satisfying ServerSocketOps."""

    def __init__(self, connection: RecordingConnection | None = None, fail_bind: bool = False):
        self.connection = connection or RecordingConnection()
        self.fail_bind = fail_bind
        self.calls: list[str] = []
        self.bound_to: tuple[str, int] | None = None

    @property
    def port(self) -> int:
        return self.bound_to[1] if self.bound_to else 0

    def bind(self, host: str, port: int) -> None:
        self.calls.append("bind")
        if self.fail_bind:
            raise BindError(f"Cannot bind {host}:{port}: Address already in use")
        self.bound_to = (host, port or 50000)

    def accept(self):
        self.calls.append("accept")
        return self.connection, ("127.0.0.1", 54321)

    def close(self) -> None:
        self.calls.append("close")


@pytest.fixture
def make_server():
    """Factory for a recording server socket fed with the given bytes."""

    def _make(incoming: bytes = b"", **kwargs) -> RecordingServerSocket:
        fail_bind = kwargs.pop("fail_bind", False)
        return RecordingServerSocket(RecordingConnection(incoming, **kwargs), fail_bind=fail_bind)

    return _make


@pytest.fixture
def occupied_port():
    """A loopback port held by another listening socket."""
    holder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    holder.bind(("127.0.0.1", 0))
    holder.listen(1)
    yield holder.getsockname()[1]
    holder.close()


class ServeThread(threading.Thread):
    """Runs handler.serve() in the background and keeps its outcome."""

    def __init__(self, handler):
        super().__init__(daemon=True)
        self.handler = handler
        self.session = None
        self.error = None

    def run(self) -> None:
        try:
            self.session = self.handler.serve()
        except Exception as e:
            self.error = e


@pytest.fixture
def serve_in_background():
    """Start handler.serve() on a thread; joins it at teardown."""
    threads: list[ServeThread] = []

    def _start(handler) -> ServeThread:
        thread = ServeThread(handler)
        thread.start()
        threads.append(thread)
        return thread

    yield _start
    for thread in threads:
        thread.join(timeout=5)
