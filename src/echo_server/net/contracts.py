"""Capability contracts for the two socket roles.

The server side and the client side get separate protocols, so an
implementation of one role never has to provide operations only the other
role can support. Test doubles satisfy these structurally.
"""

from typing import Any, BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class ConnectionOps(Protocol):
    """An accepted, connected byte stream."""

    def makefile(self, mode: str = "r") -> BinaryIO: ...

    def sendall(self, data: bytes) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class ServerSocketOps(Protocol):
    """Operations a listening endpoint must support."""

    def bind(self, host: str, port: int) -> None: ...

    def accept(self) -> tuple[ConnectionOps, Any]: ...

    def close(self) -> None: ...

    @property
    def port(self) -> int: ...


@runtime_checkable
class ClientSocketOps(Protocol):
    """Operations a connecting endpoint must support."""

    def connect(self, host: str, port: int) -> None: ...

    def send_line(self, data: bytes) -> None: ...

    def receive_line(self) -> bytes: ...

    def close(self) -> None: ...
