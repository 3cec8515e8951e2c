"""Socket endpoints and their capability contracts."""

from .client_socket import TcpClientSocket
from .contracts import ClientSocketOps, ConnectionOps, ServerSocketOps
from .server_socket import TcpServerSocket

__all__ = [
    "ClientSocketOps",
    "ConnectionOps",
    "ServerSocketOps",
    "TcpClientSocket",
    "TcpServerSocket",
]
