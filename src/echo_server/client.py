"""Client that sends lines to an echo server and prints what comes back.

This script:
1. Connects to the server
2. Sends each line read from stdin and waits for its echo
3. Writes the echoes to stdout
4. Sends the sentinel when stdin is exhausted so the server ends cleanly
"""

import argparse
import sys
from typing import Iterable, TextIO

from .config import CLIENT_HOST, DEFAULT_PORT, ENCODING, SENTINEL, port_argument
from .logging_config import ClientError, get_logger
from .net.contracts import ClientSocketOps
from .net.client_socket import TcpClientSocket
from .protocol import encode_line, is_sentinel, sentinel_pattern, strip_terminator

logger = get_logger(__name__)


class EchoClient:
    """Talks to an echo server over any ClientSocketOps implementation."""

    def __init__(self, sock: ClientSocketOps | None = None, sentinel: str = SENTINEL):
        self.sock = sock or TcpClientSocket()
        self.sentinel = sentinel
        self._sentinel_pattern = sentinel_pattern(sentinel)
        self.closed_by_server = False

    def connect(self, host: str, port: int) -> None:
        self.sock.connect(host, port)

    def send(self, text: str) -> str | None:
        """Send one line and return its echo.

        Returns:
            The echoed text without its separator, or None if the line was
            the sentinel or the server closed the connection.

        Raises:
            ClientError: If the text spans more than one line.
        """
        raw = encode_line(text)
        if b"\n" in strip_terminator(raw):
            raise ClientError("Cannot send multi-line text as one line")
        self.sock.send_line(raw)
        if is_sentinel(raw, self._sentinel_pattern):
            return None

        reply = self.sock.receive_line()
        if not reply:
            logger.warning("Server closed the connection before echoing")
            self.closed_by_server = True
            return None
        return reply.decode(ENCODING, errors="replace").rstrip("\r\n")

    def quit(self) -> None:
        """Send the sentinel and close the connection."""
        try:
            if not self.closed_by_server:
                self.sock.send_line(encode_line(self.sentinel))
        finally:
            self.sock.close()

    def run(self, lines: Iterable[str], out: TextIO) -> int:
        """Echo every input line through the server; returns lines echoed."""
        count = 0
        for line in lines:
            text = line.rstrip("\r\n")
            if is_sentinel(encode_line(text), self._sentinel_pattern):
                logger.info("Sentinel found in input, stopping")
                break
            echoed = self.send(text)
            if echoed is None:
                break
            out.write(echoed + "\n")
            out.flush()
            count += 1
        return count


def run_client(host: str, port: int) -> int:
    """Connect, pipe stdin through the server and return an exit code."""
    logger.info(f"Starting client for {host}:{port}")
    client = EchoClient()
    try:
        client.connect(host, port)
        try:
            count = client.run(sys.stdin, sys.stdout)
        finally:
            client.quit()
    except ClientError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    logger.info(f"Client finished after {count} lines")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Entry point for the client script."""
    parser = argparse.ArgumentParser(prog="echo-client", description="Echo server client")
    parser.add_argument(
        "host",
        nargs="?",
        default=CLIENT_HOST,
        help=f"Server host (default: {CLIENT_HOST})",
    )
    parser.add_argument(
        "port",
        nargs="?",
        type=port_argument,
        default=DEFAULT_PORT,
        help=f"Server port (default: {DEFAULT_PORT})",
    )

    args = parser.parse_args(argv)
    sys.exit(run_client(args.host, args.port))


if __name__ == "__main__":
    main()
