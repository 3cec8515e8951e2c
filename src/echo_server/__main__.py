"""Entry point for echo-server."""

import argparse
import sys

from .config import DEFAULT_HOST, DEFAULT_PORT, port_argument
from .logging_config import BindError, SessionIOError, get_logger
from .session import ConnectionHandler

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="echo-server",
        description="Accept one connection and echo each line back until 'quit'",
    )
    parser.add_argument(
        "port",
        nargs="?",
        type=port_argument,
        default=DEFAULT_PORT,
        help=f"Port to listen on (default: {DEFAULT_PORT})",
    )
    return parser


def run(port: int, host: str = DEFAULT_HOST, handler: ConnectionHandler | None = None) -> int:
    """Serve a single session and return the process exit code."""
    handler = handler or ConnectionHandler()
    try:
        handler.open(port, host)
    except BindError as e:
        logger.error(f"Startup aborted: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Listening on port {handler.port}")
    try:
        with handler:
            session = handler.serve()
    except SessionIOError as e:
        logger.error(f"Session ended with I/O failure: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Session from {session.peer} closed ({session.close_reason.value})")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Run the echo server."""
    args = build_parser().parse_args(argv)
    sys.exit(run(args.port))


if __name__ == "__main__":
    main()
