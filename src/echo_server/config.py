"""Configuration constants and validation."""

import argparse

from pydantic import BaseModel, Field, ValidationError

# Listening endpoint
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
LISTEN_BACKLOG = 1  # Only one connection is ever serviced

# Client side
CLIENT_HOST = "127.0.0.1"

# Line protocol
SENTINEL = "quit"
ENCODING = "utf-8"


class ServerConfig(BaseModel):
    """Validated listening endpoint settings."""

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)


def port_argument(value: str) -> int:
    """argparse type for a TCP port."""
    try:
        return ServerConfig(port=value).port
    except ValidationError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
