"""Single-connection line echo server."""

__version__ = "0.1.0"
