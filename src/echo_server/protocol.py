"""Line framing and sentinel detection for the echo protocol.

This module is the single source of truth for how a line ends and how the
termination token is recognised. Used by both the server handler and the
client.
"""

import re
from typing import Pattern

from .config import ENCODING, SENTINEL

# A line ends in LF, optionally preceded by CR
LINE_TERMINATOR: Pattern[bytes] = re.compile(rb"\r?\n\Z")


def strip_terminator(raw: bytes) -> bytes:
    """Return the line content without its trailing line separator."""
    return LINE_TERMINATOR.sub(b"", raw, count=1)


def is_terminated(raw: bytes) -> bool:
    """Whether the raw line carries a line separator."""
    return LINE_TERMINATOR.search(raw) is not None


def sentinel_pattern(token: str = SENTINEL) -> Pattern[bytes]:
    """Compile the exact-match pattern for a termination token.

    Args:
        token: The reserved line that ends a session

    Returns:
        Pattern matching the token followed by an optional line separator
    """
    return re.compile(rb"\A" + re.escape(token.encode(ENCODING)) + rb"(?:\r?\n)?\Z")


SENTINEL_PATTERN = sentinel_pattern()


def is_sentinel(raw: bytes, pattern: Pattern[bytes] = SENTINEL_PATTERN) -> bool:
    """Detect whether a raw line is the termination token.

    Matching is exact and case-sensitive; surrounding whitespace other than
    the line separator makes the line ordinary text.
    """
    return pattern.match(raw) is not None


def encode_line(text: str) -> bytes:
    """Encode text as a single wire line, adding a separator if missing."""
    raw = text.encode(ENCODING)
    if not is_terminated(raw):
        raw += b"\n"
    return raw
