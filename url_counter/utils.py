"""url_counter.utils: helpers for turning raw input lines into URLs."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import urlsplit

from url_counter.errors import InvalidURLError

__all__: Sequence[str] = ("trim_line", "parse_url")

_LINE_ENDINGS = "\r\n"


def trim_line(line: str) -> str:
    """Strip trailing CR/LF characters only; other whitespace is kept."""
    return line.rstrip(_LINE_ENDINGS)


def parse_url(line: str) -> str:
    """Validate *line* as an absolute URL and return it unchanged.

    The line must have a scheme and a host, contain no whitespace and carry a
    valid port if one is given. Raises :class:`InvalidURLError` otherwise.
    """
    if not line:
        raise InvalidURLError(line, "empty line")
    if any(ch.isspace() for ch in line):
        raise InvalidURLError(line, "contains whitespace")
    try:
        parts = urlsplit(line)
        parts.port  # raises ValueError on a malformed port
    except ValueError as exc:
        raise InvalidURLError(line, str(exc)) from exc
    if not parts.scheme:
        raise InvalidURLError(line, "missing scheme")
    if not parts.hostname:
        raise InvalidURLError(line, "missing host")
    return line
