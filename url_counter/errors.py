"""Exception hierarchy shared by the pipeline, the engine and the CLI."""
from __future__ import annotations


class UrlCounterError(Exception):
    """Base class for all errors raised by url_counter."""


class InvalidURLError(UrlCounterError, ValueError):
    """An input line is not an absolute URL."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"invalid URL {line!r}: {reason}")
        self.line = line
        self.reason = reason


class FetchError(UrlCounterError):
    """GET request failed: connection error, timeout or unreadable body."""

    def __init__(self, url: str, cause: BaseException | str) -> None:
        super().__init__(f"fetch failed for {url}: {cause}")
        self.url = url


class InputReadError(UrlCounterError):
    """The URL source itself is broken. Always fatal for the run."""


__all__ = ["UrlCounterError", "InvalidURLError", "FetchError", "InputReadError"]
