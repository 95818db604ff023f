# File: tests/conftest.py
from __future__ import annotations

import asyncio
import io
from collections.abc import AsyncIterator
from typing import Dict, List, Optional, Union

import pytest
from aiohttp import web

from url_counter.aggregator import Aggregator
from url_counter.errors import FetchError
from url_counter.pipeline.dispatcher import Dispatcher
from url_counter.pipeline.models import UrlCount

#: body served for every URL not listed explicitly: "Go" occurs 9 times
NINE_GO: bytes = b"<html>" + b"Go is fun. " * 9 + b"</html>"


class FakeFetcher:
    """
    In-memory stand-in for Fetcher.

    Each URL maps to a body or an exception instance. Tracks how many get()
    calls are in flight at once and the highest value seen.
    """

    def __init__(
        self,
        bodies: Optional[Dict[str, Union[bytes, Exception]]] = None,
        *,
        default: bytes = NINE_GO,
        delay: float = 0.0,
        events: Optional[list] = None,
    ) -> None:
        self.bodies = bodies or {}
        self.default = default
        self.delay = delay
        self.events = events if events is not None else []
        self.calls: List[str] = []
        self.active = 0
        self.peak = 0

    async def get(self, url: str) -> bytes:
        self.calls.append(url)
        self.active += 1
        self.peak = max(self.peak, self.active)
        self.events.append(("start", url))
        try:
            await asyncio.sleep(self.delay)
            body = self.bodies.get(url, self.default)
            if isinstance(body, Exception):
                raise body
            return body
        finally:
            self.active -= 1
            self.events.append(("end", url))


class RecordingSource(io.StringIO):
    """StringIO that logs every readline() into a shared event list."""

    def __init__(self, text: str, events: list) -> None:
        super().__init__(text)
        self.events = events

    def readline(self, *args) -> str:
        line = super().readline(*args)
        self.events.append(("read", line.rstrip("\r\n") if line else None))
        return line


class BrokenSource:
    """Yields the given lines, then fails like a broken pipe."""

    def __init__(self, lines: List[str]) -> None:
        self._lines = list(lines)

    def readline(self) -> str:
        if self._lines:
            return self._lines.pop(0)
        raise OSError(32, "Broken pipe")


@pytest.fixture()
def results() -> List[UrlCount]:
    return []


@pytest.fixture()
def make_dispatcher(results):
    """Factory building a Dispatcher over a FakeFetcher, collecting results."""

    def _make(fetcher: FakeFetcher, *, concurrency: int = 5, pattern: str = "Go", **kwargs) -> Dispatcher:
        return Dispatcher(
            fetcher,
            Aggregator(),
            pattern=pattern,
            concurrency=concurrency,
            on_result=results.append,
            **kwargs,
        )

    return _make


def fetch_error(url: str) -> FetchError:
    return FetchError(url, "connection refused")


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()
