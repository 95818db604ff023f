# url_counter/pipeline/fetcher.py
"""
Fetcher module: a single GET per URL over a pooled aiohttp session.
No retries: one failed attempt is final for that URL.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector

from url_counter.config import CounterConfig
from url_counter.errors import FetchError


class Fetcher:
    """Downloads response bodies as raw bytes.

    Compression is disabled (``Accept-Encoding: identity`` and no automatic
    decompression), so the counted bytes are the bytes on the wire. The
    connection pool is capped at ``config.concurrency`` connections and idle
    connections are closed after ``config.idle_timeout`` seconds.
    """

    def __init__(self, config: CounterConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            connector = TCPConnector(
                limit=self.config.concurrency,
                keepalive_timeout=self.config.idle_timeout,
            )
            self.session = ClientSession(
                connector=connector,
                timeout=ClientTimeout(total=self.config.timeout),
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept-Encoding": "identity",
                },
                auto_decompress=False,
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def get(self, url: str) -> bytes:
        """
        GET *url* and return the whole body.

        Any HTTP status counts as a successful fetch. Raises FetchError on
        connection errors, timeouts and body read failures.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url) as resp:
                return await resp.read()
        except asyncio.TimeoutError as exc:
            raise FetchError(url, "timed out") from exc
        except (ClientError, ValueError) as exc:
            raise FetchError(url, exc) from exc


__all__ = ["Fetcher"]
