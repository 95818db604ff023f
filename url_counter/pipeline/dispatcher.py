# === FILE: url_counter/pipeline/dispatcher.py ===
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Optional, Protocol, Set

from url_counter.errors import FetchError, InputReadError, InvalidURLError
from url_counter.logger import get_logger
from url_counter.pipeline.counter import count_occurrences
from url_counter.pipeline.models import CountSummary, UrlCount
from url_counter.pipeline.sync import AdmissionGate, CompletionBarrier
from url_counter.utils import parse_url, trim_line

if TYPE_CHECKING:
    from url_counter.aggregator import Aggregator

__all__ = ("Dispatcher", "LineSource", "BodyFetcher", "ResultCallback")


class LineSource(Protocol):
    """Anything with a blocking ``readline()`` returning ``""`` at end of input."""

    def readline(self) -> str: ...


class BodyFetcher(Protocol):
    async def get(self, url: str) -> bytes: ...


ResultCallback = Callable[[UrlCount], None]


class Dispatcher:
    """Reads URLs one at a time and launches a bounded number of counting tasks.

    A token is taken from the admission gate *before* each line is read, so
    once ``concurrency`` tasks are active the next read waits for one of them
    to finish. Tasks are created on demand; with fewer URLs than tokens
    fewer tasks ever exist.
    """

    def __init__(
        self,
        fetcher: BodyFetcher,
        aggregator: Aggregator,
        *,
        pattern: str | bytes = "Go",
        concurrency: int = 5,
        on_result: Optional[ResultCallback] = None,
        report_failures: bool = False,
    ) -> None:
        self.fetcher = fetcher
        self.aggregator = aggregator
        self.pattern = pattern.encode("utf-8") if isinstance(pattern, str) else pattern
        if not self.pattern:
            raise ValueError("pattern must not be empty")
        self.gate = AdmissionGate(concurrency)
        self.barrier = CompletionBarrier()
        self.on_result = on_result
        self.launched = 0
        self._drop_level = logging.WARNING if report_failures else logging.DEBUG
        self._tasks: Set[asyncio.Task[None]] = set()
        self.logger = get_logger("dispatcher")

    async def run(self, source: LineSource) -> CountSummary:
        """Dispatch every line of *source*, wait for all tasks, return the summary.

        Raises InputReadError if *source* fails; tasks already launched are
        left to the caller's event loop.
        """
        self.logger.info("Dispatching with concurrency %d", self.gate.capacity)
        while True:
            await self.gate.acquire()
            try:
                line = await self._read_line(source)
            except BaseException:
                self.gate.release()
                raise
            if line is None:
                # end of input: no task will use this token
                self.gate.release()
                break

            self.barrier.add()
            self.launched += 1
            task = asyncio.create_task(self._process(trim_line(line)))
            self._tasks.add(task)
            task.add_done_callback(self._forget)

        await self.barrier.wait()
        summary = self.aggregator.summary()
        self.logger.info(
            "Done: %d URLs launched, %d counted, %d dropped, peak concurrency %d",
            self.launched, summary.succeeded, summary.dropped, self.gate.peak,
        )
        return summary

    async def _read_line(self, source: LineSource) -> Optional[str]:
        try:
            line = await asyncio.to_thread(source.readline)
        except (OSError, ValueError) as exc:
            raise InputReadError(f"cannot read URL input: {exc}") from exc
        return line or None

    async def _process(self, raw: str) -> None:
        try:
            try:
                url = parse_url(raw)
            except InvalidURLError as exc:
                self._drop(exc)
                return
            try:
                body = await self.fetcher.get(url)
            except FetchError as exc:
                self._drop(exc)
                return

            n = count_occurrences(body, self.pattern)
            try:
                if self.on_result is not None:
                    self.on_result(UrlCount(url, n))
            except Exception:
                # not counted: the URL was never reported
                self.aggregator.drop()
                raise
            self.aggregator.add(n)
        finally:
            self.gate.release()
            self.barrier.done()

    def _drop(self, exc: Exception) -> None:
        self.aggregator.drop()
        self.logger.log(self._drop_level, "Dropped: %s", exc)

    def _forget(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.logger.error("Processing task failed: %r", exc)
