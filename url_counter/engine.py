# File: url_counter/engine.py
"""url_counter.engine: wires the Fetcher, Aggregator and Dispatcher for one run."""

from __future__ import annotations

from typing import Optional

from url_counter.aggregator import Aggregator
from url_counter.config import CounterConfig
from url_counter.pipeline.dispatcher import Dispatcher, LineSource, ResultCallback
from url_counter.pipeline.fetcher import Fetcher
from url_counter.pipeline.models import CountSummary

__all__ = ["start_count"]


async def start_count(
    cfg: CounterConfig,
    source: LineSource,
    on_result: Optional[ResultCallback] = None,
) -> CountSummary:
    """
    Count ``cfg.pattern`` in every URL read from *source*.

    Parameters
    ----------
    cfg : CounterConfig
        Run configuration.
    source : LineSource
        Text stream with one URL per line.
    on_result : callable, optional
        Called once with a UrlCount for every URL that was fetched and counted.

    Returns
    -------
    CountSummary
        Final total, read after every processing task has finished.
    """
    aggregator = Aggregator()
    async with Fetcher(cfg) as fetcher:
        dispatcher = Dispatcher(
            fetcher,
            aggregator,
            pattern=cfg.pattern,
            concurrency=cfg.concurrency,
            on_result=on_result,
            report_failures=cfg.report_failures,
        )
        return await dispatcher.run(source)
