# File: url_counter/aggregator.py
"""url_counter.aggregator: shared accumulator of per-URL counts."""

from __future__ import annotations

import threading

from url_counter.pipeline.models import CountSummary

__all__ = ["Aggregator"]


class Aggregator:
    """Concurrency-safe running total of occurrences.

    One instance is created per run and handed to every processing task;
    all mutation goes through :meth:`add` and :meth:`drop`, both guarded by a
    lock so they may be called from any task or thread. The value returned by
    :meth:`read` is final only once the completion barrier has been passed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._succeeded = 0
        self._dropped = 0

    def add(self, n: int) -> int:
        """Atomically add *n* (>= 0) to the total and return the new total."""
        if n < 0:
            raise ValueError(f"count must be >= 0, got {n}")
        with self._lock:
            self._total += n
            self._succeeded += 1
            return self._total

    def drop(self) -> None:
        """Record a URL that contributed nothing because it failed."""
        with self._lock:
            self._dropped += 1

    def read(self) -> int:
        with self._lock:
            return self._total

    def summary(self) -> CountSummary:
        with self._lock:
            return CountSummary(self._total, self._succeeded, self._dropped)
