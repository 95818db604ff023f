"""
Synchronization primitives of the dispatch loop: the admission gate bounding
the number of active processing tasks and the completion barrier the
dispatcher joins on before reporting the total.

Waiting happens on the event loop. ``release()`` and ``done()`` may be called
from any thread: bookkeeping is lock-guarded and the wake-up of waiters is
handed to the owning loop with ``call_soon_threadsafe``.
"""
from __future__ import annotations

import asyncio
import threading
from typing import Callable, Optional


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _on_loop(loop: Optional[asyncio.AbstractEventLoop], callback: Callable[[], None]) -> None:
    """Run *callback* now if we are on *loop*, otherwise schedule it there."""
    if loop is None or _running_loop() is loop:
        callback()
    else:
        loop.call_soon_threadsafe(callback)


class AdmissionGate:
    """Counting semaphore with a fixed capacity of *capacity* tokens.

    No workers are created up front: a caller blocks in :meth:`acquire` while
    all tokens are held. ``held`` is always within ``[0, capacity]`` and
    ``peak`` records the largest value it ever reached.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._sem = asyncio.BoundedSemaphore(capacity)
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._held = 0
        self._peak = 0
        self.acquired = 0
        self.released = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def held(self) -> int:
        with self._lock:
            return self._held

    @property
    def peak(self) -> int:
        with self._lock:
            return self._peak

    def locked(self) -> bool:
        """True when every token is held and the next acquire() would block."""
        return self.held >= self._capacity

    async def acquire(self) -> None:
        self._loop = asyncio.get_running_loop()
        await self._sem.acquire()
        with self._lock:
            self._held += 1
            self.acquired += 1
            self._peak = max(self._peak, self._held)

    def release(self) -> None:
        with self._lock:
            if self._held == 0:
                raise RuntimeError("AdmissionGate.release() called without a held token")
            self._held -= 1
            self.released += 1
        _on_loop(self._loop, self._sem.release)

    async def __aenter__(self) -> AdmissionGate:
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()


class CompletionBarrier:
    """Wait-group: count pending work units and wait until none are left."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def pending(self) -> int:
        with self._lock:
            return self._pending

    def add(self, n: int = 1) -> None:
        """Register *n* more units of work. Must be called before launching them."""
        if n < 0:
            raise ValueError("use done() to retire work units")
        self._loop = _running_loop() or self._loop
        with self._lock:
            self._pending += n
            if self._pending:
                self._idle.clear()

    def done(self) -> None:
        with self._lock:
            if self._pending == 0:
                raise RuntimeError("CompletionBarrier.done() called more times than add()")
            self._pending -= 1
            finished = self._pending == 0
        if finished:
            _on_loop(self._loop, self._set_idle)

    def _set_idle(self) -> None:
        # an add() may have raced in before the loop got here
        with self._lock:
            if self._pending == 0:
                self._idle.set()

    async def wait(self) -> None:
        """Block until every registered unit of work has called done()."""
        self._loop = asyncio.get_running_loop()
        await self._idle.wait()


__all__ = ["AdmissionGate", "CompletionBarrier"]
