import asyncio
import threading

import pytest

from url_counter.pipeline.sync import AdmissionGate, CompletionBarrier


@pytest.mark.asyncio()
async def test_gate_blocks_when_all_tokens_held():
    gate = AdmissionGate(2)
    await gate.acquire()
    await gate.acquire()
    assert gate.locked()

    waiter = asyncio.create_task(gate.acquire())
    await asyncio.sleep(0.01)
    assert not waiter.done()
    assert gate.held == 2

    gate.release()
    await asyncio.wait_for(waiter, timeout=1)
    assert gate.held == 2
    assert gate.peak == 2


@pytest.mark.asyncio()
async def test_gate_context_manager_releases_on_error():
    gate = AdmissionGate(1)
    with pytest.raises(KeyError):
        async with gate:
            assert gate.held == 1
            raise KeyError("boom")
    assert gate.held == 0
    assert gate.acquired == gate.released == 1


def test_gate_release_without_acquire():
    gate = AdmissionGate(3)
    with pytest.raises(RuntimeError):
        gate.release()


@pytest.mark.parametrize("capacity", [0, -1])
def test_gate_rejects_bad_capacity(capacity):
    with pytest.raises(ValueError):
        AdmissionGate(capacity)


@pytest.mark.asyncio()
async def test_barrier_without_work_does_not_block():
    barrier = CompletionBarrier()
    await asyncio.wait_for(barrier.wait(), timeout=0.1)


@pytest.mark.asyncio()
async def test_barrier_waits_for_every_done():
    barrier = CompletionBarrier()
    barrier.add(2)

    waiter = asyncio.create_task(barrier.wait())
    barrier.done()
    await asyncio.sleep(0.01)
    assert not waiter.done()
    assert barrier.pending == 1

    barrier.done()
    await asyncio.wait_for(waiter, timeout=1)
    assert barrier.pending == 0


def test_barrier_rejects_extra_done():
    barrier = CompletionBarrier()
    barrier.add()
    barrier.done()
    with pytest.raises(RuntimeError):
        barrier.done()


def test_barrier_rejects_negative_add():
    with pytest.raises(ValueError):
        CompletionBarrier().add(-1)


@pytest.mark.asyncio()
async def test_gate_release_from_another_thread_wakes_waiter():
    gate = AdmissionGate(1)
    await gate.acquire()
    waiter = asyncio.create_task(gate.acquire())
    await asyncio.sleep(0.01)
    assert not waiter.done()

    worker = threading.Thread(target=gate.release)
    worker.start()
    worker.join()

    await asyncio.wait_for(waiter, timeout=1)
    assert gate.held == 1
    assert gate.released == 1
    gate.release()


@pytest.mark.asyncio()
async def test_gate_parallel_thread_releases_keep_count():
    gate = AdmissionGate(50)
    for _ in range(50):
        await gate.acquire()
    assert gate.locked()

    workers = [threading.Thread(target=gate.release) for _ in range(50)]
    for w in workers:
        w.start()
    for w in workers:
        w.join()

    assert gate.held == 0
    assert gate.released == 50
    for _ in range(50):
        await asyncio.wait_for(gate.acquire(), timeout=1)
    assert gate.held == 50
    assert gate.peak == 50


@pytest.mark.asyncio()
async def test_barrier_done_from_another_thread_wakes_waiter():
    barrier = CompletionBarrier()
    barrier.add()
    waiter = asyncio.create_task(barrier.wait())
    await asyncio.sleep(0.01)
    assert not waiter.done()

    worker = threading.Thread(target=barrier.done)
    worker.start()
    worker.join()

    await asyncio.wait_for(waiter, timeout=1)
    assert barrier.pending == 0
