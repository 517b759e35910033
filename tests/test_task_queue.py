import asyncio

import pytest

from weather_aggregator.aggregator import FetchTask, TaskQueue


def make_task(key: str) -> FetchTask:
    return FetchTask(key=key, lat=0.0, lon=0.0)


@pytest.mark.asyncio
async def test_put_nowait_rejects_when_full():
    queue = TaskQueue(maxsize=2)

    assert queue.put_nowait(make_task("a"))
    assert queue.put_nowait(make_task("b"))
    assert not queue.put_nowait(make_task("c"))

    stats = queue.get_stats()
    assert stats["queue_depth"] == 2
    assert stats["enqueued"] == 2
    assert stats["rejected"] == 1
    assert queue.get_pressure() == 1.0


@pytest.mark.asyncio
async def test_get_is_fifo():
    queue = TaskQueue(maxsize=5)
    for key in ("a", "b", "c"):
        queue.put_nowait(make_task(key))

    assert [(await queue.get()).key for _ in range(3)] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_close_drains_remaining_then_returns_none():
    queue = TaskQueue(maxsize=5)
    queue.put_nowait(make_task("a"))
    queue.put_nowait(make_task("b"))
    queue.close()

    assert not queue.put_nowait(make_task("c"))
    assert (await queue.get()).key == "a"
    assert (await queue.get()).key == "b"
    assert await queue.get() is None


@pytest.mark.asyncio
async def test_close_wakes_blocked_getter():
    queue = TaskQueue(maxsize=1)
    getter = asyncio.create_task(queue.get())
    await asyncio.sleep(0.01)
    assert not getter.done()

    queue.close()
    assert await asyncio.wait_for(getter, timeout=1) is None


@pytest.mark.asyncio
async def test_blocked_getter_receives_new_task():
    queue = TaskQueue(maxsize=1)
    getter = asyncio.create_task(queue.get())
    await asyncio.sleep(0.01)

    queue.put_nowait(make_task("late"))
    task = await asyncio.wait_for(getter, timeout=1)
    assert task.key == "late"
    assert queue.stats["dequeued"] == 1
