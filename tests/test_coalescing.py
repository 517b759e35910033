import pytest

from weather_aggregator.aggregator import CoalescingTable, ForecastBundle, TaskResult


@pytest.mark.asyncio
async def test_first_caller_creates_entry_and_later_callers_join():
    table = CoalescingTable()

    first, created = table.join_or_create("k")
    second, joined_created = table.join_or_create("k")

    assert created is True
    assert joined_created is False
    assert len(table) == 1
    assert first is not second


@pytest.mark.asyncio
async def test_notify_delivers_same_result_and_removes_entry():
    table = CoalescingTable()
    waiters = [table.join_or_create("k")[0] for _ in range(3)]
    result = TaskResult(bundle=ForecastBundle(services={"A": {}}))

    delivered = table.notify("k", result)

    assert delivered == 3
    assert "k" not in table
    assert all(w.result() is result for w in waiters)


@pytest.mark.asyncio
async def test_notify_skips_abandoned_waiters():
    table = CoalescingTable()
    gone, _ = table.join_or_create("k")
    alive, _ = table.join_or_create("k")
    gone.cancel()

    delivered = table.notify("k", TaskResult(error=RuntimeError("x")))

    assert delivered == 1
    assert isinstance(alive.result().error, RuntimeError)


@pytest.mark.asyncio
async def test_notify_unknown_key_is_noop():
    table = CoalescingTable()
    assert table.notify("missing", TaskResult()) == 0


@pytest.mark.asyncio
async def test_keys_are_independent():
    table = CoalescingTable()
    table.join_or_create("a")
    _, created = table.join_or_create("b")

    assert created is True
    assert len(table) == 2
    table.notify("a", TaskResult())
    assert "a" not in table
    assert "b" in table
