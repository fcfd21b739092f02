"""Tests for the settle-once primitive."""

import asyncio

import pytest

from restree.settlement import Settlement, callback_adapter, future_adapter


def test_first_settle_wins():
    settlement = Settlement()
    seen = []
    settlement.subscribe(callback_adapter(lambda err, res: seen.append((err, res))))

    assert settlement.settle(None, {"a": 1}) is True
    assert settlement.settle(ValueError("late"), {}) is False

    assert seen == [(None, {"a": 1})]
    assert settlement.outcome == (None, {"a": 1})


def test_late_subscriber_sees_outcome():
    settlement = Settlement()
    error = ValueError("boom")
    settlement.settle(error, {})
    seen = []

    settlement.subscribe(lambda err, res: seen.append((err, res)))

    assert seen == [(error, {})]


def test_observers_run_in_order():
    settlement = Settlement()
    order = []
    settlement.subscribe(lambda err, res: order.append("first"))
    settlement.subscribe(lambda err, res: order.append("second"))

    settlement.settle(None, None)

    assert order == ["first", "second"]


@pytest.mark.asyncio
async def test_future_adapter():
    loop = asyncio.get_running_loop()
    ok, failed = loop.create_future(), loop.create_future()

    future_adapter(ok)(None, "value")
    future_adapter(failed)(KeyError("k"), {})

    assert await ok == "value"
    with pytest.raises(KeyError):
        await failed


def test_raising_callback_does_not_block_later_observers():
    settlement = Settlement()
    seen = []

    def broken(err, res):
        raise RuntimeError("observer broke")

    settlement.subscribe(callback_adapter(broken))
    settlement.subscribe(lambda err, res: seen.append(res))

    assert settlement.settle(None, {"a": 1}) is True
    assert seen == [{"a": 1}]
