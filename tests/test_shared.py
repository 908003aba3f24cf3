import asyncio
import gc

import pytest

from drpipe.shared import PoisonedError, SharedBox, WeakShared, boxed_shared


class Counter:
    def __init__(self):
        self.calls = 0

    async def value(self, result):
        self.calls += 1
        await asyncio.sleep(0)
        return result


@pytest.mark.asyncio
async def test_await_returns_result():
    counter = Counter()
    box = SharedBox(counter.value("done"))
    assert await box == "done"
    assert counter.calls == 1


@pytest.mark.asyncio
async def test_clones_run_work_once():
    counter = Counter()
    box = boxed_shared(counter.value(7))
    other = box.clone()
    assert await box == 7
    assert await other == 7
    assert counter.calls == 1


@pytest.mark.asyncio
async def test_concurrent_awaiters_share_result():
    counter = Counter()
    box = SharedBox(counter.value([1, 2]))
    results = await asyncio.gather(box.clone(), box.clone(), box)
    assert results == [[1, 2], [1, 2], [1, 2]]
    assert counter.calls == 1


@pytest.mark.asyncio
async def test_awaiting_twice_raises():
    box = SharedBox(Counter().value(1))
    assert await box == 1
    with pytest.raises(RuntimeError):
        await box


@pytest.mark.asyncio
async def test_peek_and_termination():
    box = SharedBox(Counter().value(42))
    other = box.clone()
    assert other.peek() is None
    assert not box.is_terminated()
    assert await box == 42
    assert box.is_terminated()
    assert box.peek() is None
    assert other.peek() == 42
    assert await other == 42
    assert other.is_terminated()


@pytest.mark.asyncio
async def test_ptr_eq_and_hash():
    box = SharedBox(Counter().value(1))
    other = box.clone()
    unrelated = SharedBox(Counter().value(1))
    assert box.ptr_eq(other)
    assert box.ptr_hash() == other.ptr_hash()
    assert not box.ptr_eq(unrelated)
    await box
    assert not box.ptr_eq(other)
    assert not other.ptr_eq(box)
    await other
    await unrelated


@pytest.mark.asyncio
async def test_downgrade_and_upgrade():
    box = SharedBox(Counter().value("x"))
    weak = box.downgrade()
    assert isinstance(weak, WeakShared)
    upgraded = weak.upgrade()
    assert upgraded.ptr_eq(box)
    assert await upgraded == "x"
    assert await box == "x"
    assert box.downgrade() is None
    del upgraded, box
    gc.collect()
    assert weak.upgrade() is None


@pytest.mark.asyncio
async def test_failure_poisons_all_handles():
    async def boom():
        raise ValueError("broken")

    box = SharedBox(boom())
    other = box.clone()
    with pytest.raises(PoisonedError) as excinfo:
        await box
    assert isinstance(excinfo.value.__cause__, ValueError)
    with pytest.raises(PoisonedError):
        other.peek()
    with pytest.raises(PoisonedError):
        await other


@pytest.mark.asyncio
async def test_cancelled_awaiter_does_not_cancel_work():
    gate = asyncio.Event()
    counter = Counter()

    async def work():
        counter.calls += 1
        await gate.wait()
        return "finished"

    box = SharedBox(work())
    first = asyncio.ensure_future(box.clone())
    second = asyncio.ensure_future(box.clone())
    await asyncio.sleep(0)
    first.cancel()
    await asyncio.sleep(0)
    gate.set()
    assert await second == "finished"
    assert first.cancelled()
    assert await box == "finished"
    assert counter.calls == 1