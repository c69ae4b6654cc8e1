"""KeyedLock 测试 -- 按 key 互斥 + 空闲条目回收"""

import asyncio

import pytest
from taskflow.gateway.services.keyed_lock import KeyedLock


class TestKeyedLock:
    async def test_entry_removed_after_release(self):
        locks = KeyedLock()
        async with locks.hold("task-1"):
            assert "task-1" in locks
        assert "task-1" not in locks
        assert len(locks) == 0

    async def test_entry_removed_after_exception(self):
        locks = KeyedLock()
        with pytest.raises(RuntimeError):
            async with locks.hold("task-1"):
                raise RuntimeError("boom")
        assert len(locks) == 0

    async def test_same_key_serialized(self):
        locks = KeyedLock()
        events: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold("task-1"):
                events.append(f"{name}-enter")
                await asyncio.sleep(0.01)
                events.append(f"{name}-exit")

        await asyncio.gather(worker("a"), worker("b"), worker("c"))
        # 每次进入后紧跟同一 worker 的退出
        for i in range(0, len(events), 2):
            assert events[i].split("-")[0] == events[i + 1].split("-")[0]
        assert len(locks) == 0

    async def test_waiter_keeps_entry_alive(self):
        locks = KeyedLock()
        first_in = asyncio.Event()
        release_first = asyncio.Event()

        async def first() -> None:
            async with locks.hold("task-1"):
                first_in.set()
                await release_first.wait()

        async def second() -> None:
            async with locks.hold("task-1"):
                pass

        t1 = asyncio.create_task(first())
        await first_in.wait()
        t2 = asyncio.create_task(second())
        await asyncio.sleep(0)
        release_first.set()
        await t1
        # first 已释放，但 second 仍在排队或持有，同一把锁不能被回收
        assert "task-1" in locks or t2.done()
        await t2
        assert len(locks) == 0

    async def test_different_keys_independent(self):
        locks = KeyedLock()
        async with locks.hold("a"):
            async with locks.hold("b"):
                assert len(locks) == 2
        assert len(locks) == 0
