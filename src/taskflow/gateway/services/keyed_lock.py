"""KeyedLock -- 按 key（task_id / owner_id）串行化的 asyncio 锁表

每个 key 的锁带引用计数：进入 hold() 时 +1（在等待锁之前），退出时 -1，
归零才从表中移除。仍有协程持有或等待时条目不会被删掉，
因此同一 key 永远只对应一把锁，表的大小等于当前活跃的 key 数。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedLock:
    """进程内按 key 分配的互斥锁"""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """在 key 对应的锁内执行代码块"""
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._release(key)

    def _release(self, key: str) -> None:
        remaining = self._users[key] - 1
        if remaining:
            self._users[key] = remaining
        else:
            del self._users[key]
            del self._locks[key]

    def __contains__(self, key: str) -> bool:
        return key in self._locks

    def __len__(self) -> int:
        return len(self._locks)
