"""事务封装

在同一 SQLite 连接上原子提交一组写操作：成功则 commit，任何异常则 rollback 后重新抛出，
保证失败的请求不会留下部分写入。
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite


@asynccontextmanager
async def atomic(conn: aiosqlite.Connection) -> AsyncIterator[aiosqlite.Connection]:
    """commit-or-rollback 上下文

    Args:
        conn: 数据库连接（需在同一连接上操作以保证事务性）

    Raises:
        Exception: 块内异常原样抛出，事务已回滚
    """
    try:
        yield conn
        await conn.commit()
    except Exception:
        await conn.rollback()
        raise
