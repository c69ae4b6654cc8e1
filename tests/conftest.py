"""全局 pytest 配置 -- 临时 SQLite 数据库 fixture"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from taskflow.core.models import User
from taskflow.core.store import StoreGroup, create_store_group
from ulid import ULID


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接（不经过 StoreGroup）"""
    from taskflow.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_path / "raw.db"))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """提供共享连接的 StoreGroup"""
    group = await create_store_group(str(tmp_db_path))
    yield group
    await group.conn.close()


@pytest.fixture
def make_user(store_group: StoreGroup) -> Callable[..., Awaitable[User]]:
    """直接在用户目录中登记用户的工厂"""

    async def _make(name: str, email: str | None = None) -> User:
        user = User(
            user_id=str(ULID()),
            name=name,
            email=email or f"{name.lower()}@example.com",
            created_at=datetime.now(UTC),
        )
        await store_group.user_store.create_user(user)
        await store_group.conn.commit()
        return user

    return _make
