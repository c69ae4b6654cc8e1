"""gateway 测试配置 -- FastAPI app + httpx AsyncClient + 预置用户"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskflow.core.models import User
from taskflow.core.store import StoreGroup


@pytest_asyncio.fixture
async def app(tmp_db_path: Path, store_group: StoreGroup):
    """创建测试用 FastAPI app 实例（绕过 lifespan，手动注入 StoreGroup）"""
    os.environ["TASKFLOW_DB_PATH"] = str(tmp_db_path)
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from taskflow.gateway.main import create_app

    application = create_app()
    application.state.store_group = store_group
    yield application

    for key in ["TASKFLOW_DB_PATH", "LOGFIRE_SEND_TO_LOGFIRE"]:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def alice(make_user) -> User:
    return await make_user("Alice")


@pytest_asyncio.fixture
async def bob(make_user) -> User:
    return await make_user("Bob")


@pytest_asyncio.fixture
async def carol(make_user) -> User:
    return await make_user("Carol")


@pytest.fixture
def auth():
    """生成携带已认证 user_id 的请求头"""

    def _headers(user: User) -> dict[str, str]:
        return {"X-User-ID": user.user_id}

    return _headers
