"""集成测试配置 -- 走完整 lifespan 的真实 app"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path):
    """通过 lifespan 初始化 StoreGroup 的 app"""
    os.environ["TASKFLOW_DB_PATH"] = str(tmp_path / "sqlite" / "integration.db")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from taskflow.gateway.main import create_app

    app = create_app()
    async with app.router.lifespan_context(app):
        yield app

    for key in ["TASKFLOW_DB_PATH", "LOGFIRE_SEND_TO_LOGFIRE"]:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
