"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 实例与当前用户

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
当前用户 id 由上游认证组件写入请求头，这里只校验其存在于用户目录。
"""

import structlog
from fastapi import Depends, Request
from taskflow.core.store import StoreGroup

from .services.user_service import UserService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


async def get_current_user_id(
    request: Request,
    store_group: StoreGroup = Depends(get_store_group),
) -> str:
    """解析当前请求的 user_id 并绑定到日志上下文"""
    header = request.app.state.config.auth_header
    user_id = await UserService(store_group).authenticate(request.headers.get(header))
    structlog.contextvars.bind_contextvars(user_id=user_id)
    return user_id
