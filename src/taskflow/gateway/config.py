"""GatewayConfig -- Gateway 配置加载

从环境变量加载配置，非法值记录告警并回退默认值，不阻塞启动。
"""

import os
import re

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

_HEADER_NAME = re.compile(r"^[A-Za-z0-9-]+$")


class GatewayConfig(BaseModel):
    """Gateway 配置 -- 从环境变量加载

    环境变量:
        TASKFLOW_AUTH_HEADER: 上游认证组件写入已验证 user_id 的请求头（默认 X-User-ID）
        TASKFLOW_CORS_ORIGINS: 允许跨域的前端源，逗号分隔（默认空，不启用 CORS）
    """

    auth_header: str = Field(
        default="X-User-ID",
        description="携带已认证 user_id 的请求头",
    )
    cors_origins: list[str] = Field(
        default_factory=list,
        description="CORS 允许的源",
    )


def load_gateway_config() -> GatewayConfig:
    """从环境变量加载 Gateway 配置

    Returns:
        GatewayConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("TASKFLOW_AUTH_HEADER"):
        if _HEADER_NAME.match(val):
            kwargs["auth_header"] = val
        else:
            log.warning(
                "invalid_auth_header_config",
                env_var="TASKFLOW_AUTH_HEADER",
                value=val,
                fallback="X-User-ID",
            )

    if val := os.environ.get("TASKFLOW_CORS_ORIGINS"):
        kwargs["cors_origins"] = [o.strip() for o in val.split(",") if o.strip()]

    return GatewayConfig(**kwargs)
