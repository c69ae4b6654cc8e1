"""structlog 配置模块

TASKFLOW_LOG_FORMAT:
- "dev" (默认): ConsoleRenderer 彩色输出
- "json": 每行一个 JSON 对象，便于日志采集

每条日志都带 service 字段；credential / authorization 等敏感键在渲染前被遮蔽。
uvicorn.access 与 aiosqlite 的 DEBUG/INFO 输出被压到 WARNING，
请求级日志由 LoggingMiddleware 的 request_started / request_completed 负责。
"""

import logging
import os

import structlog
from fastapi import FastAPI
from structlog.typing import EventDict, Processor, WrappedLogger

SERVICE_NAME = "taskflow-gateway"

# 渲染前遮蔽的键（不区分大小写）
SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"credential", "password", "authorization", "token", "cookie"}
)

# 输出过于频繁的第三方 logger
_NOISY_LOGGERS: tuple[str, ...] = ("uvicorn.access", "aiosqlite")

_REDACTED = "***"


def add_service_name(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def redact_sensitive(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """遮蔽敏感字段的值，事件名本身不受影响"""
    for key in list(event_dict):
        if key != "event" and key.lower() in SENSITIVE_KEYS:
            event_dict[key] = _REDACTED
    return event_dict


class _TaskflowHandler(logging.StreamHandler):
    """setup_logging 安装的 handler，重复调用时只替换它自己"""


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 与标准库 logging

    参数为空时读取 TASKFLOW_LOG_FORMAT / TASKFLOW_LOG_LEVEL（默认 dev / INFO）。
    可重复调用（每次 create_app 都会调用）：只替换本模块安装的 handler，
    其它 handler（例如 pytest 的 caplog）保持不动。
    """
    log_format = log_format or os.environ.get("TASKFLOW_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("TASKFLOW_LOG_LEVEL", "INFO")

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_service_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_sensitive,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer(ensure_ascii=False)
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = _TaskflowHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if isinstance(h, _TaskflowHandler)]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logfire(app: FastAPI) -> bool:
    """按 LOGFIRE_SEND_TO_LOGFIRE 可选启用 Logfire 并挂载 FastAPI instrumentation

    Returns:
        是否启用成功；未开启或初始化失败时为 False，继续使用本地日志
    """
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return False
    try:
        import logfire

        logfire.configure(service_name=SERVICE_NAME)
        logfire.instrument_fastapi(app)
    except Exception as e:
        structlog.get_logger().warning(
            "logfire_init_failed",
            error_type=type(e).__name__,
            message="Logfire 初始化失败，降级为纯本地日志",
        )
        return False
    return True
