"""异常 -> HTTP 响应映射

所有错误响应统一为 {"error": {"code": ..., "message": ...}}。
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse
from taskflow.core.exceptions import (
    AccessDeniedError,
    DuplicateMemberError,
    EmailTakenError,
    InvalidOperationError,
    NotFoundError,
    TaskflowError,
    TaskValidationError,
    UnauthenticatedError,
)

log = structlog.get_logger()

# 按子类优先顺序匹配
_STATUS_CODES: list[tuple[type[TaskflowError], int]] = [
    (TaskValidationError, 400),
    (InvalidOperationError, 400),
    (UnauthenticatedError, 401),
    (AccessDeniedError, 403),
    (NotFoundError, 404),
    (DuplicateMemberError, 409),
    (EmailTakenError, 409),
]


def status_code_for(error: TaskflowError) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


async def taskflow_error_handler(request: Request, exc: TaskflowError) -> JSONResponse:
    status_code = status_code_for(exc)
    await log.ainfo(
        "request_rejected",
        error_code=exc.code,
        status_code=status_code,
    )
    return error_response(status_code, exc.code, exc.message)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """请求体 / 查询参数校验失败统一返回 400 VALIDATION_ERROR"""
    details = [
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    ]
    return error_response(400, TaskValidationError.code, "; ".join(details) or "Invalid request")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskflowError, taskflow_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
