import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from henwiki.core.config import settings
from henwiki.core.exceptions import Forbidden, RBACError, Unauthenticated
from henwiki.core.logging import logger

INTERNAL_ERROR_MESSAGE = "服务器内部错误，请稍后再试"


async def handle_rbac_error(request: Request, exc: RBACError) -> JSONResponse:
    """领域异常 -> 401/403/404/409/400"""
    content: dict = {"error_code": exc.error_code, "detail": exc.message}
    headers: dict[str, str] | None = None

    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, Forbidden) and exc.missing:
        content["missing_permissions"] = list(exc.missing)

    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """
    全局异常处理器，统一返回结构化错误响应并打印日志。
    """
    error_id = uuid.uuid4().hex
    logger.exception(
        "unhandled_error",
        extra={
            "method": request.method,
            "path": request.url.path,
            "error_id": error_id,
        },
    )
    content = {
        "error_code": "internal_error",
        "detail": INTERNAL_ERROR_MESSAGE,
        "error_id": error_id,
    }
    if settings.EXPOSE_INTERNAL_ERRORS and not settings.is_production:
        content["exception"] = f"{type(exc).__name__}: {exc}"
    return JSONResponse(status_code=500, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RBACError, handle_rbac_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
