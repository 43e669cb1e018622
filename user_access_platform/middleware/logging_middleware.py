"""
HTTP 请求日志中间件

记录所有 HTTP 请求的详细信息，包括：
- 请求方法和路径
- 请求 body（敏感字段脱敏）
- 响应状态
- 处理时间
"""
import json
import time
from typing import Any, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from user_access_platform.utils.logging_config import ACCESS_LOGGER_NAME, get_logger

SENSITIVE_FIELDS = {"password", "passwd", "password_hash", "token", "secret"}
MASK = "***MASKED***"

access_logger = get_logger(ACCESS_LOGGER_NAME)
logger = get_logger(__name__)


def mask_sensitive_fields(data: Any) -> Any:
    """隐藏敏感字段（如密码）"""
    if isinstance(data, list):
        return [mask_sensitive_fields(item) for item in data]
    if not isinstance(data, dict):
        return data

    masked = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_FIELDS:
            masked[key] = MASK
        else:
            masked[key] = mask_sensitive_fields(value)
    return masked


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """记录所有 HTTP 请求的中间件"""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        client = request.client.host if request.client else "unknown"

        body = None
        if request.method in ["POST", "PUT", "PATCH"]:
            body_bytes = await request.body()
            if body_bytes:
                try:
                    body = mask_sensitive_fields(json.loads(body_bytes.decode("utf-8")))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    body = f"<non-json data: {len(body_bytes)} bytes>"

        access_logger.info(f"[REQUEST] {request.method} {request.url.path} | Client: {client}")
        if body is not None:
            access_logger.info(
                f"[REQUEST BODY] {request.method} {request.url.path} | "
                f"Body: {json.dumps(body, ensure_ascii=False)}"
            )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"[RESPONSE] {request.method} {request.url.path} | "
                f"Status: 500 (Exception) | "
                f"Duration: {duration:.3f}s | "
                f"Error: {e!r}"
            )
            raise

        duration = time.time() - start_time
        access_logger.info(
            f"[RESPONSE] {request.method} {request.url.path} | "
            f"Status: {response.status_code} | "
            f"Duration: {duration:.3f}s"
        )
        return response
