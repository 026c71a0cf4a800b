"""
访问日志中间件

每个请求记录开始与结束两条日志（含耗时）；DEBUG 下附带请求体，
其中的令牌、邮箱、手机号等字段打码后再写入。
"""
import json
import time
from typing import Any, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from core.config import settings
from core.logging_config import get_logger


logger = get_logger(__name__)

_MASK = "***"


class LoggingMiddleware(BaseHTTPMiddleware):

    SKIP_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})
    MASKED_FIELDS = frozenset({
        "token",
        "access_token",
        "password",
        "secret",
        "member_email",
        "member_phone",
    })

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.log_body = settings.LOG_REQUEST_BODY_ENABLE_BY_DEFAULT and settings.DEBUG
        self.max_body_bytes = settings.LOG_REQUEST_BODY_MAX_BYTES

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        fields = {"query_params": dict(request.query_params)}
        if self.log_body and request.method in ("POST", "PUT", "PATCH"):
            body = await self._read_body(request)
            if body is not None:
                fields["body"] = body
        logger.info("request_started", **fields)

        try:
            response = await call_next(request)
        except Exception as exc:
            # 交给全局异常处理器生成 500 响应
            logger.error(
                "request_failed",
                duration=round(time.perf_counter() - started, 4),
                error_type=type(exc).__name__,
            )
            raise

        duration = time.perf_counter() - started
        self._log_completed(response, duration)
        response.headers["X-Process-Time"] = f"{duration:.3f}"
        return response

    async def _read_body(self, request: Request) -> Optional[Any]:
        raw = await request.body()
        if not raw:
            return None
        text = raw[: self.max_body_bytes].decode("utf-8", errors="ignore")
        if "application/json" not in request.headers.get("content-type", ""):
            return text
        try:
            return self._mask(json.loads(text))
        except ValueError:
            # 超出截断长度的 JSON 无法解析，不记录原文以免泄露字段
            return {"truncated": True, "size": len(raw)}

    def _mask(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: _MASK if key.lower() in self.MASKED_FIELDS else self._mask(value)
                for key, value in data.items()
            }
        if isinstance(data, list):
            return [self._mask(item) for item in data]
        return data

    def _log_completed(self, response: Response, duration: float) -> None:
        status_code = response.status_code
        event = "request_completed"
        log = logger.info
        if status_code >= 500:
            event, log = "request_server_error", logger.error
        elif status_code >= 400:
            event, log = "request_client_error", logger.warning
        log(event, status_code=status_code, duration=round(duration, 4))
