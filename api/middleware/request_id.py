"""
请求追踪 ID

沿用上游传入的 X-Request-ID（过长或为空时重新生成），写入 request.state
和 structlog 上下文，并回写到响应头，方便按 ID 串联一次请求的所有日志。
"""
import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


REQUEST_ID_HEADER = "X-Request-ID"
_MAX_REQUEST_ID_LENGTH = 128


def _client_ip(request: Request) -> str:
    # 反向代理后取第一跳地址
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
        if not incoming or len(incoming) > _MAX_REQUEST_ID_LENGTH:
            incoming = uuid.uuid4().hex
        request.state.request_id = incoming

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=incoming,
            client_ip=_client_ip(request),
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = incoming
        return response
