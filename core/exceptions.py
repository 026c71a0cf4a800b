"""
全局异常处理

业务异常按 BusinessCode 映射 HTTP 状态码；未预期的异常统一返回 500，
具体原因只写日志，不返回给客户端。
"""
import traceback
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status as http_status
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging_config import get_logger
from core.response import error_response
from domain.common.exceptions import BusinessException
from shared.codes import BusinessCode


logger = get_logger(__name__)


class UnauthorizedException(BusinessException):
    """缺少令牌、签名错误、已过期都用同一个提示，不区分原因"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            code=BusinessCode.UNAUTHORIZED,
            message=message,
            error_type="Unauthorized",
        )


_STATUS_BY_CODE = {
    BusinessCode.UNAUTHORIZED: http_status.HTTP_401_UNAUTHORIZED,
    BusinessCode.FORBIDDEN: http_status.HTTP_403_FORBIDDEN,
    BusinessCode.MEMBER_NOT_FOUND: http_status.HTTP_404_NOT_FOUND,
    BusinessCode.NOT_FOUND: http_status.HTTP_404_NOT_FOUND,
    BusinessCode.POST_NOT_FOUND: http_status.HTTP_404_NOT_FOUND,
    BusinessCode.COMMENT_NOT_FOUND: http_status.HTTP_404_NOT_FOUND,
    BusinessCode.SYSTEM_ERROR: http_status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_CODE_BY_STATUS = {
    http_status.HTTP_401_UNAUTHORIZED: BusinessCode.UNAUTHORIZED,
    http_status.HTTP_403_FORBIDDEN: BusinessCode.FORBIDDEN,
    http_status.HTTP_404_NOT_FOUND: BusinessCode.NOT_FOUND,
}


def business_code_to_http_status(code: int) -> int:
    """参数校验、邮箱重复、重复注销等其余业务码一律 400"""
    try:
        return _STATUS_BY_CODE.get(BusinessCode(code), http_status.HTTP_400_BAD_REQUEST)
    except ValueError:
        return http_status.HTTP_400_BAD_REQUEST


def _json_error(
    request: Request,
    status_code: int,
    code: int,
    message: str,
    error_type: str,
    details: Optional[dict] = None,
    field: Optional[str] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None) or uuid.uuid4().hex
    body = error_response(
        code=code,
        message=message,
        error_type=error_type,
        details=details,
        field=field,
        request_id=request_id,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


def register_exception_handlers(app: FastAPI):

    @app.exception_handler(BusinessException)
    async def business_exception_handler(request: Request, exc: BusinessException):
        status_code = business_code_to_http_status(exc.code)
        if status_code >= http_status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("business_exception_server_error", error_type=exc.error_type, details=exc.details)
        headers = {"WWW-Authenticate": "Bearer"} if status_code == http_status.HTTP_401_UNAUTHORIZED else None
        return _json_error(
            request,
            status_code,
            exc.code,
            exc.message,
            exc.error_type,
            details=exc.details,
            field=exc.field,
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # 请求体/路径参数类型错误也按 400 返回，与领域校验保持一致
        errors = exc.errors()
        first = errors[0] if errors else {}
        return _json_error(
            request,
            http_status.HTTP_400_BAD_REQUEST,
            BusinessCode.PARAM_VALIDATION_ERROR,
            f"Validation failed: {first.get('msg', 'unknown')}",
            "ValidationError",
            details={"errors": jsonable_encoder(errors)},
            field=".".join(str(loc) for loc in first.get("loc", [])[1:]) or None,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _json_error(
            request,
            exc.status_code,
            _CODE_BY_STATUS.get(exc.status_code, BusinessCode.BUSINESS_ERROR),
            str(exc.detail),
            "HTTPError",
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("unhandled_exception", error=str(exc), error_type=type(exc).__name__, exc_info=exc)
        details = {"exception": str(exc), "traceback": traceback.format_exc()} if app.debug else None
        return _json_error(
            request,
            http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            BusinessCode.SYSTEM_ERROR,
            "Internal server error",
            "SystemError",
            details=details,
        )
