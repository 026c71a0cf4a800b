"""
统一响应信封

所有接口都返回 {code, message, data, error}：成功时 error 为空，
失败时 data 为空，error 里带上错误类型、出错字段与 request_id。
"""
from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field, field_serializer

from shared.codes import BusinessCode


T = TypeVar("T")


def to_utc_z(value: datetime) -> str:
    """datetime 统一输出为 UTC 的 ISO 8601，以 Z 结尾；无时区的值按 UTC 处理"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class ErrorDetail(BaseModel):
    type: str
    field: Optional[str] = None
    details: Optional[dict] = None
    request_id: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return to_utc_z(value)


class Response(BaseModel, Generic[T]):
    code: int
    message: str
    data: Optional[T] = None
    error: Optional[ErrorDetail] = None


def success_response(data: Any = None, message: str = "Success") -> Response:
    """成功响应；message 直接展示给客户端"""
    return Response(code=BusinessCode.OK, message=message, data=data)


def error_response(
    code: int,
    message: str,
    error_type: str = "BusinessError",
    details: Optional[dict] = None,
    field: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Response:
    """
    失败响应

    message 只能是面向用户的提示，数据库报错等内部信息只写日志。
    """
    return Response(
        code=code,
        message=message,
        error=ErrorDetail(type=error_type, field=field, details=details, request_id=request_id),
    )
