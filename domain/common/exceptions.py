"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class MemberNotFoundException(BusinessException):
    def __init__(self, member_num: Optional[int] = None):
        details = {"member_num": member_num} if member_num is not None else None
        super().__init__(
            code=BusinessCode.MEMBER_NOT_FOUND,
            message="Member not found",
            error_type="MemberNotFound",
            details=details,
        )


class NicknameHistoryNotFoundException(BusinessException):
    def __init__(self, member_num: int):
        super().__init__(
            code=BusinessCode.NOT_FOUND,
            message="No nickname change history found for this member",
            error_type="NicknameHistoryNotFound",
            details={"member_num": member_num},
        )


class EmailAlreadyInUseException(BusinessException):
    def __init__(self, email: str):
        super().__init__(
            code=BusinessCode.EMAIL_ALREADY_IN_USE,
            message="Email is already in use",
            error_type="EmailAlreadyInUse",
            details={"email": email},
            field="member_email",
        )


class MemberAlreadyDeactivatedException(BusinessException):
    def __init__(self, member_num: int):
        super().__init__(
            code=BusinessCode.MEMBER_ALREADY_DEACTIVATED,
            message="Member is already deactivated",
            error_type="MemberAlreadyDeactivated",
            details={"member_num": member_num},
        )


class MemberDeactivationFailedException(BusinessException):
    """成员在读取与状态更新之间消失（并发竞态）"""

    def __init__(self, member_num: int):
        super().__init__(
            code=BusinessCode.SYSTEM_ERROR,
            message="Failed to deactivate member",
            error_type="MemberDeactivationFailed",
            details={"member_num": member_num},
        )


class MemberAccessForbiddenException(BusinessException):
    def __init__(self):
        super().__init__(
            code=BusinessCode.FORBIDDEN,
            message="Cannot act on another member's account",
            error_type="MemberAccessForbidden",
        )


class PostNotFoundException(BusinessException):
    def __init__(self, post_id: Optional[int] = None):
        details = {"posts_id": post_id} if post_id is not None else None
        super().__init__(
            code=BusinessCode.POST_NOT_FOUND,
            message="Post not found",
            error_type="PostNotFound",
            details=details,
        )


class CommentsNotFoundException(BusinessException):
    def __init__(self, post_id: int):
        super().__init__(
            code=BusinessCode.COMMENT_NOT_FOUND,
            message="No comments found for this post",
            error_type="CommentsNotFound",
            details={"posts_id": post_id},
        )


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="ValidationError",
            details=details,
            field=field,
        )
