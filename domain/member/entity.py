"""
成员领域实体 - 包含核心业务规则
"""
from datetime import date, datetime
from typing import Optional
from dataclasses import dataclass

from domain.common.exceptions import MemberAlreadyDeactivatedException


MEMBER_STATUS_ACTIVE = "active"
MEMBER_STATUS_INACTIVE = "inactive"

# 注销时各关联表写入的"停用"状态值
BOOK_REVIEW_DEACTIVATED_STATUS = "inactive"
COMMUNITY_POST_DEACTIVATED_STATUS = "deleted"
COMMUNITY_COMMENT_DEACTIVATED_STATUS = "deleted"
THREAD_ENTRY_DEACTIVATED_STATUS = False


@dataclass
class Member:
    """成员实体 - 领域核心，永远不做物理删除"""

    member_num: Optional[int]
    member_id: str
    member_email: str
    member_phone: Optional[str]
    member_gender: Optional[str]
    member_nickname: str
    member_birth_date: Optional[date] = None
    member_status: str = MEMBER_STATUS_ACTIVE
    member_join_date: Optional[datetime] = None
    member_leave_date: Optional[datetime] = None
    marketing_consent: bool = False

    @property
    def is_active(self) -> bool:
        return self.member_status != MEMBER_STATUS_INACTIVE

    def ensure_can_deactivate(self) -> None:
        """业务规则：已注销的成员不能再次注销"""
        if not self.is_active:
            raise MemberAlreadyDeactivatedException(self.member_num)


@dataclass(frozen=True)
class NicknameChangeRecord:
    """昵称变更记录（只追加，不可修改）"""

    member_num: int
    new_nickname: str
    change_date: datetime


@dataclass
class ProfileUpdate:
    """资料的部分更新：None 表示保持原值"""

    member_email: Optional[str] = None
    member_phone: Optional[str] = None
    member_nickname: Optional[str] = None
    marketing_consent: Optional[bool] = None

    def supplied_fields(self) -> dict:
        return {k: v for k, v in self.__dict__.items() if v is not None}

    def is_empty(self) -> bool:
        return not self.supplied_fields()


@dataclass(frozen=True)
class MemberStatusChange:
    member_num: int
    member_status: str
