"""
数据传输对象（DTO）- 应用层与表现层之间的数据传输
"""
from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from core.response import to_utc_z


# 按字段声明，json 模式下同样生效
UtcDatetime = Annotated[datetime, PlainSerializer(to_utc_z, return_type=str)]


class DTOBase(BaseModel):
    """DTO 基类；时间字段用 UtcDatetime 声明"""


class MemberResponseDTO(DTOBase):
    """成员响应DTO"""
    member_num: int
    member_id: str
    member_email: str
    member_phone: Optional[str]
    member_gender: Optional[str]
    member_nickname: str
    member_birth_date: Optional[str] = Field(None, description="YYYY.MM.DD")
    member_status: str
    member_join_date: Optional[UtcDatetime]
    member_leave_date: Optional[UtcDatetime]
    marketing_consent: bool

    model_config = ConfigDict(from_attributes=True)


class MemberUpdateDTO(DTOBase):
    """成员资料更新DTO：全部可选，未提供的字段保持原值

    marketing_consent 不做类型转换，交给领域校验严格判断布尔值。
    """
    member_email: Optional[str] = None
    member_phone: Optional[str] = None
    member_nickname: Optional[str] = None
    marketing_consent: Optional[Any] = None


class NicknameHistoryDTO(DTOBase):
    new_nickname: str
    change_date: UtcDatetime

    model_config = ConfigDict(from_attributes=True)


class DeactivationResultDTO(DTOBase):
    member_num: int
    member_status: str


class PostCreateDTO(DTOBase):
    """发帖DTO；visibility 必须是真正的布尔值"""
    post_title: Optional[str] = None
    post_content: Optional[str] = None
    post_status: Optional[str] = Field(None, description="active / inactive，默认 active")
    visibility: Optional[Any] = None


class PostResponseDTO(DTOBase):
    posts_id: int
    member_num: int
    post_title: str
    post_content: str
    post_status: str
    visibility: bool
    post_created_at: Optional[UtcDatetime]
    member_nickname: Optional[str] = None
    member_email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CommentCreateDTO(DTOBase):
    posts_id: Optional[int] = None
    comment_content: Optional[str] = None


class CommentResponseDTO(DTOBase):
    comment_id: int
    posts_id: int
    member_num: int
    comment_content: str
    comment_status: str
    comment_created_at: Optional[UtcDatetime]
    member_nickname: Optional[str] = None
    member_email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
