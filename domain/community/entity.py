"""
社区领域实体：帖子与评论
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


POST_STATUS_ACTIVE = "active"
COMMENT_STATUS_ACTIVE = "active"


@dataclass
class CommunityPost:
    posts_id: Optional[int]
    member_num: int
    post_title: str
    post_content: str
    post_status: str = POST_STATUS_ACTIVE
    visibility: bool = True
    post_created_at: Optional[datetime] = None
    post_deleted_at: Optional[datetime] = None
    # 列表/详情查询时联表带出的作者信息
    member_nickname: Optional[str] = None
    member_email: Optional[str] = None


@dataclass
class CommunityComment:
    comment_id: Optional[int]
    posts_id: int
    member_num: int
    comment_content: str
    comment_status: str = COMMENT_STATUS_ACTIVE
    comment_created_at: Optional[datetime] = None
    comment_deleted_at: Optional[datetime] = None
    member_nickname: Optional[str] = None
    member_email: Optional[str] = None
