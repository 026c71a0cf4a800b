"""
社区相关数据库模型：帖子、评论、书评、讨论串

各表之间不声明外键，存储层不保证引用完整性。
"""
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CommunityPostModel(Base):
    __tablename__ = "community"
    __table_args__ = (
        Index("ix_community_member_num", "member_num"),
        Index("ix_community_visibility_created", "visibility", "post_created_at"),
    )

    posts_id = Column(Integer, primary_key=True, autoincrement=True)
    member_num = Column(Integer, nullable=False, comment="作者")
    post_title = Column(String(200), nullable=False)
    post_content = Column(Text, nullable=False)
    post_created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    post_status = Column(String(20), nullable=False, default="active", comment="active / inactive / deleted")
    visibility = Column(Boolean, nullable=False, default=True, comment="false 表示仅自己可见")
    post_deleted_at = Column(DateTime(timezone=True), nullable=True, comment="软删除标记")


class CommunityCommentModel(Base):
    __tablename__ = "community_comment"
    __table_args__ = (
        Index("ix_community_comment_posts_id", "posts_id"),
        Index("ix_community_comment_member_num", "member_num"),
    )

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    posts_id = Column(Integer, nullable=False)
    member_num = Column(Integer, nullable=False)
    comment_content = Column(Text, nullable=False)
    comment_created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    comment_status = Column(String(20), nullable=False, default="active", comment="active / inactive / deleted")
    comment_deleted_at = Column(DateTime(timezone=True), nullable=True, comment="软删除标记")


class BookReviewModel(Base):
    __tablename__ = "book_review"

    review_num = Column(Integer, primary_key=True, autoincrement=True)
    member_num = Column(Integer, nullable=False, index=True)
    review_content = Column(Text, nullable=True)
    review_status = Column(String(20), nullable=False, default="active", comment="active / inactive")


class ThreadModel(Base):
    """讨论串主体，生命周期由其他服务管理"""
    __tablename__ = "thread"

    thread_num = Column(Integer, primary_key=True, autoincrement=True)
    member_num = Column(Integer, nullable=True)
    thread_created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class ThreadEntryModel(Base):
    """讨论串下的评论与回复；thread_num 未加外键约束"""
    __tablename__ = "thread_main"

    thread_main_num = Column(Integer, primary_key=True, autoincrement=True)
    thread_num = Column(Integer, nullable=False, index=True)
    member_num = Column(Integer, nullable=False, index=True)
    thread_content = Column(Text, nullable=True)
    thread_status = Column(Boolean, nullable=False, default=True)
