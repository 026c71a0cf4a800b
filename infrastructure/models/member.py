"""
成员数据库模型 - SQLAlchemy ORM模型
注意：这是基础设施层的实现细节，不是领域模型
"""
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Index
from datetime import datetime, timezone

from .base import Base


class MemberModel(Base):
    """
    成员数据库模型

    成员永远不做物理删除，注销只把 member_status 改为 inactive
    """
    __tablename__ = "member"

    member_num = Column(Integer, primary_key=True, autoincrement=True)

    # 基本信息
    member_id = Column(String(50), unique=True, nullable=False, comment="登录ID")
    member_email = Column(String(100), unique=True, index=True, nullable=False, comment="邮箱")
    member_phone = Column(String(20), nullable=True, comment="手机号")
    member_gender = Column(String(10), nullable=True, comment="性别")
    member_nickname = Column(String(50), nullable=False, comment="昵称")
    member_birth_date = Column(Date, nullable=True, comment="出生日期")

    # 状态信息
    member_status = Column(String(20), nullable=False, default="active", comment="active / inactive")
    member_join_date = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        comment="加入时间"
    )
    member_leave_date = Column(DateTime(timezone=True), nullable=True, comment="注销时间")
    marketing_consent = Column(Boolean, default=False, nullable=False, comment="营销信息接收同意")

    def __repr__(self):
        return f"<MemberModel(member_num={self.member_num}, member_id='{self.member_id}', status='{self.member_status}')>"


class MemberNicknameModel(Base):
    """昵称变更历史（只追加）"""
    __tablename__ = "member_nickname"
    __table_args__ = (
        Index("ix_member_nickname_member_change", "member_num", "change_date"),
    )

    nickname_num = Column(Integer, primary_key=True, autoincrement=True)
    member_num = Column(Integer, nullable=False, comment="成员ID")
    new_nickname = Column(String(50), nullable=False, comment="新昵称")
    change_date = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        comment="变更时间"
    )
