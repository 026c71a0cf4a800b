"""
成员仓储实现 - 使用SQLAlchemy实现数据访问
"""
from datetime import datetime, timezone
from typing import Optional, List

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.member.entity import (
    MEMBER_STATUS_INACTIVE,
    Member,
    MemberStatusChange,
    NicknameChangeRecord,
    ProfileUpdate,
)
from domain.member.repository import MemberRepository
from domain.common.exceptions import EmailAlreadyInUseException
from infrastructure.models.member import MemberModel, MemberNicknameModel
from core.logging_config import get_logger


logger = get_logger(__name__)


class SQLAlchemyMemberRepository(MemberRepository):
    """成员仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: MemberModel) -> Member:
        """将数据库模型转换为领域实体"""
        return Member(
            member_num=model.member_num,
            member_id=model.member_id,
            member_email=model.member_email,
            member_phone=model.member_phone,
            member_gender=model.member_gender,
            member_nickname=model.member_nickname,
            member_birth_date=model.member_birth_date,
            member_status=model.member_status,
            member_join_date=model.member_join_date,
            member_leave_date=model.member_leave_date,
            marketing_consent=model.marketing_consent,
        )

    async def _get_model(self, member_num: int) -> Optional[MemberModel]:
        result = await self.session.execute(
            select(MemberModel).where(MemberModel.member_num == member_num)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, member_num: int) -> Optional[Member]:
        """根据ID获取成员"""
        db_member = await self._get_model(member_num)
        return self._to_entity(db_member) if db_member else None

    async def get_nickname_history(self, member_num: int) -> List[NicknameChangeRecord]:
        result = await self.session.execute(
            select(MemberNicknameModel)
            .where(MemberNicknameModel.member_num == member_num)
            .order_by(
                MemberNicknameModel.change_date.desc(),
                MemberNicknameModel.nickname_num.desc(),
            )
        )
        return [
            NicknameChangeRecord(
                member_num=row.member_num,
                new_nickname=row.new_nickname,
                change_date=row.change_date,
            )
            for row in result.scalars().all()
        ]

    async def email_in_use(self, email: str, exclude_member_num: int) -> bool:
        result = await self.session.execute(
            select(func.count()).select_from(MemberModel)
            .where(
                MemberModel.member_email == email,
                MemberModel.member_num != exclude_member_num,
            )
        )
        return result.scalar() > 0

    async def update_profile(self, member_num: int, update: ProfileUpdate) -> Optional[Member]:
        """部分更新（coalesce 语义）：只覆盖传入的非空字段"""
        db_member = await self._get_model(member_num)
        if not db_member:
            return None

        previous_nickname = db_member.member_nickname
        for name, value in update.supplied_fields().items():
            setattr(db_member, name, value)

        try:
            await self.session.flush()
        except IntegrityError:
            # 预检查之后仍可能被并发请求抢占邮箱
            logger.warning(
                "update_member_conflict",
                field="member_email",
                member_num=member_num,
            )
            raise EmailAlreadyInUseException(update.member_email or db_member.member_email)

        if update.member_nickname is not None and update.member_nickname != previous_nickname:
            self.session.add(
                MemberNicknameModel(
                    member_num=member_num,
                    new_nickname=update.member_nickname,
                    change_date=datetime.now(timezone.utc),
                )
            )
            await self.session.flush()
            logger.info(
                "member_nickname_changed",
                member_num=member_num,
                new_nickname=update.member_nickname,
            )

        await self.session.refresh(db_member)
        return self._to_entity(db_member)

    async def set_status(
        self,
        member_num: int,
        status: str,
        leave_date: Optional[datetime] = None,
    ) -> Optional[MemberStatusChange]:
        db_member = await self._get_model(member_num)
        if not db_member:
            return None

        db_member.member_status = status
        if status == MEMBER_STATUS_INACTIVE:
            db_member.member_leave_date = leave_date or datetime.now(timezone.utc)
        await self.session.flush()
        return MemberStatusChange(member_num=db_member.member_num, member_status=db_member.member_status)
