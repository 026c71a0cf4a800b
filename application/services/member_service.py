"""
成员应用服务 - 资料查询/修改与昵称历史
"""
from typing import Callable, List

from application.dto import MemberResponseDTO, MemberUpdateDTO, NicknameHistoryDTO
from core.logging_config import get_logger
from domain.common.exceptions import (
    EmailAlreadyInUseException,
    MemberNotFoundException,
    NicknameHistoryNotFoundException,
)
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.member.entity import Member, ProfileUpdate
from domain.member import validators


logger = get_logger(__name__)


class MemberApplicationService:
    """成员应用服务 - 处理应用层逻辑"""

    def __init__(self, uow_factory: Callable[..., AbstractUnitOfWork]):
        self._uow_factory = uow_factory

    async def get_member(self, member_num: int) -> MemberResponseDTO:
        """获取成员信息"""
        async with self._uow_factory(readonly=True) as uow:
            member = await uow.member_repository.get_by_id(member_num)
            if not member:
                raise MemberNotFoundException(member_num)
            return self._to_response_dto(member)

    async def get_nickname_history(self, member_num: int) -> List[NicknameHistoryDTO]:
        async with self._uow_factory(readonly=True) as uow:
            records = await uow.member_repository.get_nickname_history(member_num)
        if not records:
            raise NicknameHistoryNotFoundException(member_num)
        return [
            NicknameHistoryDTO(new_nickname=r.new_nickname, change_date=r.change_date)
            for r in records
        ]

    async def update_member(self, member_num: int, update_data: MemberUpdateDTO) -> MemberResponseDTO:
        """
        部分更新成员资料

        先做全部格式校验，任何一项失败都不会触达数据库写操作；
        邮箱唯一性在同一事务中预检查（排除自己）。
        """
        update = ProfileUpdate(
            member_email=update_data.member_email,
            member_phone=update_data.member_phone,
            member_nickname=update_data.member_nickname,
            marketing_consent=update_data.marketing_consent,
        )
        self._validate(update)

        async with self._uow_factory() as uow:
            current = await uow.member_repository.get_by_id(member_num)
            if not current:
                raise MemberNotFoundException(member_num)

            if update.member_email is not None and await uow.member_repository.email_in_use(
                update.member_email, exclude_member_num=member_num
            ):
                raise EmailAlreadyInUseException(update.member_email)

            if update.is_empty():
                return self._to_response_dto(current)

            updated = await uow.member_repository.update_profile(member_num, update)
            if not updated:
                raise MemberNotFoundException(member_num)

            logger.info(
                "member_profile_updated",
                member_num=member_num,
                fields=sorted(update.supplied_fields()),
            )
            return self._to_response_dto(updated)

    def _validate(self, update: ProfileUpdate) -> None:
        if update.member_email is not None:
            validators.validate_email(update.member_email)
        if update.member_nickname is not None:
            validators.validate_nickname(update.member_nickname)
        if update.member_phone is not None:
            validators.validate_phone(update.member_phone)
        if update.marketing_consent is not None:
            validators.validate_boolean(update.marketing_consent, "marketing_consent")

    def _to_response_dto(self, member: Member) -> MemberResponseDTO:
        """将领域实体转换为响应DTO"""
        return MemberResponseDTO(
            member_num=member.member_num,
            member_id=member.member_id,
            member_email=member.member_email,
            member_phone=member.member_phone,
            member_gender=member.member_gender,
            member_nickname=member.member_nickname,
            member_birth_date=(
                member.member_birth_date.strftime("%Y.%m.%d") if member.member_birth_date else None
            ),
            member_status=member.member_status,
            member_join_date=member.member_join_date,
            member_leave_date=member.member_leave_date,
            marketing_consent=member.marketing_consent,
        )
