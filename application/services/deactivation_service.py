"""
成员注销（软删除）流程

1. 读取成员：不存在 -> 404；已是 inactive -> 400（接口层面不幂等）
2. 按固定顺序把名下记录置为停用状态：书评、帖子、评论、讨论串条目
3. 成员状态改为 inactive 并记录注销时间
4. 提交后清理孤立的讨论串条目（失败不影响注销结果）

步骤 1-3 在同一个 Unit of Work（单个事务）中执行，任何一步失败整体回滚。
关联记录的批量更新本身是幂等的，重复请求收敛到同一结果。
"""
from datetime import datetime, timezone
from typing import Callable, Optional

from application.dto import DeactivationResultDTO
from application.services.orphan_cleaner import OrphanCleaner
from core.logging_config import get_logger
from domain.common.exceptions import MemberDeactivationFailedException, MemberNotFoundException
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.member.entity import (
    BOOK_REVIEW_DEACTIVATED_STATUS,
    COMMUNITY_COMMENT_DEACTIVATED_STATUS,
    COMMUNITY_POST_DEACTIVATED_STATUS,
    MEMBER_STATUS_INACTIVE,
    THREAD_ENTRY_DEACTIVATED_STATUS,
)


logger = get_logger(__name__)


class DeactivationService:

    def __init__(
        self,
        uow_factory: Callable[..., AbstractUnitOfWork],
        orphan_cleaner: Optional[OrphanCleaner] = None,
    ):
        self._uow_factory = uow_factory
        self._orphan_cleaner = orphan_cleaner

    async def deactivate(self, member_num: int) -> DeactivationResultDTO:
        async with self._uow_factory() as uow:
            member = await uow.member_repository.get_by_id(member_num)
            if not member:
                raise MemberNotFoundException(member_num)
            member.ensure_can_deactivate()

            related = uow.related_records_repository
            counts = {
                "book_review": await related.set_book_review_status(
                    member_num, BOOK_REVIEW_DEACTIVATED_STATUS
                ),
                "community": await related.set_community_post_status(
                    member_num, COMMUNITY_POST_DEACTIVATED_STATUS
                ),
                "community_comment": await related.set_community_comment_status(
                    member_num, COMMUNITY_COMMENT_DEACTIVATED_STATUS
                ),
                "thread_main": await related.set_thread_entry_status(
                    member_num, THREAD_ENTRY_DEACTIVATED_STATUS
                ),
            }
            logger.info("related_records_deactivated", member_num=member_num, **counts)

            change = await uow.member_repository.set_status(
                member_num, MEMBER_STATUS_INACTIVE, datetime.now(timezone.utc)
            )
            if change is None:
                # 读取之后成员行消失
                raise MemberDeactivationFailedException(member_num)

        logger.info("member_deactivated", member_num=member_num)

        if self._orphan_cleaner is not None:
            await self._orphan_cleaner.run()

        return DeactivationResultDTO(member_num=change.member_num, member_status=change.member_status)
