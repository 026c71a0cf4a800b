"""
成员关联记录仓储实现 - 按作者批量更新状态
"""
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.member.repository import RelatedRecordsRepository
from infrastructure.models.community import (
    BookReviewModel,
    CommunityCommentModel,
    CommunityPostModel,
    ThreadEntryModel,
)


class SQLAlchemyRelatedRecordsRepository(RelatedRecordsRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _bulk_set(self, model, column, member_num: int, value) -> int:
        result = await self.session.execute(
            update(model)
            .where(model.member_num == member_num)
            .values({column: value})
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def set_book_review_status(self, member_num: int, status: str) -> int:
        return await self._bulk_set(BookReviewModel, "review_status", member_num, status)

    async def set_community_post_status(self, member_num: int, status: str) -> int:
        return await self._bulk_set(CommunityPostModel, "post_status", member_num, status)

    async def set_community_comment_status(self, member_num: int, status: str) -> int:
        return await self._bulk_set(CommunityCommentModel, "comment_status", member_num, status)

    async def set_thread_entry_status(self, member_num: int, status: bool) -> int:
        return await self._bulk_set(ThreadEntryModel, "thread_status", member_num, status)
