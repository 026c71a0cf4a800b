"""
社区仓储实现：帖子/评论读写，以及 thread_main 的孤立记录清理
"""
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.community.entity import CommunityComment, CommunityPost
from domain.community.repository import CommunityRepository, ThreadRepository
from infrastructure.models.community import (
    CommunityCommentModel,
    CommunityPostModel,
    ThreadEntryModel,
    ThreadModel,
)
from infrastructure.models.member import MemberModel


class SQLAlchemyCommunityRepository(CommunityRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    def _post_to_entity(self, model: CommunityPostModel, author: Optional[MemberModel] = None) -> CommunityPost:
        return CommunityPost(
            posts_id=model.posts_id,
            member_num=model.member_num,
            post_title=model.post_title,
            post_content=model.post_content,
            post_status=model.post_status,
            visibility=model.visibility,
            post_created_at=model.post_created_at,
            post_deleted_at=model.post_deleted_at,
            member_nickname=author.member_nickname if author else None,
            member_email=author.member_email if author else None,
        )

    def _comment_to_entity(
        self, model: CommunityCommentModel, author: Optional[MemberModel] = None
    ) -> CommunityComment:
        return CommunityComment(
            comment_id=model.comment_id,
            posts_id=model.posts_id,
            member_num=model.member_num,
            comment_content=model.comment_content,
            comment_status=model.comment_status,
            comment_created_at=model.comment_created_at,
            comment_deleted_at=model.comment_deleted_at,
            member_nickname=author.member_nickname if author else None,
            member_email=author.member_email if author else None,
        )

    def _posts_with_author(self):
        return (
            select(CommunityPostModel, MemberModel)
            .join(MemberModel, MemberModel.member_num == CommunityPostModel.member_num)
            .where(CommunityPostModel.post_deleted_at.is_(None))
        )

    async def create_post(self, post: CommunityPost) -> CommunityPost:
        db_post = CommunityPostModel(
            member_num=post.member_num,
            post_title=post.post_title,
            post_content=post.post_content,
            post_status=post.post_status,
            visibility=post.visibility,
        )
        self.session.add(db_post)
        await self.session.flush()
        await self.session.refresh(db_post)
        return self._post_to_entity(db_post)

    async def list_posts(self, visibility: bool, member_num: Optional[int] = None) -> List[CommunityPost]:
        query = self._posts_with_author().where(CommunityPostModel.visibility == visibility)
        # "仅自己可见"列表再按作者过滤
        if not visibility and member_num is not None:
            query = query.where(CommunityPostModel.member_num == member_num)
        query = query.order_by(
            CommunityPostModel.post_created_at.desc(),
            CommunityPostModel.posts_id.desc(),
        )
        result = await self.session.execute(query)
        return [self._post_to_entity(post, author) for post, author in result.all()]

    async def get_post(self, posts_id: int) -> Optional[CommunityPost]:
        result = await self.session.execute(
            self._posts_with_author().where(CommunityPostModel.posts_id == posts_id)
        )
        row = result.first()
        return self._post_to_entity(*row) if row else None

    async def create_comment(self, comment: CommunityComment) -> CommunityComment:
        db_comment = CommunityCommentModel(
            posts_id=comment.posts_id,
            member_num=comment.member_num,
            comment_content=comment.comment_content,
            comment_status=comment.comment_status,
        )
        self.session.add(db_comment)
        await self.session.flush()
        await self.session.refresh(db_comment)
        return self._comment_to_entity(db_comment)

    async def list_comments(self, posts_id: int) -> List[CommunityComment]:
        result = await self.session.execute(
            select(CommunityCommentModel, MemberModel)
            .join(MemberModel, MemberModel.member_num == CommunityCommentModel.member_num)
            .where(
                CommunityCommentModel.posts_id == posts_id,
                CommunityCommentModel.comment_deleted_at.is_(None),
            )
            .order_by(
                CommunityCommentModel.comment_created_at.asc(),
                CommunityCommentModel.comment_id.asc(),
            )
        )
        return [self._comment_to_entity(comment, author) for comment, author in result.all()]


class SQLAlchemyThreadRepository(ThreadRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def delete_orphaned_entries(self) -> int:
        # 与条目自身的 thread_status 无关，只看父 thread 是否存在
        result = await self.session.execute(
            delete(ThreadEntryModel)
            .where(ThreadEntryModel.thread_num.not_in(select(ThreadModel.thread_num)))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
