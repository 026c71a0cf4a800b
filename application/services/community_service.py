"""
社区应用服务 - 帖子与评论
"""
from typing import Callable, List

from application.dto import (
    CommentCreateDTO,
    CommentResponseDTO,
    PostCreateDTO,
    PostResponseDTO,
)
from core.logging_config import get_logger
from domain.common.exceptions import (
    CommentsNotFoundException,
    MemberNotFoundException,
    PostNotFoundException,
)
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.community.entity import (
    COMMENT_STATUS_ACTIVE,
    POST_STATUS_ACTIVE,
    CommunityComment,
    CommunityPost,
)
from domain.member import validators


logger = get_logger(__name__)


class CommunityApplicationService:

    def __init__(self, uow_factory: Callable[..., AbstractUnitOfWork]):
        self._uow_factory = uow_factory

    async def create_post(self, member_num: int, data: PostCreateDTO) -> PostResponseDTO:
        validators.require_fields(data.model_dump(), ["post_title", "post_content"])
        status = data.post_status if data.post_status is not None else POST_STATUS_ACTIVE
        validators.validate_status(status, validators.POST_STATUSES, field="post_status")
        visibility = validators.validate_boolean(data.visibility, "visibility")

        async with self._uow_factory() as uow:
            author = await uow.member_repository.get_by_id(member_num)
            if not author:
                raise MemberNotFoundException(member_num)
            post = await uow.community_repository.create_post(
                CommunityPost(
                    posts_id=None,
                    member_num=member_num,
                    post_title=data.post_title,
                    post_content=data.post_content,
                    post_status=status,
                    visibility=visibility,
                )
            )
            post.member_nickname = author.member_nickname
            post.member_email = author.member_email

        logger.info("community_post_created", posts_id=post.posts_id, member_num=member_num)
        return PostResponseDTO.model_validate(post)

    async def list_posts(self, visibility: bool, member_num: int) -> List[PostResponseDTO]:
        """公开列表返回所有人的帖子；非公开列表只返回调用者自己的"""
        async with self._uow_factory(readonly=True) as uow:
            posts = await uow.community_repository.list_posts(visibility, member_num=member_num)
        return [PostResponseDTO.model_validate(p) for p in posts]

    async def get_post(self, posts_id: int, member_num: int) -> PostResponseDTO:
        async with self._uow_factory(readonly=True) as uow:
            post = await uow.community_repository.get_post(posts_id)
        # 他人的非公开帖子同样视为不存在
        if not post or (not post.visibility and post.member_num != member_num):
            raise PostNotFoundException(posts_id)
        return PostResponseDTO.model_validate(post)

    async def create_comment(self, member_num: int, data: CommentCreateDTO) -> CommentResponseDTO:
        validators.require_fields(data.model_dump(), ["posts_id", "comment_content"])

        async with self._uow_factory() as uow:
            if not await uow.community_repository.get_post(data.posts_id):
                raise PostNotFoundException(data.posts_id)
            comment = await uow.community_repository.create_comment(
                CommunityComment(
                    comment_id=None,
                    posts_id=data.posts_id,
                    member_num=member_num,
                    comment_content=data.comment_content,
                    comment_status=COMMENT_STATUS_ACTIVE,
                )
            )

        logger.info(
            "community_comment_created",
            comment_id=comment.comment_id,
            posts_id=comment.posts_id,
            member_num=member_num,
        )
        return CommentResponseDTO.model_validate(comment)

    async def list_comments(self, posts_id: int) -> List[CommentResponseDTO]:
        async with self._uow_factory(readonly=True) as uow:
            comments = await uow.community_repository.list_comments(posts_id)
        if not comments:
            raise CommentsNotFoundException(posts_id)
        return [CommentResponseDTO.model_validate(c) for c in comments]
