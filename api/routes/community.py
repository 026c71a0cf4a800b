"""
社区API路由
"""
from typing import List

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_community_service, get_current_identity
from application.dto import (
    CommentCreateDTO,
    CommentResponseDTO,
    PostCreateDTO,
    PostResponseDTO,
)
from application.services.community_service import CommunityApplicationService
from application.services.token_service import AuthIdentity
from core.response import Response as ApiResponse, success_response

router = APIRouter(
    prefix="/community",
    tags=["community"]
)


@router.get("", summary="帖子列表", response_model=ApiResponse[List[PostResponseDTO]])
async def list_posts(
    visibility: bool = Query(False, description="true: 公开帖子；false（默认）: 仅自己可见的帖子"),
    identity: AuthIdentity = Depends(get_current_identity),
    service: CommunityApplicationService = Depends(get_community_service),
):
    posts = await service.list_posts(visibility, identity.member_num)
    return success_response(data=posts)


@router.post(
    "",
    summary="发布帖子",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[PostResponseDTO],
)
async def create_post(
    body: PostCreateDTO,
    identity: AuthIdentity = Depends(get_current_identity),
    service: CommunityApplicationService = Depends(get_community_service),
):
    post = await service.create_post(identity.member_num, body)
    return success_response(data=post, message="Post created successfully")


@router.post(
    "/comments",
    summary="发表评论",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[CommentResponseDTO],
)
async def create_comment(
    body: CommentCreateDTO,
    identity: AuthIdentity = Depends(get_current_identity),
    service: CommunityApplicationService = Depends(get_community_service),
):
    comment = await service.create_comment(identity.member_num, body)
    return success_response(data=comment, message="Comment created successfully")


@router.get("/{posts_id}", summary="帖子详情", response_model=ApiResponse[PostResponseDTO])
async def get_post(
    posts_id: int,
    identity: AuthIdentity = Depends(get_current_identity),
    service: CommunityApplicationService = Depends(get_community_service),
):
    post = await service.get_post(posts_id, identity.member_num)
    return success_response(data=post)


@router.get(
    "/{posts_id}/comments",
    summary="帖子评论列表",
    response_model=ApiResponse[List[CommentResponseDTO]],
)
async def list_comments(
    posts_id: int,
    _identity: AuthIdentity = Depends(get_current_identity),
    service: CommunityApplicationService = Depends(get_community_service),
):
    comments = await service.list_comments(posts_id)
    return success_response(data=comments)
