"""
成员API路由 - FastAPI表现层
"""
from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import (
    ensure_self,
    get_current_identity,
    get_deactivation_service,
    get_member_service,
)
from application.dto import (
    DeactivationResultDTO,
    MemberResponseDTO,
    MemberUpdateDTO,
    NicknameHistoryDTO,
)
from application.services.deactivation_service import DeactivationService
from application.services.member_service import MemberApplicationService
from application.services.token_service import AuthIdentity
from core.response import Response as ApiResponse, success_response

router = APIRouter(
    prefix="/member",
    tags=["member"]
)


@router.get("/me", summary="获取当前成员信息", response_model=ApiResponse[MemberResponseDTO])
async def get_current_member(
    identity: AuthIdentity = Depends(get_current_identity),
    service: MemberApplicationService = Depends(get_member_service),
):
    member = await service.get_member(identity.member_num)
    return success_response(data=member, message="Member information retrieved successfully")


@router.get(
    "/nicknames/{member_num}",
    summary="昵称变更历史",
    response_model=ApiResponse[List[NicknameHistoryDTO]],
)
async def get_member_nicknames(
    member_num: int,
    identity: AuthIdentity = Depends(get_current_identity),
    service: MemberApplicationService = Depends(get_member_service),
):
    """按变更时间倒序返回；没有任何记录时返回 404"""
    ensure_self(member_num, identity)
    history = await service.get_nickname_history(member_num)
    return success_response(data=history, message="Nickname change history retrieved successfully")


@router.put("/{member_num}", summary="修改成员信息", response_model=ApiResponse[MemberResponseDTO])
async def update_member(
    member_num: int,
    update_data: MemberUpdateDTO,
    identity: AuthIdentity = Depends(get_current_identity),
    service: MemberApplicationService = Depends(get_member_service),
):
    """
    部分更新成员资料

    - **member_email**: 只能有一个 @，不能包含韩文，不能与他人重复
    - **member_phone**: 11 位数字，以 010 开头
    - **member_nickname**: 1-20 个字符，变更时记录历史
    - **marketing_consent**: true / false

    未提供（或为 null）的字段保持原值。
    """
    ensure_self(member_num, identity)
    member = await service.update_member(member_num, update_data)
    return success_response(data=member, message="Member information updated successfully")


@router.delete("/{member_num}", summary="成员注销", response_model=ApiResponse[DeactivationResultDTO])
async def delete_membership(
    member_num: int,
    identity: AuthIdentity = Depends(get_current_identity),
    service: DeactivationService = Depends(get_deactivation_service),
):
    """注销目标必须是令牌中的成员本人；名下书评、帖子、评论、讨论串条目一并停用"""
    ensure_self(member_num, identity)
    result = await service.deactivate(identity.member_num)
    return success_response(data=result, message="Membership successfully deactivated")
