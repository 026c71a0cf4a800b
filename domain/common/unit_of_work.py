"""Unit of Work 抽象：应用服务通过它拿到仓储，并把多次写操作放进同一个事务"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from domain.member.repository import MemberRepository, RelatedRecordsRepository
from domain.community.repository import CommunityRepository, ThreadRepository


class AbstractUnitOfWork(ABC):
    """
    用法::

        async with uow_factory() as uow:
            member = await uow.member_repository.get_by_id(42)

    正常退出时提交，块内抛出异常时回滚；readonly=True 时从不提交。
    仓储只在 async with 块内可用。
    """

    member_repository: Optional[MemberRepository]
    related_records_repository: Optional[RelatedRecordsRepository]
    community_repository: Optional[CommunityRepository]
    thread_repository: Optional[ThreadRepository]

    def __init__(self, *, readonly: bool = False) -> None:
        self.readonly = readonly
        self.member_repository = None
        self.related_records_repository = None
        self.community_repository = None
        self.thread_repository = None

    async def __aenter__(self) -> "AbstractUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc is not None:
            await self.rollback()
        elif not self.readonly:
            await self.commit()

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
