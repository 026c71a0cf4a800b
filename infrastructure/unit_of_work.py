"""SQLAlchemy 版 Unit of Work：一个实例对应一个会话、一个事务"""
from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from domain.common.unit_of_work import AbstractUnitOfWork
from infrastructure.database import AsyncSessionLocal
from infrastructure.repositories.community_repository import (
    SQLAlchemyCommunityRepository,
    SQLAlchemyThreadRepository,
)
from infrastructure.repositories.member_repository import SQLAlchemyMemberRepository
from infrastructure.repositories.related_records_repository import (
    SQLAlchemyRelatedRecordsRepository,
)


class SQLAlchemyUnitOfWork(AbstractUnitOfWork):

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession] = AsyncSessionLocal,
        *,
        readonly: bool = False,
    ) -> None:
        super().__init__(readonly=readonly)
        self._session_factory = session_factory
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self.session = self._session_factory()
        self.member_repository = SQLAlchemyMemberRepository(self.session)
        self.related_records_repository = SQLAlchemyRelatedRecordsRepository(self.session)
        self.community_repository = SQLAlchemyCommunityRepository(self.session)
        self.thread_repository = SQLAlchemyThreadRepository(self.session)
        if not self.readonly:
            await self.session.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            # close() 会丢弃未提交的只读事务
            await self.session.close()
            self.session = None
            self.member_repository = None
            self.related_records_repository = None
            self.community_repository = None
            self.thread_repository = None

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
