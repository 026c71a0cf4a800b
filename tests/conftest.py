"""Pytest bootstrap configuration.

Ensure mandatory environment variables are set before test collection
and module imports that depend on application settings.
"""
import os

# Mandatory secret key for settings validation
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE__URL", "sqlite+aiosqlite:///:memory:")
# 非 DEBUG 模式下未捕获异常才会走全局处理器（否则 Starlette 返回调试页）
os.environ["DEBUG"] = "false"

from datetime import date, datetime, timedelta, timezone
from functools import partial

import httpx
import jwt
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.config import settings
from infrastructure.database import create_tables, drop_tables
from infrastructure.models import MemberModel
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(bind=engine)
    yield engine
    await drop_tables(bind=engine)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def uow_factory(session_factory):
    return partial(SQLAlchemyUnitOfWork, session_factory=session_factory)


@pytest.fixture
def seed(session_factory):
    """直接写入测试数据（绕过应用服务）"""

    async def _seed(*rows):
        async with session_factory() as session:
            session.add_all(rows)
            await session.commit()

    return _seed


@pytest.fixture
def fetch_all(session_factory):
    async def _fetch_all(model, **filters):
        from sqlalchemy import select

        query = select(model)
        for name, value in filters.items():
            query = query.where(getattr(model, name) == value)
        async with session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    return _fetch_all


def make_member(member_num: int, **overrides) -> MemberModel:
    values = dict(
        member_num=member_num,
        member_id=f"user{member_num}",
        member_email=f"user{member_num}@example.com",
        member_phone="01012345678",
        member_gender="F",
        member_nickname=f"nick{member_num}",
        member_birth_date=date(1990, 1, 2),
        member_status="active",
        marketing_consent=False,
    )
    values.update(overrides)
    return MemberModel(**values)


@pytest.fixture
def member_factory():
    return make_member


def make_token(claims: dict, secret: str = None, expires_in: int = 3600) -> str:
    payload = dict(claims)
    payload.setdefault("exp", datetime.now(timezone.utc) + timedelta(seconds=expires_in))
    return jwt.encode(payload, secret or settings.SECRET_KEY, algorithm=settings.ALGORITHM)


@pytest.fixture
def token_for():
    def _token_for(member_num: int, **kwargs) -> str:
        return make_token({"sub": str(member_num)}, **kwargs)

    return _token_for


@pytest.fixture
def auth_headers(token_for):
    def _auth_headers(member_num: int) -> dict:
        return {"Authorization": f"Bearer {token_for(member_num)}"}

    return _auth_headers


@pytest.fixture
async def client(uow_factory):
    """指向内存数据库的 API 客户端"""
    from main import app
    from api.dependencies import (
        get_community_service,
        get_deactivation_service,
        get_member_service,
    )
    from application.services.community_service import CommunityApplicationService
    from application.services.deactivation_service import DeactivationService
    from application.services.member_service import MemberApplicationService
    from application.services.orphan_cleaner import OrphanCleaner

    app.dependency_overrides[get_member_service] = lambda: MemberApplicationService(uow_factory)
    app.dependency_overrides[get_deactivation_service] = lambda: DeactivationService(
        uow_factory, orphan_cleaner=OrphanCleaner(uow_factory)
    )
    app.dependency_overrides[get_community_service] = lambda: CommunityApplicationService(uow_factory)

    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
