"""
数据库引擎与会话工厂

事务边界由 SQLAlchemyUnitOfWork 控制，这里只负责创建连接。
"""
from typing import Any, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from core.config import settings
from infrastructure.models import Base


_ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "postgres": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


def build_async_url(database_url: str) -> str:
    """未指定驱动时补上异步驱动；已带驱动（postgresql+asyncpg）的原样返回"""
    url = make_url(database_url)
    if "+" in url.drivername:
        return database_url
    try:
        return url.set(drivername=_ASYNC_DRIVERS[url.drivername]).render_as_string(hide_password=False)
    except KeyError:
        raise ValueError(f"Unsupported database driver: {url.drivername}") from None


def _engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.database.echo}
    if not make_url(url).drivername.startswith("sqlite"):
        # 长连接可能被数据库侧断开
        options["pool_pre_ping"] = True
    return options


_url = build_async_url(settings.database.url)
engine: AsyncEngine = create_async_engine(_url, **_engine_options(_url))

AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False)


async def create_tables(bind: AsyncEngine = None) -> None:
    """按模型建表，仅用于开发环境启动与测试"""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(bind: AsyncEngine = None) -> None:
    """删除全部表，只允许在测试中使用"""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
