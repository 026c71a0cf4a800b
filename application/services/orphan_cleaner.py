"""
孤立讨论串条目清理

thread 表不由本服务维护，thread_main.thread_num 也没有外键约束，
父 thread 被删除后留下的条目在这里物理删除。这是尽力而为的对账任务：
任何失败只记录日志，不向调用方抛出。
"""
from typing import Callable

from core.logging_config import get_logger
from domain.common.unit_of_work import AbstractUnitOfWork


logger = get_logger(__name__)


class OrphanCleaner:

    def __init__(self, uow_factory: Callable[..., AbstractUnitOfWork]):
        self._uow_factory = uow_factory

    async def run(self) -> int:
        """执行一次清理，返回删除的行数；失败时返回 0"""
        try:
            async with self._uow_factory() as uow:
                deleted = await uow.thread_repository.delete_orphaned_entries()
        except Exception as exc:
            logger.error("orphan_cleanup_failed", error=str(exc), exc_info=True)
            return 0

        logger.info("orphaned_thread_entries_deleted", count=deleted)
        return deleted
