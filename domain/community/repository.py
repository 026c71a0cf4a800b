"""
社区仓储接口
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from .entity import CommunityComment, CommunityPost


class CommunityRepository(ABC):

    @abstractmethod
    async def create_post(self, post: CommunityPost) -> CommunityPost:
        pass

    @abstractmethod
    async def list_posts(
        self,
        visibility: bool,
        member_num: Optional[int] = None,
    ) -> List[CommunityPost]:
        """未软删除的帖子，按创建时间倒序"""
        pass

    @abstractmethod
    async def get_post(self, posts_id: int) -> Optional[CommunityPost]:
        """软删除的帖子视为不存在"""
        pass

    @abstractmethod
    async def create_comment(self, comment: CommunityComment) -> CommunityComment:
        pass

    @abstractmethod
    async def list_comments(self, posts_id: int) -> List[CommunityComment]:
        """未软删除的评论，按创建时间正序"""
        pass


class ThreadRepository(ABC):
    """thread_main 维护操作；thread 表本身由其他服务管理"""

    @abstractmethod
    async def delete_orphaned_entries(self) -> int:
        """物理删除引用了不存在 thread 的 thread_main 记录，返回删除行数"""
        pass
