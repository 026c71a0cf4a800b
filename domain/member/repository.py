"""
成员仓储接口 - 定义数据访问的抽象接口
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List

from .entity import Member, MemberStatusChange, NicknameChangeRecord, ProfileUpdate


class MemberRepository(ABC):
    """成员仓储抽象接口 - 只定义能做什么，不管怎么做"""

    @abstractmethod
    async def get_by_id(self, member_num: int) -> Optional[Member]:
        """根据ID获取成员"""
        pass

    @abstractmethod
    async def get_nickname_history(self, member_num: int) -> List[NicknameChangeRecord]:
        """昵称变更历史，按变更时间倒序；没有记录时返回空列表"""
        pass

    @abstractmethod
    async def email_in_use(self, email: str, exclude_member_num: int) -> bool:
        """邮箱是否已被其他成员使用"""
        pass

    @abstractmethod
    async def update_profile(self, member_num: int, update: ProfileUpdate) -> Optional[Member]:
        """部分更新资料；昵称发生变化时追加一条变更记录"""
        pass

    @abstractmethod
    async def set_status(
        self,
        member_num: int,
        status: str,
        leave_date: Optional[datetime] = None,
    ) -> Optional[MemberStatusChange]:
        """设置成员状态，成员不存在时返回 None"""
        pass


class RelatedRecordsRepository(ABC):
    """成员名下关联记录的批量状态更新。

    每个操作都是幂等的：对同一成员重复执行结果相同，匹配 0 行不算错误。
    返回受影响的行数。
    """

    @abstractmethod
    async def set_book_review_status(self, member_num: int, status: str) -> int:
        pass

    @abstractmethod
    async def set_community_post_status(self, member_num: int, status: str) -> int:
        pass

    @abstractmethod
    async def set_community_comment_status(self, member_num: int, status: str) -> int:
        pass

    @abstractmethod
    async def set_thread_entry_status(self, member_num: int, status: bool) -> int:
        pass
