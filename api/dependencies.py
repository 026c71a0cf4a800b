"""
API依赖项 - 认证与应用服务装配
"""
from typing import Callable, Optional, Sequence

from fastapi import Request
import structlog

from application.services.community_service import CommunityApplicationService
from application.services.deactivation_service import DeactivationService
from application.services.member_service import MemberApplicationService
from application.services.orphan_cleaner import OrphanCleaner
from application.services.token_service import AuthIdentity, TokenVerifier
from core.config import settings
from core.exceptions import UnauthorizedException
from core.logging_config import get_logger
from domain.common.exceptions import MemberAccessForbiddenException
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork


logger = get_logger(__name__)

TokenReader = Callable[[Request], Optional[str]]


class CookieTokenReader:
    """从 Cookie 读取令牌"""

    def __init__(self, cookie_name: str):
        self.cookie_name = cookie_name

    def __call__(self, request: Request) -> Optional[str]:
        return request.cookies.get(self.cookie_name) or None


class BearerHeaderReader:
    """从 Authorization: Bearer <token> 读取令牌"""

    def __call__(self, request: Request) -> Optional[str]:
        header = request.headers.get("Authorization")
        if not header:
            return None
        scheme, _, credentials = header.partition(" ")
        if scheme.lower() != "bearer" or not credentials.strip():
            return None
        return credentials.strip()


class AuthGuard:
    """
    认证守卫

    按固定优先级依次尝试各个 reader（先 Cookie，再 Bearer 头），
    取到的第一个令牌交给同一个 TokenVerifier 校验。成功后把身份写入
    request.state.identity，并绑定到日志上下文；除此之外没有副作用。
    """

    def __init__(self, verifier: TokenVerifier, readers: Sequence[TokenReader]):
        self._verifier = verifier
        self._readers = tuple(readers)

    def extract_token(self, request: Request) -> Optional[str]:
        for reader in self._readers:
            token = reader(request)
            if token:
                return token
        return None

    async def __call__(self, request: Request) -> AuthIdentity:
        token = self.extract_token(request)
        if token is None:
            logger.info("token_rejected", reason="missing")
            raise UnauthorizedException()

        identity = self._verifier.verify(token)
        request.state.identity = identity
        structlog.contextvars.bind_contextvars(member_num=identity.member_num)
        return identity


get_current_identity = AuthGuard(
    TokenVerifier(settings.SECRET_KEY, settings.ALGORITHM),
    readers=(CookieTokenReader(settings.AUTH_COOKIE_NAME), BearerHeaderReader()),
)


def ensure_self(member_num: int, identity: AuthIdentity) -> None:
    """成员相关接口只能作用于调用者本人，目标 ID 永远来自令牌"""
    if member_num != identity.member_num:
        logger.warning(
            "member_access_forbidden",
            target_member_num=member_num,
            member_num=identity.member_num,
        )
        raise MemberAccessForbiddenException()


async def get_member_service() -> MemberApplicationService:
    return MemberApplicationService(uow_factory=SQLAlchemyUnitOfWork)


async def get_deactivation_service() -> DeactivationService:
    cleaner = OrphanCleaner(SQLAlchemyUnitOfWork) if settings.ORPHAN_CLEANUP_ON_DEACTIVATION else None
    return DeactivationService(uow_factory=SQLAlchemyUnitOfWork, orphan_cleaner=cleaner)


async def get_community_service() -> CommunityApplicationService:
    return CommunityApplicationService(uow_factory=SQLAlchemyUnitOfWork)
