"""
令牌校验服务 - 只负责验证，令牌由外部登录服务签发
"""
from dataclasses import dataclass, field
from typing import Any, Dict

import jwt

from core.exceptions import UnauthorizedException
from core.logging_config import get_logger


logger = get_logger(__name__)

# 优先读取标准 sub，兼容旧登录服务签发的 memberNum
MEMBER_CLAIMS = ("sub", "memberNum")


@dataclass(frozen=True)
class AuthIdentity:
    """已认证的调用方身份，挂在 request.state.identity 上"""
    member_num: int
    claims: Dict[str, Any] = field(default_factory=dict)


class TokenVerifier:
    """
    JWT 校验器

    密钥与算法在构造时注入（应用启动时从配置读取一次），
    不在每次调用时读取环境变量。签名错误、过期、缺少成员标识
    对外一律表现为同一个 UnauthorizedException，具体原因只写日志。
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self._algorithm = algorithm

    def verify(self, token: str) -> AuthIdentity:
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )
        except jwt.ExpiredSignatureError:
            logger.info("token_rejected", reason="expired")
            raise UnauthorizedException()
        except jwt.InvalidTokenError as exc:
            logger.warning("token_rejected", reason="invalid", error=str(exc))
            raise UnauthorizedException()

        raw = next((payload[c] for c in MEMBER_CLAIMS if payload.get(c) is not None), None)
        if raw is None or isinstance(raw, bool):
            logger.warning("token_rejected", reason="missing_member_claim")
            raise UnauthorizedException()
        try:
            member_num = int(raw)
        except (TypeError, ValueError):
            logger.warning("token_rejected", reason="malformed_member_claim")
            raise UnauthorizedException()

        return AuthIdentity(member_num=member_num, claims=payload)
