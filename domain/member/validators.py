"""
输入校验规则 - 纯函数，不做任何 I/O

所有校验在写库之前执行，任一失败立即抛出 DomainValidationException，
调用方不得继续后续写操作。
"""
import re
from typing import Any, Iterable, Mapping

from domain.common.exceptions import DomainValidationException


NICKNAME_MIN_LENGTH = 1
NICKNAME_MAX_LENGTH = 20
PHONE_LENGTH = 11
PHONE_PREFIX = "010"

POST_STATUSES = frozenset({"active", "inactive"})

# Unicode Hangul 文字的全部区段（含字母扩展 A/B 与半角字母）
_HANGUL_PATTERN = re.compile(
    "["
    "\u1100-\u11FF"
    "\u302E-\u302F"
    "\u3130-\u318F"
    "\u3200-\u321E"
    "\u3260-\u327E"
    "\uA960-\uA97F"
    "\uAC00-\uD7AF"
    "\uD7B0-\uD7FF"
    "\uFFA0-\uFFDC"
    "]"
)


def contains_hangul(value: str) -> bool:
    return bool(_HANGUL_PATTERN.search(value))


def require_fields(data: Mapping[str, Any], names: Iterable[str]) -> None:
    """业务规则：必填字段存在且去除空白后非空"""
    for name in names:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise DomainValidationException(f"{name} is required", field=name)


def validate_email(email: Any) -> str:
    """业务规则：邮箱包含且仅包含一个 @，两侧非空，且不含韩文"""
    message = "Invalid email format or Korean characters detected"
    if not isinstance(email, str) or not email:
        raise DomainValidationException(message, field="member_email")
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain or "@" in domain:
        raise DomainValidationException(message, field="member_email")
    if contains_hangul(email):
        raise DomainValidationException(message, field="member_email")
    return email


def utf16_length(value: str) -> int:
    # 按 UTF-16 码元计数，BMP 以外的字符（如 emoji）占 2
    return len(value.encode("utf-16-le", errors="surrogatepass")) // 2


def validate_nickname(nickname: Any) -> str:
    """业务规则：昵称长度 1-20（UTF-16 码元）"""
    if not isinstance(nickname, str) or not (
        NICKNAME_MIN_LENGTH <= utf16_length(nickname) <= NICKNAME_MAX_LENGTH
    ):
        raise DomainValidationException(
            "Nickname must be between 1 and 20 characters",
            field="member_nickname",
        )
    return nickname


def validate_phone(phone: Any) -> str:
    """业务规则：11 位数字且以 010 开头"""
    if (
        not isinstance(phone, str)
        or len(phone) != PHONE_LENGTH
        or not phone.isascii()
        or not phone.isdigit()
        or not phone.startswith(PHONE_PREFIX)
    ):
        raise DomainValidationException(
            "Phone number must be 11 digits and start with 010",
            field="member_phone",
        )
    return phone


def validate_status(value: Any, allowed: Iterable[str], *, field: str = "status") -> str:
    allowed = frozenset(allowed)
    if value not in allowed:
        raise DomainValidationException(
            f"Invalid status value: {value}",
            field=field,
            details={"allowed": sorted(allowed)},
        )
    return value


def validate_boolean(value: Any, field: str) -> bool:
    # bool 是 int 的子类，这里只接受真正的 True/False
    if not isinstance(value, bool):
        raise DomainValidationException(f"{field} must be true or false", field=field)
    return value
