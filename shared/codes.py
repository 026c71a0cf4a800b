"""
业务状态码

响应体里的 code 字段取值；HTTP 状态码由 core.exceptions 按这里的分段映射。
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    OK = 0

    # 1xxxx 请求参数
    PARAM_VALIDATION_ERROR = 10003

    # 2xxxx 成员
    BUSINESS_ERROR = 20000
    MEMBER_NOT_FOUND = 20001
    EMAIL_ALREADY_IN_USE = 20002
    MEMBER_ALREADY_DEACTIVATED = 20003
    NOT_FOUND = 20006

    # 21xxx 社区
    POST_NOT_FOUND = 21001
    COMMENT_NOT_FOUND = 21002

    # 3xxxx 认证与授权
    UNAUTHORIZED = 30001
    FORBIDDEN = 30002

    # 4xxxx 服务端
    SYSTEM_ERROR = 40000


__all__ = ["BusinessCode"]
