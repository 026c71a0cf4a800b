"""
日志配置：structlog + 标准库 logging 共用一条处理链

开发环境输出彩色控制台格式，其他环境输出单行 JSON。
请求级字段（request_id、member_num 等）通过 contextvars 自动合并。
"""
import json
import logging
from typing import Any, List

import structlog
from structlog.contextvars import merge_contextvars
from structlog.stdlib import ProcessorFormatter

from core.config import settings


# 第三方库的默认级别，避免刷屏
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
}


def _json_dumps(obj, default=None, **kwargs) -> str:
    # 昵称、邮箱可能含韩文，保留原文
    return json.dumps(obj, ensure_ascii=False, default=default, **kwargs)


def _renderer(json_output: bool) -> Any:
    if json_output:
        return structlog.processors.JSONRenderer(serializer=_json_dumps)
    return structlog.dev.ConsoleRenderer(colors=True)


def _add_service(_, __, event_dict):
    event_dict.setdefault("service", settings.PROJECT_NAME)
    return event_dict


def configure_logging() -> None:
    """在应用入口调用一次；重复调用会替换 root handler，不会重复输出"""
    level_name = (settings.LOG_LEVEL or ("DEBUG" if settings.DEBUG else "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    json_output = settings.LOG_JSON if settings.LOG_JSON is not None else not settings.DEBUG

    pre_chain: List[Any] = [
        merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[ProcessorFormatter.remove_processors_meta, _renderer(json_output)],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name, quiet_level in _QUIET_LOGGERS.items():
        if name == "sqlalchemy.engine" and settings.database.echo:
            continue
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
