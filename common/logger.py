"""日志配置 - JSON 行日志 + 请求级上下文"""

import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

from common.config import BASE_DIR, LoggingConfig

# 通过 extra= 或请求上下文带入的字段
_CONTEXT_FIELDS = ("request_id", "user_id", "conversation_id", "model")

# 当前请求的上下文，由请求日志中间件写入；后台任务创建时会复制一份
_request_context: ContextVar[Optional[Dict[str, str]]] = ContextVar(
    "rubi_request_context", default=None
)


def bind_request_context(**fields: str) -> None:
    """绑定当前请求的上下文字段（空值忽略）"""
    _request_context.set({k: v for k, v in fields.items() if v})


class RequestContextFilter(logging.Filter):
    """把请求上下文补到记录上；调用方显式传入的 extra 优先"""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in (_request_context.get() or {}).items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class JSONFormatter(logging.Formatter):
    """一行一个 JSON 对象"""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def _handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())
    return handler


def setup_logging(config: LoggingConfig) -> None:
    """安装控制台和（可选的）按天轮转文件 handler"""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    root_logger.handlers.clear()

    root_logger.addHandler(_handler(logging.StreamHandler()))

    # file_path 为空时只输出到控制台
    if config.file_path:
        log_path = Path(config.file_path)
        if not log_path.is_absolute():
            log_path = BASE_DIR / log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(
            _handler(
                TimedRotatingFileHandler(
                    log_path,
                    when="midnight",
                    backupCount=config.backup_count,
                    encoding="utf-8",
                )
            )
        )

    for module, level in config.module_levels.items():
        logging.getLogger(module).setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """获取命名 logger"""
    return logging.getLogger(name)
