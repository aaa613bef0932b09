"""vendordeps 日志配置

库本身只通过 logging.getLogger(__name__) 打日志，不主动配置 handler；
CLI 入口调用 setup_logging() 选择文本或 JSON 输出。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

PACKAGE_LOGGER = "vendordeps"

# 通过 logger.info(..., extra={...}) 附带的结构化字段
_EXTRA_FIELDS = ("coordinate", "url", "path")


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器，便于 CI 流水线消费

    输出格式:
        {
            "timestamp": "2024-01-01T12:00:00+00:00",
            "level": "INFO",
            "logger": "vendordeps.core.dep.fetcher",
            "message": "已下载 ...",
            "coordinate": "com.ctre:phoenix6:24.1.0",  (仅在 extra 提供时)
            "exception": "traceback..."  (仅在有异常时)
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = str(value)
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置 vendordeps 包日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        json_output: 为 True 时使用 JSON 格式（适用于 CI），否则使用人类可读格式

    说明:
        - 输出到 stderr，stdout 留给编译参数等命令输出
        - 只配置 "vendordeps" 日志器，不影响宿主程序的根日志器
        - 重复调用会先清理已有 handlers
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    reset_logging()

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        fmt = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
        handler.setFormatter(logging.Formatter(fmt))

    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """获取指定名称的 logger 实例，通常传入 __name__"""
    return logging.getLogger(name)


def reset_logging() -> None:
    """清理 vendordeps 日志器上的 handlers，恢复向根日志器传播

    常用于测试环境或需要重新配置日志的场景。
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
