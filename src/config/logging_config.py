"""日志配置模块."""

import logging
from typing import Optional

from .settings import settings

# 每个流式请求都会在INFO级别打印一行请求日志
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: Optional[str] = None, format_str: Optional[str] = None):
    """
    设置日志配置.

    Args:
        level: 日志级别，默认使用settings.log_level
        format_str: 日志格式，默认使用settings.log_format
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format=format_str or settings.log_format,
        handlers=[logging.StreamHandler()],
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """获取指定名称的logger实例."""
    return logging.getLogger(name)
