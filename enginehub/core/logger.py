"""
统一日志入口

基于 loguru，所有模块通过 `from enginehub.core.logger import logger` 使用
"""

import sys

from loguru import logger

_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO") -> None:
    """
    重新配置日志输出

    移除 loguru 默认 handler，按指定级别输出到 stderr
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=_LOG_FORMAT, backtrace=False)


__all__ = ["logger", "setup_logging"]
