"""
日志模块

通过环境变量 LOG_BACKEND 选择日志后端：
- simple: 标准库 logging（默认，无额外配置）
- loguru: Loguru，彩色输出

日志级别取自 LOG_LEVEL（默认 INFO）。

用法:
    from common.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Fetched 3 message(s)")
"""

import logging
import os
import sys
from typing import Any, Optional

from loguru import logger as _loguru_logger

SUPPORTED_BACKENDS = ("simple", "loguru")

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_backend: Optional[str] = None


def _configure_simple(level: str) -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
    else:
        logging.basicConfig(level=level, format=DEFAULT_FORMAT)


def _configure_loguru(level: str) -> None:
    _loguru_logger.remove()
    _loguru_logger.configure(extra={"name": "root"})
    _loguru_logger.add(
        sys.stderr,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} [{level}] {extra[name]}: {message}",
    )


def set_log_backend(backend: str, level: Optional[str] = None) -> None:
    """
    切换日志后端

    Args:
        backend: simple 或 loguru
        level: 日志级别，默认读取 LOG_LEVEL

    Raises:
        ValueError: 不支持的后端
    """
    global _backend

    backend = backend.lower()
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unsupported log backend: {backend}. "
            f"Valid values: {', '.join(SUPPORTED_BACKENDS)}"
        )

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if backend == "loguru":
        _configure_loguru(level)
    else:
        _configure_simple(level)

    _backend = backend


def get_log_backend() -> str:
    """获取当前日志后端（首次调用时按环境变量初始化）"""
    if _backend is None:
        set_log_backend(os.getenv("LOG_BACKEND", "simple"))
    return _backend  # type: ignore[return-value]


def get_logger(name: str) -> Any:
    """
    获取日志记录器

    Args:
        name: 记录器名称，通常为 __name__

    Returns:
        simple 后端返回 logging.Logger，loguru 后端返回绑定了 name 的 Loguru logger
    """
    if get_log_backend() == "loguru":
        return _loguru_logger.bind(name=name)
    return logging.getLogger(name)
