# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
import os
import sys
import threading
from logging.handlers import TimedRotatingFileHandler
from typing import Optional, Union

from app.common.trace import get_trace_id

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] [%(trace_id)s] %(message)s"
LOG_DATEFMT = "%d-%m-%Y %H:%M:%S"
LOG_BACKUP_DAYS = 14

_LEVEL_ALIASES = {"warn": "WARNING", "fatal": "CRITICAL"}


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        # extra={"trace_id": ...} 显式传入时优先
        if not getattr(record, "trace_id", None):
            setattr(record, "trace_id", get_trace_id())
        return True


def resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    name = _LEVEL_ALIASES.get(level.strip().lower(), level.strip().upper())
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level}")
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_path: Optional[str] = None,
    log_name: str = "app",
) -> None:
    """初始化全局日志：控制台 + 按天滚动的文件，每行带 trace_id"""

    root = logging.getLogger()
    root.setLevel(resolve_level(level))
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if log_path and not any(isinstance(h, TimedRotatingFileHandler) for h in root.handlers):
        os.makedirs(log_path, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            os.path.join(log_path, f"logger-{log_name}.log"),
            when="midnight",
            backupCount=LOG_BACKUP_DAYS,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # 给现有 handler 全部加 filter
    for h in root.handlers:
        has_filter = any(isinstance(f, TraceIdFilter) for f in getattr(h, "filters", []))
        if not has_filter:
            h.addFilter(TraceIdFilter())


def log_exception_hooks() -> None:
    """未捕获异常（主线程 / 子线程）统一写日志"""

    logger = logging.getLogger("app.uncaught")

    def _excepthook(exc_type, exc_value, exc_tb) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_tb))

    def _thread_excepthook(args: threading.ExceptHookArgs) -> None:
        logger.critical(
            "Uncaught exception in thread %s",
            args.thread.name if args.thread else "?",
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )

    sys.excepthook = _excepthook
    threading.excepthook = _thread_excepthook
