"""
Logging setup for the finance dates services

Services log through FinanceLogger so that every message can carry a
context dict (order_id, item_id, product_id...). The context is rendered as
JSON after the message so log files stay grep-able.

Author: TM3
Date: 2025-11-20
"""
import json
import logging
import os
from logging.handlers import TimedRotatingFileHandler
from typing import Any, Dict, Optional

LOG_SOURCE = "finance"
ROOT_LOGGER_NAME = "revenue_deferral"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(settings) -> logging.Logger:
    """
    Configure the package logger from application settings

    - LOG_LEVEL sets the level (FINANCE_DEBUG forces DEBUG)
    - LOG_TO_FILE adds a daily rotating finance.log under LOG_DIR
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    level = logging.DEBUG if settings.FINANCE_DEBUG else logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)
    # Emitted by the handlers below only, not again by the root logger
    logger.propagate = False

    # Avoid stacking handlers when the app is reloaded
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if settings.LOG_TO_FILE:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            os.path.join(settings.LOG_DIR, f"{LOG_SOURCE}.log"),
            when="midnight",
            backupCount=30,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


class FinanceLogger:
    """Leveled logger that accepts a context dict with every message"""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def log(self, level: int, message: str, context: Optional[Dict[str, Any]] = None, exc_info: bool = False) -> None:
        if context:
            message = f"{message} | {json.dumps(context, default=str, ensure_ascii=False)}"
        self._logger.log(level, message, exc_info=exc_info)

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.DEBUG, message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.INFO, message, context)

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.WARNING, message, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.ERROR, message, context)

    def critical(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.CRITICAL, message, context)

    def exception(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log at error level with the current traceback attached"""
        self.log(logging.ERROR, message, context, exc_info=True)
