"""
Core logging module.

This module configures the application logging with Loguru.
"""

import logging
import os
import sys

from loguru import logger

from shortlink.core.config import settings
from shortlink.middleware.logging import request_id_var

# Levels that get their own file when LOG_PER_LEVEL_FILES is enabled
PER_LEVEL_FILES = ("DEBUG", "INFO", "WARNING", "ERROR")


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging and redirect to loguru.

    Services log through the standard library so that any logger can be
    injected into them; this handler routes those records to loguru sinks.
    """

    def emit(self, record: logging.LogRecord) -> None:
        # Try to get corresponding Loguru level or use level number
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where the logged message originated
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def add_request_id(record) -> None:
    """Tag a record with the id of the request being served, unless already bound."""
    record["extra"].setdefault("request_id", request_id_var.get())


def _level_filter(level_name: str):
    def _filter(record) -> bool:
        return record["level"].name == level_name
    return _filter


def setup_logging():
    """
    Configure application logging using Loguru.

    Adds a stderr sink in debug mode, a rotating application log file
    (JSON when LOG_JSON is set) and optional per-level files, then
    intercepts standard library logging.
    """
    os.makedirs(settings.LOG_DIR, exist_ok=True)

    # Remove default handlers
    logger.remove()
    logger.configure(patcher=add_request_id)

    if settings.DEBUG:
        logger.add(
            sys.stderr,
            level=settings.LOG_LEVEL.upper(),
            format=settings.LOG_FORMAT,
            backtrace=True,
            diagnose=True,
        )

    log_file_path = os.path.join(settings.LOG_DIR, settings.LOG_FILENAME)

    if settings.LOG_JSON:
        logger.add(
            log_file_path,
            level=settings.LOG_LEVEL.upper(),
            serialize=True,
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
            compression="gz",
        )
    else:
        logger.add(
            log_file_path,
            level=settings.LOG_LEVEL.upper(),
            format=settings.LOG_FORMAT,
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
            compression="gz",
        )

    if settings.LOG_PER_LEVEL_FILES:
        for level_name in PER_LEVEL_FILES:
            logger.add(
                os.path.join(settings.LOG_DIR, f"{level_name.lower()}.log"),
                level=level_name,
                filter=_level_filter(level_name),
                serialize=settings.LOG_JSON,
                rotation=settings.LOG_ROTATION,
                retention=settings.LOG_RETENTION,
                enqueue=True,
            )

    # Intercept standard library logging
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in list(logging.root.manager.loggerDict.keys()):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True

    for log_name in ["uvicorn", "uvicorn.access", "uvicorn.error", "fastapi"]:
        logging_logger = logging.getLogger(log_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False

    return logger
