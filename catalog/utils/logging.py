# catalog/utils/logging.py
import logging
import sys
from pathlib import Path
from typing import Union

from loguru import logger

from catalog.config import LOG_DIR, LOG_JSON, LOG_LEVEL

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[module]}:{line} | {message}"

# uvicorn and pymongo log through the standard library
STDLIB_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "pymongo")


class InterceptHandler(logging.Handler):
    """Forwards standard library log records to loguru."""

    def emit(self, record: logging.LogRecord):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(module=record.name).opt(exception=record.exc_info).log(level, record.getMessage())


class CatalogLogger:
    """Loguru sinks for the catalog service: console, plus request/error files when LOG_DIR is set"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._configure()
        return cls._instance

    def _configure(self):
        logger.remove()
        logger.configure(extra={"module": "catalog"})

        if LOG_JSON:
            logger.add(sys.stdout, serialize=True, level=LOG_LEVEL)
        else:
            logger.add(sys.stdout, colorize=True, format=CONSOLE_FORMAT, level=LOG_LEVEL)

        self.log_path = Path(LOG_DIR) if LOG_DIR else None
        if self.log_path is not None:
            self.log_path.mkdir(parents=True, exist_ok=True)
            logger.add(
                self.log_path / "catalog.log",
                rotation="50 MB",
                retention=5,
                format=FILE_FORMAT,
                serialize=LOG_JSON,
                level=LOG_LEVEL,
            )
            logger.add(
                self.log_path / "catalog_error.log",
                rotation="10 MB",
                retention=5,
                format=FILE_FORMAT,
                serialize=LOG_JSON,
                level="ERROR",
                backtrace=True,
            )

        for name in STDLIB_LOGGERS:
            stdlib_logger = logging.getLogger(name)
            stdlib_logger.handlers = [InterceptHandler()]
            stdlib_logger.propagate = False

    @staticmethod
    def get_logger(name: Union[str, None] = None):
        return logger.bind(module=name or "catalog")


catalog_logger = CatalogLogger()


def get_logger(name: Union[str, None] = None):
    return catalog_logger.get_logger(name)
