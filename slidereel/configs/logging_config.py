"""
Logging configuration for slidereel (configs).

Application modules log through loguru; uvicorn and fastapi keep the
standard library loggers on stdout while loguru writes to stderr. When a log
file is configured both also write to rotating files under the log directory.
"""

import logging.config
import os
import sys
from typing import Any

from loguru import logger as loguru_logger

from slidereel.configs.config import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    log_dir: str | None = None,
) -> None:
    """Configure stdlib and loguru sinks; ``log_file`` enables file output."""
    level = (log_level or config.log_level).upper()
    handlers: dict[str, Any] = {
        "console": {
            "level": level,
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "stream": "ext://sys.stdout",
        }
    }
    file_path: str | None = None
    if log_file:
        log_dir = log_dir or config.log_dir
        os.makedirs(log_dir, exist_ok=True)
        file_path = os.path.join(log_dir, log_file)
        handlers["file"] = {
            "level": "DEBUG",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": file_path,
            "maxBytes": 10485760,
            "backupCount": 5,
            "formatter": "standard",
        }

    logger_config = {"level": level, "handlers": list(handlers), "propagate": False}
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"}
            },
            "handlers": handlers,
            "loggers": {
                "uvicorn": dict(logger_config),
                "fastapi": dict(logger_config),
            },
            "root": {"level": level, "handlers": list(handlers)},
        }
    )

    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=level)
    if file_path is not None:
        loguru_logger.add(
            f"{os.path.splitext(file_path)[0]}.loguru.log",
            level="DEBUG",
            rotation="10 MB",
            retention=5,
            diagnose=False,
        )
