"""Logging utilities for the application.

This module configures Loguru to emit logs to the console and an
optional rotating file.  It also bridges the standard Python ``logging``
module to Loguru so that records from uvicorn, httpx and openai
end up in the same sinks.
"""

from __future__ import annotations

import sys
import logging
from pathlib import Path

from loguru import logger

from ..config.app_config import AppConfig, get_app_config

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# Standard library loggers whose handlers are replaced by the Loguru bridge
BRIDGED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx", "openai")


class LoguruHandler(logging.Handler):
    """Handler to forward standard logging records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except (KeyError, ValueError):
            level = record.levelno

        # Find the caller from where the logging call was made
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(app_config: AppConfig | None = None) -> "loguru.Logger":
    """Configure Loguru logging for the application.

    Removes the default Loguru handler, adds a colourised stdout sink and,
    when ``LOG_FILE`` is set, a file sink rotated at 10 MB and kept for 30
    days.  Calling it again replaces the sinks instead of duplicating them.
    """
    app_config = app_config or get_app_config()

    logger.remove()

    logger.add(
        sys.stdout,
        level=app_config.log_level,
        format=LOG_FORMAT,
        colorize=True,
        backtrace=True,
        diagnose=app_config.app_debug,
    )

    if app_config.log_file:
        log_path = Path(app_config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=app_config.log_level,
            format=LOG_FORMAT,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            backtrace=True,
            diagnose=app_config.app_debug,
        )

    logging.basicConfig(handlers=[LoguruHandler()], level=logging.WARNING, force=True)
    for name in BRIDGED_LOGGERS:
        bridged = logging.getLogger(name)
        bridged.handlers = [LoguruHandler()]
        bridged.propagate = False

    logger.info("Logging configured successfully")
    logger.debug("App environment: {}", app_config.app_env)
    logger.debug("Log level: {}", app_config.log_level)

    return logger
