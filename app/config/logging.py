"""
Logging configuration.

Configures loguru sinks with file rotation and retention policies.
"""

import sys

from loguru import logger

from app.config.settings import settings


def setup_logging(log_file: str | None = None, level: str | None = None) -> None:
    """
    Configure logger with stderr and a rotating file sink.

    Args:
        log_file: Log file path (defaults to LOG_FILE)
        level: Minimum level (defaults to LOG_LEVEL)
    """
    level = (level or settings.log_level).upper()

    logger.remove()
    logger.add(sys.stderr, level=level)
    logger.add(
        log_file or settings.log_file,
        rotation="1 day",
        retention="7 days",
        level=level,
        encoding="utf-8",
    )

    logger.info(f"Logging configured (level={level}, env={settings.environment})")
