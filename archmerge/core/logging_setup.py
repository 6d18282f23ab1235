"""Loguru configuration for archmerge."""

import sys

from loguru import logger

from archmerge.core.config import Settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(settings: Settings) -> None:
    """Configure loguru based on settings."""
    logger.remove()  # Remove default handler

    level = "DEBUG" if settings.archmerge_debug else settings.archmerge_log_level

    logger.add(
        sys.stderr,
        level=level,
        format=LOG_FORMAT,
        colorize=True,
    )

    if settings.archmerge_log_file:
        logger.add(
            settings.archmerge_log_file,
            rotation="1 day",
            retention="7 days",
            level=level,
            format=LOG_FORMAT,
        )
