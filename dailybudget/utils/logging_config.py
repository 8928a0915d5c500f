"""Loguru sink configuration shared by the API and the Celery worker."""
from __future__ import annotations

import sys

from loguru import logger

from dailybudget.config import settings


def configure_logging(level: str | None = None) -> None:
    """Replace the default loguru sink with one honouring ``LOG_LEVEL``."""

    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or settings.LOG_LEVEL).upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan> - <level>{message}</level> | {extra}"
        ),
        backtrace=False,
    )


def short_key(key: str) -> str:
    """Return a log-friendly prefix of a subscription key."""

    return key[:12]
