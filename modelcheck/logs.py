"""Structured logging setup.

Library modules log through ``structlog.get_logger()`` and never configure
structlog themselves. Applications embedding modelcheck call
``configure_logging()`` once at startup, or install their own configuration.
"""

import logging

import structlog

from modelcheck.config import get_settings


def configure_logging(level: str | None = None) -> None:
    """Configure structlog with the processor chain used across modelcheck.

    Args:
        level: Log level name. Defaults to ``Settings.LOG_LEVEL``.
    """
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()
    min_level = logging.getLevelName(level_name)
    if not isinstance(min_level, int):
        min_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        cache_logger_on_first_use=False,
    )
