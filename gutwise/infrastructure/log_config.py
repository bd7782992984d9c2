"""Logging setup.

Configures structlog and the stdlib root logger from settings.
"""

import logging
from typing import Union

import structlog


def configure_logging(level: Union[str, int] = "INFO", json: bool = False) -> None:
    """
    Configure structlog processors and the stdlib log level.

    Args:
        level: Log level name or number (unknown names fall back to INFO)
        json: Render JSON lines instead of the console renderer

    Example:
        >>> configure_logging("DEBUG")
        >>> structlog.get_logger(__name__).debug("Dish scored", score=90)
    """
    if isinstance(level, str):
        numeric_level = getattr(logging, level.strip().upper(), logging.INFO)
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO
    else:
        numeric_level = level

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger().setLevel(numeric_level)

    renderer = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
