"""structlog setup shared by the whole package."""

import logging
import sys

import structlog

from weather_viewmodel.config import settings


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure stdlib logging and structlog.

    Args:
        log_level: Level name such as INFO or DEBUG.
        log_format: "json" for machine-readable output, anything else for console.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stdout)

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger("weather_viewmodel")
