"""Centralized logging configuration.

Modules obtain loggers with ``logging.getLogger(__name__)``; the API
lifespan and the demo script call :func:`configure_logging` once at startup.
"""

import logging
import logging.config

from geo_semantic_cache.config import settings


def build_logging_config(level: str) -> dict:
    """Build a ``dictConfig`` mapping for the given root level."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
            }
        },
        "loggers": {
            "geo_semantic_cache": {"level": level},
            # External libraries
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
        "root": {"level": level, "handlers": ["console"]},
    }


_logging_configured = False


def configure_logging(level: str | None = None, force: bool = False) -> None:
    """Apply the logging configuration once per process.

    Args:
        level: Root log level. Defaults to settings.log_level.
        force: Re-apply even if logging was already configured.
    """
    global _logging_configured
    if _logging_configured and not force:
        return
    logging.config.dictConfig(build_logging_config(level or settings.log_level))
    _logging_configured = True
