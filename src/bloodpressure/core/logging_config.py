"""Blood pressure health client - Logging Configuration.

Structured console logging with configurable levels for development and
production environments.
"""

import logging
import logging.config
import sys
from typing import Any

from bloodpressure.core.config import get_settings

logger = logging.getLogger(__name__)

# Track if logging has been configured
_logging_configured = False


def setup_logging(force: bool = False) -> None:
    """Configure logging for the application based on environment settings.

    Args:
        force: If True, force reconfiguration even if already configured.
               Default is False to prevent duplicate handlers.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    settings = get_settings()

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": (
                    "%(asctime)s | %(name)s | %(levelname)s | "
                    "%(filename)s:%(lineno)d | %(funcName)s | %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "simple": {
                "format": "%(asctime)s | %(levelname)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.log_level,
                "formatter": "detailed" if settings.debug else "simple",
                "stream": sys.stderr,
            },
        },
        "loggers": {
            "bloodpressure": {
                "level": settings.log_level,
                "propagate": True,
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(logging_config)
    _logging_configured = True

    logger.info(
        "Logging configured for %s environment with level %s",
        settings.environment,
        settings.log_level,
    )
