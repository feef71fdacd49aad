"""Process-wide logging configuration for CLI entrypoints."""

from __future__ import annotations

import logging.config

_LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"


def config_configure_logging(log_level: str) -> None:
    """Install the console logging configuration.

    Args:
        log_level: Root logger level name.

    Returns:
        None: Logging is configured as a side effect.

    Raises:
        ValueError: Raised when the level name is not recognized by `logging`.
    """

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"console": {"format": _LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "console",
                    "stream": "ext://sys.stderr",
                }
            },
            "root": {"level": log_level, "handlers": ["console"]},
        }
    )
