from __future__ import annotations

import logging
import os
from logging.config import dictConfig
from typing import Any

# Loggers that flood DEBUG output while Playwright drives its event loop.
_QUIET_LOGGERS = ("asyncio", "urllib3")


def _logging_dict(level: int) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)-8s %(name)s - %(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }


def resolve_level(level_name: str | int | None) -> int:
    """Turn 'debug', 'INFO', 20 or None into a numeric level. Unknown names map to INFO."""
    if level_name is None:
        level_name = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level_name, int):
        return level_name
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: str | int | None = None) -> None:
    """Configure logging for the test run.

    - If `level_name` is a string like 'INFO' it will be resolved to the numeric level.
    - If None, tries `LOG_LEVEL` env var, otherwise defaults to INFO.
    Handlers stay at DEBUG so the root logger alone decides what is shown.
    """
    level = resolve_level(level_name)
    dictConfig(_logging_dict(level))
