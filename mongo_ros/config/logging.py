"""Process logging for warehouse connection nodes: one stdout handler, level from settings, quiet driver."""

import logging
import sys
from typing import Any

from mongo_ros.config.settings import get_settings


def configure_logging() -> None:
    """Configure process logging from settings."""
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # app_name tells nodes apart when several share one log stream
    fmt = f"%(asctime)s | %(levelname)s | {settings.app_name} | %(name)s | %(message)s"
    datefmt = "%Y-%m-%dT%H:%M:%S"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # pymongo logs every heartbeat and server selection at DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(name)


def log_extra(extra: dict[str, Any]) -> dict[str, Any]:
    """Build a dict suitable for logger.info(..., **log_extra(...)) for structured fields."""
    return {"extra": extra}
