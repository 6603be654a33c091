"""
Structured logging configuration.

Provides two formats:
  - **json**  (default): machine-readable structured logs.
  - **console**: human-friendly text output.

Events emitted by entitymap:
  - DEBUG  ``entitymap.mappers.field_inspector``: fields described for a
    class (entity, fields, hidden).
  - DEBUG  ``entitymap.mappers.entity_mapper``: entity populated from a
    source map (entity, key_count) and converted to a map (entity,
    field_count).
  - ERROR  ``entitymap.mappers.entity_mapper``: batch mapping stopped
    (entity, index, error_code, error).

The library never configures logging on import; applications call
``setup_logging`` once if they want the entitymap defaults.

Usage:
    from entitymap.core.logging import setup_logging, get_logger

    setup_logging()                   # optional, once at startup
    logger = get_logger(__name__)     # per-module logger
    logger.debug("Entity populated", extra={"entity": "User"})
"""

import logging
import sys
from typing import Literal

from pythonjsonlogger import json as json_logger

from entitymap.config import get_settings


LOG_FORMAT_CONSOLE = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
)

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str | None = None,
    log_format: Literal["json", "console"] | None = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level:      Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                    Defaults to ``Settings.log_level``.
        log_format: 'json' for structured JSON lines, 'console' for
                    human-readable. Defaults to ``Settings.log_format``.
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    log_format = log_format or settings.log_format

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicate log lines
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if log_format == "json":
        formatter = _build_json_formatter()
    else:
        formatter = logging.Formatter(
            LOG_FORMAT_CONSOLE, datefmt=LOG_DATE_FORMAT)

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    root_logger.info(
        "Logging initialised",
        extra={"log_level": level, "log_format": log_format},
    )


def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger.

    Convention: call with ``get_logger(__name__)`` in each module.
    """
    return logging.getLogger(name)


# ─── Internal ─────────────────────────────────────────────────────────


def _build_json_formatter() -> json_logger.JsonFormatter:
    """Build a JSON log formatter with standard fields."""
    return json_logger.JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt=LOG_DATE_FORMAT,
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        },
    )
