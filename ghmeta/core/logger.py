"""Logging setup shared by the library and the CLI.

structlog renders key/value events and hands them to the standard logging
module, which writes to stderr so that JSON written to stdout stays
parseable.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

import structlog


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure stdlib logging and structlog.

    Args:
        level: Minimum level, either a logging constant or a name such as
            "DEBUG".
    """
    numeric = _coerce_level(level)
    logging.basicConfig(level=numeric, stream=sys.stderr, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to `name`."""
    return structlog.get_logger(name)
