"""
Logging setup shared by the analysis CLI and the HTTP service.

Every line looks like:
    2026-01-06T14:05:52Z [api] INFO Analyzed community north-hall: 42 members

Environment Variables:
    LOG_LEVEL: "INFO" (default), "DEBUG" or "TRACE"
               - TRACE logs every synthesized relationship and union step

Usage:
    from reslife.logging_config import configure_logging, get_logger

    configure_logging(source="cli", stream=sys.stderr)
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from typing import TextIO

# Below DEBUG, for per-edge output
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def _trace(self: logging.Logger, message: object, *args: object, **kw: object) -> None:
    """Log a message at TRACE level (5)."""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kw)  # type: ignore[arg-type]


logging.Logger.trace = _trace  # type: ignore[attr-defined]


class ISO8601Formatter(logging.Formatter):
    """Formats records as `<UTC timestamp> [source] LEVEL message`."""

    def __init__(self, source: str = "reslife"):
        self.source = source
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        message = record.getMessage()

        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        return f"{timestamp} [{self.source}] {record.levelname} {message}"


class HealthCheckFilter(logging.Filter):
    """Drops uvicorn access lines for the health endpoint unless they are DEBUG."""

    HEALTH_PATHS = {"/health", "/api/health"}

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno <= logging.DEBUG:
            return True

        message = record.getMessage()
        return all(not (path in message and ("GET" in message or "200" in message)) for path in self.HEALTH_PATHS)


def level_from_env(debug: bool | None = None) -> int:
    """Resolve LOG_LEVEL (TRACE/DEBUG/INFO); debug=True forces at least DEBUG."""
    log_level_env = os.getenv("LOG_LEVEL", "").upper()
    if log_level_env == "TRACE":
        return TRACE
    if log_level_env == "DEBUG" or debug:
        return logging.DEBUG
    return logging.INFO


def configure_logging(
    source: str = "reslife",
    level: int | None = None,
    debug: bool | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Install a single formatted handler on the root logger.

    Args:
        source: Tag shown in brackets ("api", "cli", ...)
        level: Explicit level; defaults to the LOG_LEVEL environment variable
        debug: Force DEBUG when LOG_LEVEL is unset
        stream: Output stream, stdout by default. The CLI passes stderr so its
            report stays clean on stdout.

    Returns:
        Configured root logger
    """
    if level is None:
        level = level_from_env(debug)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ISO8601Formatter(source=source))
    handler.addFilter(HealthCheckFilter())
    root_logger.addHandler(handler)

    # uvicorn installs its own handlers, which would bypass the filter
    for uvicorn_logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(uvicorn_logger_name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(handler)
        uvicorn_logger.setLevel(level)
        uvicorn_logger.propagate = False

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(name)
