"""
structlog setup for Backend TZInfer.

Modules log through get_logger(__name__) with a snake_case event as the first
argument (activity_fetch_failed, timezone_cache_miss, address_inferred, ...) and
keyword context. Per-address pipeline steps log through bind_address so every
line carries the address.

LOG_LEVEL (default INFO) and LOG_FORMAT (json, anything else renders for the
console) are read when logging is first configured, after .env has been loaded.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO

import structlog

from backend_tzinfer.config.env import load_tzinfer_env


def _level_value(name: str) -> int:
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: str | None = None,
    fmt: str | None = None,
    *,
    stream: TextIO | None = None,
    force: bool = False,
) -> None:
    """
    Configure structlog: ISO UTC timestamp, level, event renamed to event_type.

    Explicit level/fmt win over LOG_LEVEL/LOG_FORMAT. Without force, an existing
    configuration is left alone.
    """
    if structlog.is_configured() and not force:
        return
    load_tzinfer_env()
    level = level or os.getenv("LOG_LEVEL") or "INFO"
    fmt = (fmt or os.getenv("LOG_FORMAT") or "json").strip().lower()
    out = stream or sys.stdout

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.EventRenamer("event_type"),
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=out.isatty(), event_key="event_type"))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_value(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("timezone_cache_miss", address_count=3, workers=5)

    JSON line: {"address_count": 3, "workers": 5, "logger": "...", "level": "info",
    "timestamp": "...Z", "event_type": "timezone_cache_miss"}
    """
    configure_logging()
    return structlog.get_logger(name).bind(logger=name)


def bind_address(address: str, name: str = "backend_tzinfer") -> structlog.BoundLogger:
    """Logger for one address: every call carries address=<address>."""
    return get_logger(name).bind(address=address)
