"""Structured logging setup (structlog on top of stdlib logging)."""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        level: Minimum log level name ("DEBUG", "INFO", ...).
        json_output: Render JSON lines when True, console key=value otherwise.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
        force=True,
    )

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a named structlog logger."""
    return structlog.get_logger(name)


def bind_tenant(tenant_id: str | None) -> None:
    """Attach (or detach) the active tenant id to every subsequent log line."""
    if tenant_id is None:
        structlog.contextvars.unbind_contextvars("tenant_id")
    else:
        structlog.contextvars.bind_contextvars(tenant_id=tenant_id)
