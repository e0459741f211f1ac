"""
sources_config.core.logging
─────────────────────────────
Structured startup logs. Resolution runs once before the service serves
anything, so there is no request context: events carry the resolution
mode via startup_context() and are rendered as JSON lines (or console
output for local runs) on stderr. stdout belongs to the CLI's document.

Minimal stack: structlog over stdlib logging
Configure via: LOG_LEVEL, LOG_FORMAT=json|console
"""
from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, Any

import structlog

_handler: logging.Handler | None = None


def configure_logging(
    level: str | None = None,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """
    (Re)configure structlog and the root handler. Arguments override
    LOG_LEVEL / LOG_FORMAT; calling again replaces the previous handler.
    """
    global _handler
    level_no = getattr(logging, (level or os.getenv("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    fmt = (fmt or os.getenv("LOG_FORMAT", "json")).lower()

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    renderer: Any = (
        structlog.dev.ConsoleRenderer() if fmt == "console" else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(level_no)
    _handler = handler


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structured logger, configuring logging on first use."""
    if _handler is None:
        configure_logging()
    return structlog.get_logger(name or __name__)


@contextmanager
def startup_context(**fields: Any) -> Iterator[None]:
    """
    Attach fields to every event logged inside the block. Fields bound by
    the caller beforehand are restored on exit.

        with startup_context(mode="clowder"):
            log.info("endpoints.resolved", kafka_url=...)
    """
    with structlog.contextvars.bound_contextvars(**fields):
        yield
