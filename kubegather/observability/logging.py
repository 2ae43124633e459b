"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


def setup_logging(level: str = "info", json: bool = True) -> None:
    """Configure structlog output to stderr.

    JSON lines by default; ``json=False`` renders for a terminal. Records
    may be written to stdout by the archiver, so logs never share it.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]


@contextmanager
def gather_context(gatherer: str, **fields: object) -> Iterator[None]:
    """Bind *gatherer* (and *fields*) to every log line emitted inside the block.

    Context lives in contextvars, so tasks spawned inside the block inherit it.
    """
    with structlog.contextvars.bound_contextvars(gatherer=gatherer, **fields):
        yield
