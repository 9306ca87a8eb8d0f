"""Structured logging for the review engine, built on structlog.

Events carry snake_case names plus key/value context.  Context that spans
many calls (a bulk run, an ingestion batch) is bound once with
:func:`review_context` and merged into every event emitted inside the
block, including events from concurrently running approvals, because the
bindings live in :mod:`contextvars`.

Rendering is JSON when ``json_output`` is set (the composition root sets
it for ``app_env == "production"``) and a coloured console otherwise.
Standard-library ``logging`` records go through the same processors.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.StackInfoRenderer(),
    structlog.dev.set_exc_info,
    structlog.processors.TimeStamper(fmt="iso"),
]


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Install the review engine's structlog and stdlib logging configuration.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Render JSON lines instead of the console format.

    Returns:
        A configured structlog BoundLogger.
    """
    level = logging.getLevelName(log_level.upper())
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_SHARED_PROCESSORS,
                renderer,
            ],
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)


@contextmanager
def review_context(**bindings: Any) -> Iterator[None]:
    """Bind review context such as ``bulk_run_id`` or ``batch_job_id`` for a block.

    ``None`` values are skipped.  Bindings are removed again on exit, and
    tasks started inside the block inherit them.
    """
    values = {key: value for key, value in bindings.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**values):
        yield
