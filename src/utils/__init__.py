"""Utility modules for the review engine.

Available utility modules (all re-exported here for convenience):

- **concurrency** -- per-item ``KeyedLock`` plus the chunk/gather helpers
  that bulk operations use to process ids in bounded waves.
- **errors** -- Domain exception hierarchy rooted at ReviewEngineError;
  each failure category has its own subclass and stable ``code``.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text** -- markdown stripping, word counts, reading time and preview
  generation for content bodies.
"""

# -- Async concurrency helpers ---------------------------------------------
from src.utils.concurrency import KeyedLock, chunked, gather_settled

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    ContentNotFoundError,
    InputValidationError,
    InternalEngineError,
    InvalidTransitionError,
    ReviewEngineError,
    UnsupportedOperationError,
)

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger, review_context

# -- Content text helpers --------------------------------------------------
from src.utils.text import build_preview, count_words, reading_time_minutes, strip_markdown

__all__ = [
    "ContentNotFoundError",
    "InputValidationError",
    "InternalEngineError",
    "InvalidTransitionError",
    "KeyedLock",
    "ReviewEngineError",
    "UnsupportedOperationError",
    "build_preview",
    "chunked",
    "configure_logging",
    "count_words",
    "gather_settled",
    "get_logger",
    "reading_time_minutes",
    "review_context",
    "strip_markdown",
]
