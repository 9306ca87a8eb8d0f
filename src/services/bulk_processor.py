"""Bulk approval over many content ids in bounded concurrent waves.

# ─── DESIGN ────────────────────────────────────────────────────────────
#
# bulk_approve() splits the ids into ordered chunks of ``concurrency``:
#
#   [a, b, c, d, e], concurrency=2  →  [a, b] ─pause─ [c, d] ─pause─ [e]
#
#   - Every id in a chunk is approved concurrently (no order within a chunk).
#   - Per-id failures are caught and itemized; they never abort the batch
#     or cancel the chunk's other approvals.
#   - A fixed backoff separates chunks (not after the last one) so
#     downstream publishing/dataset systems are not flooded.
#
# Each run binds a short ``bulk_run_id`` and the ``admin_id`` as log context,
# so the events of its concurrent approvals can be grouped.
#
# There is no cancellation: once started, a run processes every chunk.
# Batch-size limits belong to the caller boundary (ReviewService); this
# component handles any number of ids.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Awaitable, Callable, Sequence

import structlog

from src.models.decisions import (
    ApprovalOptions,
    ApprovalResult,
    BulkApprovalOptions,
    BulkItemError,
    BulkResult,
)
from src.services.approval_engine import ApprovalEngine
from src.utils.concurrency import chunked, gather_settled
from src.utils.errors import InputValidationError, ReviewEngineError, UnsupportedOperationError
from src.utils.logging import review_context

logger = structlog.get_logger(logger_name=__name__)

Sleep = Callable[[float], Awaitable[None]]


class BulkProcessor:
    """Runs many ApprovalEngine.approve calls under a concurrency cap.

    Parameters
    ----------
    engine:
        The approval engine each id is approved through.
    backoff_seconds:
        Pause between chunks.
    sleep:
        Awaitable sleep function; ``asyncio.sleep`` unless a test swaps it.
    """

    def __init__(
        self,
        engine: ApprovalEngine,
        backoff_seconds: float = 1.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._engine = engine
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep

    async def bulk_approve(
        self,
        content_ids: Sequence[str],
        admin_id: str,
        options: BulkApprovalOptions | None = None,
    ) -> BulkResult:
        """Approve every id, chunk by chunk, collecting successes and failures."""
        if not admin_id or not admin_id.strip():
            raise InputValidationError("An admin identity is required for review actions")
        options = options or BulkApprovalOptions()
        approval = ApprovalOptions(
            notes=options.admin_notes,
            quality_rating=options.default_quality_rating,
            auto_publish=options.auto_publish,
        )

        chunks = chunked(list(content_ids), options.concurrency)
        results: list[ApprovalResult] = []
        errors: list[BulkItemError] = []

        with review_context(bulk_run_id=uuid.uuid4().hex[:12], admin_id=admin_id):
            logger.info(
                "bulk_approve_started",
                total=len(content_ids),
                chunks=len(chunks),
                concurrency=options.concurrency,
            )

            for index, chunk in enumerate(chunks):
                outcomes = await gather_settled(
                    [self._engine.approve(content_id, admin_id, approval) for content_id in chunk]
                )
                for content_id, outcome in zip(chunk, outcomes, strict=True):
                    if isinstance(outcome, BaseException):
                        errors.append(self._to_error(content_id, outcome))
                    else:
                        results.append(outcome)

                logger.debug("bulk_chunk_finished", chunk=index + 1, of=len(chunks), size=len(chunk))
                if index < len(chunks) - 1:
                    await self._sleep(self._backoff_seconds)

            logger.info("bulk_approve_finished", success_count=len(results), error_count=len(errors))

        return BulkResult(
            total_items=len(content_ids),
            success_count=len(results),
            error_count=len(errors),
            results=results,
            errors=errors,
        )

    async def bulk_reject(self, content_ids: Sequence[str], admin_id: str, reason: str) -> BulkResult:
        """Not supported: bulk rejection must be done item by item."""
        raise UnsupportedOperationError("Bulk reject is not implemented")

    @staticmethod
    def _to_error(content_id: str, exc: BaseException) -> BulkItemError:
        if isinstance(exc, ReviewEngineError):
            message, code = exc.message, exc.code
        else:
            message, code = str(exc) or type(exc).__name__, "internal"
        logger.warning("bulk_item_failed", content_id=content_id, error=message, code=code)
        return BulkItemError(content_id=content_id, error=message, code=code)
