"""Review service — the caller-facing command/query surface of the engine.

# ─── ARCHITECTURE ────────────────────────────────────────────────────
#
# ReviewService is one explicit engine instance: it owns a ReviewQueue,
# an ApprovalEngine, a BulkProcessor and a MetricsAggregator, and exposes
# the operations transport layers call:
#
#   enqueue / list_reviews / approved_feed / get_content_details  (queries)
#   approve / reject / edit / bulk_approve / bulk_reject (commands)
#   statistics / health / capabilities / templates    (dashboard)
#
# Every mutating command takes a mandatory ``admin_id``; there is no
# fallback identity.  Batch-size limits for bulk commands are enforced
# here, at the caller boundary.
#
# Construct through src.main.build_review_service(); call aclose() (or
# use src.main.review_engine()) to wait for in-flight background work.
#
# Layer: Services (top of the service layer)
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from src.config.review_templates import review_templates
from src.config.settings import Settings
from src.models.content import ContentCandidate
from src.models.decisions import (
    ApprovalOptions,
    ApprovalResult,
    BulkApprovalOptions,
    BulkResult,
    ContentDetails,
    ContentEdits,
    EditResult,
)
from src.models.metrics import HealthReport, HealthStatus, ReviewCapabilities, ReviewMetrics
from src.models.review import (
    ApprovedFeed,
    ApprovedFeedFilters,
    ReviewFilters,
    ReviewItem,
    ReviewPage,
)
from src.services.approval_engine import ApprovalEngine
from src.services.bulk_processor import BulkProcessor
from src.services.review_queue import ReviewQueue
from src.utils.errors import ContentNotFoundError, InputValidationError

logger = structlog.get_logger(logger_name=__name__)

_SUPPORTED_ACTIONS = ["approve", "reject", "edit"]


class ReviewService:
    """Facade over the review queue, approval engine and bulk processor."""

    def __init__(
        self,
        *,
        queue: ReviewQueue,
        engine: ApprovalEngine,
        bulk_processor: BulkProcessor,
        settings: Settings,
    ) -> None:
        self._queue = queue
        self._engine = engine
        self._bulk = bulk_processor
        self._settings = settings
        self._closed = False

    @property
    def queue(self) -> ReviewQueue:
        return self._queue

    @property
    def engine(self) -> ApprovalEngine:
        return self._engine

    # ─── Ingestion and queries ───────────────────────────────────────

    def enqueue(
        self,
        candidate: ContentCandidate,
        batch_job_id: str | None = None,
        priority: int = 1,
    ) -> ReviewItem:
        return self._queue.enqueue(candidate, batch_job_id=batch_job_id, priority=priority)

    def list_reviews(self, filters: ReviewFilters | None = None) -> ReviewPage:
        return self._queue.list_items(filters)

    def approved_feed(
        self,
        min_quality: int | None = None,
        auto_approved_only: bool = False,
        limit: int | None = None,
    ) -> ApprovedFeed:
        """Return the audited approved feed for downstream publishing.

        Includes both human approvals and auto-approvals, sorted by quality
        score descending.
        """
        try:
            filters = ApprovedFeedFilters(
                min_quality=min_quality,
                auto_approved_only=auto_approved_only,
                limit=limit,
            )
        except ValidationError as exc:
            raise InputValidationError(f"Invalid approved feed filters: {exc}") from exc
        return self._queue.approved_feed(filters)

    def get_content_details(self, content_id: str) -> ContentDetails:
        """Return the full review view of one item, including its edit history."""
        item = self._queue.get_by_content_id(content_id)
        if item is None:
            raise ContentNotFoundError(content_id=content_id)
        return ContentDetails(item=item, content=item.content, edit_history=list(item.edit_history))

    # ─── Commands ────────────────────────────────────────────────────

    async def approve(
        self,
        content_id: str,
        admin_id: str,
        options: ApprovalOptions | None = None,
    ) -> ApprovalResult:
        return await self._engine.approve(content_id, admin_id, options)

    async def reject(
        self,
        content_id: str,
        admin_id: str,
        reason: str,
        *,
        regenerate: bool = False,
    ) -> ApprovalResult:
        return await self._engine.reject(content_id, admin_id, reason, regenerate=regenerate)

    async def edit(
        self,
        content_id: str,
        admin_id: str,
        edits: ContentEdits | Mapping[str, Any],
    ) -> EditResult:
        return await self._engine.edit(content_id, admin_id, edits)

    async def bulk_approve(
        self,
        content_ids: Sequence[str],
        admin_id: str,
        options: BulkApprovalOptions | None = None,
    ) -> BulkResult:
        self._check_batch(content_ids)
        if options is None:
            options = BulkApprovalOptions(concurrency=self._settings.bulk_concurrency)
        return await self._bulk.bulk_approve(content_ids, admin_id, options)

    async def bulk_reject(self, content_ids: Sequence[str], admin_id: str, reason: str) -> BulkResult:
        """Always fails with UnsupportedOperationError, whatever the batch."""
        return await self._bulk.bulk_reject(content_ids, admin_id, reason)

    # ─── Dashboard ───────────────────────────────────────────────────

    def statistics(self) -> ReviewMetrics:
        return self._queue.metrics.compute(self._queue.snapshot())

    def health(self) -> HealthReport:
        """Classify the review backlog by the number of pending items."""
        stats = self.statistics()
        pending = stats.total_pending
        if pending > self._settings.health_critical_pending:
            status = HealthStatus.CRITICAL
        elif pending > self._settings.health_warning_pending:
            status = HealthStatus.WARNING
        else:
            status = HealthStatus.HEALTHY

        auto_rate = round(stats.auto_approved / stats.total_items * 100) if stats.total_items else 0
        return HealthReport(
            status=status,
            total_items=stats.total_items,
            pending_review=pending,
            auto_approval_rate=auto_rate,
        )

    def capabilities(self) -> ReviewCapabilities:
        return ReviewCapabilities(
            max_bulk_items=self._settings.max_bulk_items,
            supported_actions=list(_SUPPORTED_ACTIONS),
            auto_approval_enabled=self._queue.auto_approval_enabled,
            quality_threshold=self._queue.auto_approval_threshold,
        )

    def templates(self) -> dict[str, list[Any]]:
        return review_templates()

    # ─── Lifecycle ───────────────────────────────────────────────────

    async def aclose(self) -> None:
        """Wait for background training-dataset signals to complete."""
        if self._closed:
            return
        self._closed = True
        await self._engine.drain()
        logger.info("review_service_closed", items=len(self._queue))

    def _check_batch(self, content_ids: Sequence[str]) -> None:
        if not content_ids:
            raise InputValidationError("At least one content ID is required")
        if len(content_ids) > self._settings.max_bulk_items:
            raise InputValidationError(
                f"Maximum {self._settings.max_bulk_items} items can be processed at once"
            )
