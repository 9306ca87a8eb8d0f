"""Review queue — ingestion, lookup and filtered/paginated listing.

# ─── ARCHITECTURE ────────────────────────────────────────────────────
#
# ReviewQueue owns the stored review items.  It:
#
#   1. enqueue()       → scores the candidate, derives preview/read time,
#                        assigns the engine id and files the item as
#                        pending or auto_approved
#   2. list_items()    → filter → sort (priority desc, oldest first) →
#                        paginate, with a metrics summary of the filtered set
#   3. approved_feed() → accepted items, best quality first
#   4. get_by_id() / get_by_content_id() → point lookups
#
# Items are frozen models.  The approval engine swaps in new versions
# through replace(); listing copies the item table before filtering, so a
# page is built from one consistent snapshot.
#
# Layer: Services (depends on Models and the scorer/aggregator)
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from uuid import uuid4

import structlog

from src.models.content import ContentCandidate, ContentMetadata, ContentSnapshot
from src.models.review import (
    ACCEPTED_STATUSES,
    ApprovedFeed,
    ApprovedFeedFilters,
    Pagination,
    ReviewFilters,
    ReviewItem,
    ReviewPage,
    ReviewStatus,
)
from src.services.metrics_aggregator import MetricsAggregator
from src.services.quality_scorer import QualityScorer
from src.utils.errors import ContentNotFoundError, InternalEngineError, InvalidTransitionError
from src.utils.text import build_preview, count_words, reading_time_minutes

logger = structlog.get_logger(logger_name=__name__)

# Statuses that still need a human decision.
_UNDECIDED_STATUSES = frozenset({ReviewStatus.PENDING, ReviewStatus.EDITING})


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)  # noqa: UP017


class ReviewQueue:
    """Ordered collection of review items.

    Parameters
    ----------
    scorer:
        Quality scorer applied at ingestion.
    metrics:
        Aggregator used for listing summaries and statistics.
    auto_approval_threshold:
        Items scoring at or above this are auto-approved at ingestion.
    auto_approval_enabled:
        When False every item is filed as pending regardless of score.
    clock:
        Returns the current UTC time; injectable for tests.
    """

    def __init__(
        self,
        scorer: QualityScorer | None = None,
        metrics: MetricsAggregator | None = None,
        *,
        auto_approval_threshold: int = 85,
        auto_approval_enabled: bool = True,
        preview_max_chars: int = 200,
        words_per_minute: int = 200,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._scorer = scorer if scorer is not None else QualityScorer()
        self._metrics = metrics if metrics is not None else MetricsAggregator()
        self._threshold = auto_approval_threshold
        self._auto_approval_enabled = auto_approval_enabled
        self._preview_max_chars = preview_max_chars
        self._words_per_minute = words_per_minute
        self._clock = clock

        self._items: dict[str, ReviewItem] = {}
        self._by_content_id: dict[str, str] = {}
        # Ingestion order, the final sort tie-breaker.
        self._sequence: dict[str, int] = {}
        self._next_sequence = 0

    @property
    def scorer(self) -> QualityScorer:
        return self._scorer

    @property
    def metrics(self) -> MetricsAggregator:
        return self._metrics

    @property
    def auto_approval_threshold(self) -> int:
        return self._threshold

    @property
    def auto_approval_enabled(self) -> bool:
        return self._auto_approval_enabled

    def now(self) -> datetime:
        return self._clock()

    # ─── Ingestion ───────────────────────────────────────────────────

    def enqueue(
        self,
        candidate: ContentCandidate,
        batch_job_id: str | None = None,
        priority: int = 1,
    ) -> ReviewItem:
        """Score a candidate and file it as ``pending`` or ``auto_approved``.

        A content_id may be filed again once its previous item has been
        decided. While that item still awaits review, resubmission is refused.

        Raises
        ------
        InvalidTransitionError
            The content_id already has an undecided item in the queue.
        InternalEngineError
            Scoring failed.
        """
        previous = self.get_by_content_id(candidate.content_id)
        if previous is not None and previous.status in _UNDECIDED_STATUSES:
            raise InvalidTransitionError(
                f"Content is already queued for review (status {previous.status.value})",
                candidate.content_id,
            )

        now = self._clock()
        content = ContentSnapshot(
            title=candidate.title,
            body=candidate.body,
            excerpt=candidate.excerpt,
            type=candidate.type,
            metadata=ContentMetadata(**candidate.metadata.model_dump()),
        )
        content, preview, read_time = self.refresh_content(content)

        try:
            score = self._scorer.score(content, now=now)
        except Exception as exc:
            logger.error("quality_scoring_failed", content_id=candidate.content_id, error=str(exc))
            raise InternalEngineError(f"Quality scoring failed: {exc}", candidate.content_id) from exc

        auto_approve = self._auto_approval_enabled and score.overall >= self._threshold
        item = ReviewItem(
            id=str(uuid4()),
            content_id=candidate.content_id,
            batch_job_id=batch_job_id,
            content=content,
            quality_score=score,
            priority=priority,
            status=ReviewStatus.AUTO_APPROVED if auto_approve else ReviewStatus.PENDING,
            preview=preview,
            estimated_read_time=read_time,
            ai_provider=candidate.ai_provider,
            source_references=list(candidate.source_references),
            created_at=now,
            reviewed_at=now if auto_approve else None,
        )

        if previous is not None:
            logger.info(
                "content_resubmitted",
                content_id=candidate.content_id,
                previous_item_id=previous.id,
                previous_status=previous.status.value,
            )
        self._items[item.id] = item
        self._by_content_id[item.content_id] = item.id
        self._sequence[item.id] = self._next_sequence
        self._next_sequence += 1

        logger.info(
            "content_auto_approved" if auto_approve else "content_queued_for_review",
            item_id=item.id,
            content_id=item.content_id,
            quality_score=score.overall,
            batch_job_id=batch_job_id,
        )
        return item

    def refresh_content(self, content: ContentSnapshot) -> tuple[ContentSnapshot, str, int]:
        """Recompute the body-derived fields of a snapshot.

        Returns the snapshot with updated word count and reading time, the
        preview text, and the estimated read time in minutes.
        """
        words = count_words(content.body)
        read_time = reading_time_minutes(words, self._words_per_minute)
        metadata = content.metadata.model_copy(update={"word_count": words, "reading_time": read_time})
        refreshed = content.model_copy(update={"metadata": metadata})
        return refreshed, build_preview(content.body, self._preview_max_chars), read_time

    # ─── Lookup ──────────────────────────────────────────────────────

    def get_by_id(self, item_id: str) -> ReviewItem | None:
        return self._items.get(item_id)

    def get_by_content_id(self, content_id: str) -> ReviewItem | None:
        item_id = self._by_content_id.get(content_id)
        return self._items.get(item_id) if item_id is not None else None

    def snapshot(self) -> list[ReviewItem]:
        """All items in ingestion order, copied at call time."""
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    # ─── Mutation (approval engine only) ─────────────────────────────

    def replace(self, item: ReviewItem) -> None:
        """Swap in a new version of an existing item, keyed by its ``id``."""
        if item.id not in self._items:
            raise ContentNotFoundError(f"Review item {item.id} not found", item.content_id)
        self._items[item.id] = item

    # ─── Listing ─────────────────────────────────────────────────────

    def list_items(self, filters: ReviewFilters | None = None) -> ReviewPage:
        """Filter, sort and paginate the queue."""
        filters = filters or ReviewFilters()
        items = self.snapshot()

        if filters.status is not None:
            items = [i for i in items if i.status == filters.status]
        if filters.batch_job_id is not None:
            items = [i for i in items if i.batch_job_id == filters.batch_job_id]
        if filters.priority is not None:
            minimum = filters.priority.rank
            items = [i for i in items if i.priority_bucket.rank >= minimum]

        items.sort(key=lambda i: (-i.priority, i.created_at, self._sequence[i.id]))

        total = len(items)
        page = items[filters.offset : filters.offset + filters.limit]

        return ReviewPage(
            items=page,
            summary=self._metrics.compute(items),
            pagination=Pagination(
                total=total,
                limit=filters.limit,
                offset=filters.offset,
                has_next=filters.offset + filters.limit < total,
            ),
        )

    def approved_feed(self, filters: ApprovedFeedFilters | None = None) -> ApprovedFeed:
        """Approved and auto-approved items, highest quality score first.

        Equal scores keep the order in which items were decided.
        """
        filters = filters or ApprovedFeedFilters()
        items = [i for i in self.snapshot() if i.status in ACCEPTED_STATUSES]

        if filters.auto_approved_only:
            items = [i for i in items if i.status == ReviewStatus.AUTO_APPROVED]
        if filters.min_quality is not None:
            items = [i for i in items if i.quality_score.overall >= filters.min_quality]

        items.sort(
            key=lambda i: (-i.quality_score.overall, i.reviewed_at or i.created_at, self._sequence[i.id])
        )

        total = len(items)
        if filters.limit is not None:
            items = items[: filters.limit]
        return ApprovedFeed(items=items, total_count=total)
