"""Review item models — the central entity of the review queue.

# ─── STATE MACHINE ───────────────────────────────────────────────────
#
#   ingestion ──(score ≥ threshold)──→ auto_approved   (terminal, accepted)
#   ingestion ──(score < threshold)──→ pending
#
#   pending ──approve──→ approved                      (terminal, accepted)
#   pending ──reject───→ rejected                      (terminal)
#   pending ──edit─────→ editing ──(rescore)──→ pending
#
# ``editing`` is transient: it exists only while an edit is being applied
# under the item's lock and is never observable once the edit returns.
#
# ReviewItem is frozen.  Every transition builds a new value with
# model_copy(update={...}) and swaps it into the queue in one step, so a
# reader always sees a whole pre- or post-transition item.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.models.content import ContentSnapshot, SourceReference
from src.models.metrics import ReviewMetrics


class ReviewStatus(str, Enum):  # noqa: UP042 (StrEnum needs 3.11)
    """Lifecycle states of a review item."""

    PENDING = "pending"
    AUTO_APPROVED = "auto_approved"
    APPROVED = "approved"
    REJECTED = "rejected"
    EDITING = "editing"


# Statuses that put an item in the approved feed.
ACCEPTED_STATUSES = frozenset({ReviewStatus.APPROVED, ReviewStatus.AUTO_APPROVED})


class PriorityBucket(str, Enum):  # noqa: UP042 (StrEnum needs 3.11)
    """Coarse priority buckets: high ≥ 3, medium = 2, low ≤ 1."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def for_priority(cls, priority: int) -> PriorityBucket:
        if priority >= 3:
            return cls.HIGH
        if priority == 2:
            return cls.MEDIUM
        return cls.LOW

    @property
    def rank(self) -> int:
        """Ordering of buckets, low < medium < high."""
        return {PriorityBucket.LOW: 0, PriorityBucket.MEDIUM: 1, PriorityBucket.HIGH: 2}[self]


class QualityScore(BaseModel):
    """Composite quality score with its per-bucket breakdown.

    Each bucket contributes up to 25 points; ``overall`` is their rounded
    sum capped at 100.
    """

    model_config = ConfigDict(frozen=True)

    length: int = Field(ge=0, le=25)
    structure: int = Field(ge=0, le=25)
    seo: float = Field(ge=0.0, le=25.0)
    uniqueness: float = Field(ge=0.0, le=25.0)
    overall: int = Field(ge=0, le=100)
    calculated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )


class ContentEdit(BaseModel):
    """One audited change to one editable field."""

    model_config = ConfigDict(frozen=True)

    field: str
    old_value: str | list[str]
    new_value: str | list[str]
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )
    admin_id: str


class ReviewItem(BaseModel):
    """A content candidate plus its review metadata and status.

    ``id`` is assigned by the engine at enqueue time and never changes;
    ``content_id`` is the generator's identity for the content and is
    what external callers use to address the item.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    content_id: str
    batch_job_id: str | None = None
    content: ContentSnapshot
    quality_score: QualityScore
    priority: int = 1
    status: ReviewStatus = ReviewStatus.PENDING
    preview: str = Field(default="", max_length=200)
    estimated_read_time: int = Field(default=0, ge=0)
    ai_provider: str = ""
    source_references: list[SourceReference] = Field(default_factory=list)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    admin_notes: str | None = None
    quality_rating: int | None = Field(default=None, ge=1, le=10)
    last_edited_by: str | None = None
    last_edited_at: datetime | None = None
    # Append-only audit trail; a tuple so it cannot be mutated in place.
    edit_history: tuple[ContentEdit, ...] = ()

    @property
    def priority_bucket(self) -> PriorityBucket:
        return PriorityBucket.for_priority(self.priority)

    @property
    def is_accepted(self) -> bool:
        return self.status in ACCEPTED_STATUSES


class ReviewFilters(BaseModel):
    """Listing filters.

    ``status`` and ``batch_job_id`` match exactly; ``priority`` is a
    minimum bucket (``medium`` returns medium and high items).
    """

    model_config = ConfigDict(frozen=True)

    status: ReviewStatus | None = None
    batch_job_id: str | None = None
    priority: PriorityBucket | None = None
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int
    limit: int
    offset: int
    has_next: bool


class ReviewPage(BaseModel):
    """One page of the filtered, sorted queue plus a summary of the filtered set."""

    model_config = ConfigDict(frozen=True)

    items: list[ReviewItem]
    summary: ReviewMetrics
    pagination: Pagination


class ApprovedFeedFilters(BaseModel):
    """Filters for the approved-content feed.

    ``min_quality`` is inclusive.  ``limit`` caps the returned items but
    not ``total_count``; ``None`` returns every match.
    """

    model_config = ConfigDict(frozen=True)

    min_quality: int | None = Field(default=None, ge=0, le=100)
    auto_approved_only: bool = False
    limit: int | None = Field(default=None, ge=1)


class ApprovedFeed(BaseModel):
    """Accepted items, best quality first, ready for publishing."""

    model_config = ConfigDict(frozen=True)

    items: list[ReviewItem]
    total_count: int
