"""Queue statistics, health and capability models.

These are read-only summaries derived from a snapshot of the queue; none
of them is stored.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PriorityCounts(BaseModel):
    """Number of items per priority bucket."""

    model_config = ConfigDict(frozen=True)

    high: int = 0
    medium: int = 0
    low: int = 0


class ReviewMetrics(BaseModel):
    """Summary statistics over a set of review items.

    ``approval_rate`` counts both human approvals and auto-approvals as
    accepted, as a whole-number percentage of all items.
    """

    model_config = ConfigDict(frozen=True)

    total_items: int = 0
    total_pending: int = 0
    total_approved: int = 0
    total_rejected: int = 0
    auto_approved: int = 0
    average_quality_score: int = Field(default=0, ge=0, le=100)
    approval_rate: int = Field(default=0, ge=0, le=100)
    priority_counts: PriorityCounts = Field(default_factory=PriorityCounts)
    average_read_time: int = 0
    # Mean minutes from ingestion to decision, over decided items.
    average_review_time: float = 0.0


class HealthStatus(str, Enum):  # noqa: UP042 (StrEnum needs 3.11)
    """Overall review backlog health."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class HealthReport(BaseModel):
    """Backlog health derived from the pending-review count."""

    model_config = ConfigDict(frozen=True)

    status: HealthStatus
    total_items: int
    pending_review: int
    auto_approval_rate: int
    checked_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )


class ReviewCapabilities(BaseModel):
    """What the engine instance supports, for dashboards and clients."""

    model_config = ConfigDict(frozen=True)

    max_bulk_items: int
    supported_actions: list[str]
    auto_approval_enabled: bool
    quality_threshold: int
