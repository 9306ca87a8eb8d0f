"""Command options and results for review decisions.

Covers single-item approve/reject/edit, bulk approval, and the training
dataset example emitted downstream on every approval.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.content import ContentSnapshot
from src.models.review import ContentEdit, ReviewItem, ReviewStatus


class ContentEdits(BaseModel):
    """Whitelisted editable fields.

    Only these six fields can be edited; anything else in an incoming
    payload is ignored.  Unset and ``None`` fields mean "leave unchanged".
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str | None = Field(default=None, max_length=200)
    body: str | None = None
    excerpt: str | None = Field(default=None, max_length=500)
    keywords: list[str] | None = None
    seo_title: str | None = Field(default=None, max_length=60)
    seo_description: str | None = Field(default=None, max_length=160)

    def requested(self) -> dict[str, str | list[str]]:
        """Return only the fields the caller actually supplied."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ApprovalOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    notes: str | None = Field(default=None, max_length=1000)
    # Human 1–10 override; derived from the quality score when absent.
    quality_rating: int | None = Field(default=None, ge=1, le=10)
    edits: ContentEdits | None = None
    auto_publish: bool = False


class ApprovalResult(BaseModel):
    """Outcome of a single approve or reject call."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    content_id: str
    status: ReviewStatus
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    quality_rating: int | None = None
    admin_notes: str | None = None
    queued_for_publishing: bool = False
    added_to_training_dataset: bool = False
    regenerate_requested: bool = False


class EditResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    content: ReviewItem


class BulkApprovalOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    concurrency: int = Field(default=5, ge=1)
    auto_publish: bool = False
    default_quality_rating: int | None = Field(default=None, ge=1, le=10)
    admin_notes: str | None = Field(default=None, max_length=500)


class BulkItemError(BaseModel):
    """A single id that failed inside a bulk run."""

    model_config = ConfigDict(frozen=True)

    content_id: str
    error: str
    code: str


class BulkResult(BaseModel):
    """Aggregate outcome of a bulk run.

    A bulk call itself succeeds even when some ids fail; the failures are
    itemized in ``errors``.
    """

    model_config = ConfigDict(frozen=True)

    total_items: int
    success_count: int
    error_count: int
    results: list[ApprovalResult] = Field(default_factory=list)
    errors: list[BulkItemError] = Field(default_factory=list)


class ContentDetails(BaseModel):
    """Full review view of one item, including its audit trail."""

    model_config = ConfigDict(frozen=True)

    item: ReviewItem
    content: ContentSnapshot
    edit_history: list[ContentEdit] = Field(default_factory=list)


class TrainingExample(BaseModel):
    """Approved content shipped to the fine-tuning dataset collaborator."""

    model_config = ConfigDict(frozen=True)

    content_id: str
    content: ContentSnapshot
    quality_rating: int = Field(ge=1, le=10)
    admin_approved: bool = True
    approved_by: str
