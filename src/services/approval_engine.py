"""Approval engine — the review state machine and its edit audit trail.

# ─── ARCHITECTURE ────────────────────────────────────────────────────
#
# ApprovalEngine is the only writer of review items after ingestion:
#
#   1. approve() → pending → approved, optional edits first, rating
#                  resolved, training-dataset example emitted
#   2. reject()  → pending → rejected (re-rejecting is a no-op)
#   3. edit()    → pending → editing → rescored → pending
#
# Every transition runs under the item's KeyedLock entry, so two calls
# on the same content_id are serialized while calls on different items
# run freely.  Transitions build a new frozen ReviewItem and swap it into
# the queue in one step.
#
# Dependencies (all injected, never created internally):
#   - ReviewQueue               : item storage and body-derived fields
#   - ITrainingDatasetProvider  : receives approved examples
#
# Layer: Services (depends on Interfaces and Models, used by ReviewService)
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

import structlog
from pydantic import ValidationError

from src.interfaces.training_dataset_provider import ITrainingDatasetProvider
from src.models.content import ContentSnapshot
from src.models.decisions import (
    ApprovalOptions,
    ApprovalResult,
    ContentEdits,
    EditResult,
    TrainingExample,
)
from src.models.review import ACCEPTED_STATUSES, ContentEdit, ReviewItem, ReviewStatus
from src.services.review_queue import ReviewQueue
from src.utils.concurrency import KeyedLock
from src.utils.errors import (
    ContentNotFoundError,
    InputValidationError,
    InternalEngineError,
    InvalidTransitionError,
    ReviewEngineError,
)

logger = structlog.get_logger(logger_name=__name__)

EditValue = str | list[str]
_Getter = Callable[[ContentSnapshot], EditValue]
_Setter = Callable[[ContentSnapshot, EditValue], ContentSnapshot]


def _set_content(name: str) -> _Setter:
    return lambda content, value: content.model_copy(update={name: value})


def _set_metadata(name: str) -> _Setter:
    return lambda content, value: content.model_copy(
        update={"metadata": content.metadata.model_copy(update={name: value})}
    )


# The only fields an admin may edit, in the order edits are applied.
EDITABLE_FIELDS: dict[str, tuple[_Getter, _Setter]] = {
    "title": (lambda c: c.title, _set_content("title")),
    "body": (lambda c: c.body, _set_content("body")),
    "excerpt": (lambda c: c.excerpt, _set_content("excerpt")),
    "keywords": (lambda c: list(c.metadata.keywords), _set_metadata("keywords")),
    "seo_title": (lambda c: c.metadata.seo_title, _set_metadata("seo_title")),
    "seo_description": (lambda c: c.metadata.seo_description, _set_metadata("seo_description")),
}


def derive_quality_rating(overall: int) -> int:
    """Map a 0–100 quality score onto the 1–10 human rating scale."""
    return max(1, min(10, round(overall / 10)))


def _require_admin(admin_id: str) -> None:
    if not admin_id or not admin_id.strip():
        raise InputValidationError("An admin identity is required for review actions")


class ApprovalEngine:
    """Applies approve/reject/edit transitions to queued review items."""

    def __init__(
        self,
        queue: ReviewQueue,
        training_dataset: ITrainingDatasetProvider,
        locks: KeyedLock | None = None,
    ) -> None:
        self._queue = queue
        self._training = training_dataset
        self._locks = locks if locks is not None else KeyedLock()
        self._signal_tasks: set[asyncio.Task[None]] = set()

    @property
    def locks(self) -> KeyedLock:
        return self._locks

    @property
    def training_dataset(self) -> ITrainingDatasetProvider:
        return self._training

    # ─── Transitions ─────────────────────────────────────────────────

    async def approve(
        self,
        content_id: str,
        admin_id: str,
        options: ApprovalOptions | None = None,
    ) -> ApprovalResult:
        """Approve a pending item, applying any edits first.

        Raises
        ------
        ContentNotFoundError
            No item for ``content_id``.
        InvalidTransitionError
            The item is already approved/auto-approved, or rejected.
        """
        _require_admin(admin_id)
        options = options or ApprovalOptions()

        async with self._locks.hold(content_id):
            item = self._lookup(content_id)
            if item.status in ACCEPTED_STATUSES:
                raise InvalidTransitionError(f"Content already {item.status.value}", content_id)
            if item.status != ReviewStatus.PENDING:
                raise InvalidTransitionError(
                    f"Cannot approve content with status {item.status.value}", content_id
                )

            now = self._queue.now()
            working = item
            if options.edits is not None:
                working, changes = self._apply_edits(item, options.edits.requested(), admin_id, now)
                if changes:
                    working = working.model_copy(
                        update={"last_edited_by": admin_id, "last_edited_at": now}
                    )

            rating = options.quality_rating or derive_quality_rating(working.quality_score.overall)
            approved = working.model_copy(
                update={
                    "status": ReviewStatus.APPROVED,
                    "reviewed_by": admin_id,
                    "reviewed_at": now,
                    "admin_notes": options.notes,
                    "quality_rating": rating,
                }
            )
            self._queue.replace(approved)

        self._signal_training_dataset(approved)
        logger.info(
            "content_approved",
            content_id=content_id,
            reviewed_by=admin_id,
            quality_rating=rating,
            quality_score=approved.quality_score.overall,
            auto_publish=options.auto_publish,
        )

        return ApprovalResult(
            content_id=content_id,
            status=approved.status,
            reviewed_by=admin_id,
            reviewed_at=now,
            quality_rating=rating,
            admin_notes=options.notes,
            queued_for_publishing=options.auto_publish,
            added_to_training_dataset=True,
        )

    async def reject(
        self,
        content_id: str,
        admin_id: str,
        reason: str,
        *,
        regenerate: bool = False,
    ) -> ApprovalResult:
        """Reject a pending item.  Rejecting an already rejected item is a no-op.

        ``regenerate`` is reported back as a flag only; requesting a new
        generation is the caller's job.
        """
        _require_admin(admin_id)
        if not reason or not reason.strip():
            raise InputValidationError("Rejection reason is required", content_id)

        async with self._locks.hold(content_id):
            item = self._lookup(content_id)
            if item.status == ReviewStatus.REJECTED:
                logger.info("content_already_rejected", content_id=content_id, requested_by=admin_id)
                return self._rejection_result(item, regenerate)
            if item.status != ReviewStatus.PENDING:
                raise InvalidTransitionError(
                    f"Cannot reject content with status {item.status.value}", content_id
                )

            rejected = item.model_copy(
                update={
                    "status": ReviewStatus.REJECTED,
                    "reviewed_by": admin_id,
                    "reviewed_at": self._queue.now(),
                    "admin_notes": reason,
                }
            )
            self._queue.replace(rejected)

        logger.info(
            "content_rejected",
            content_id=content_id,
            reviewed_by=admin_id,
            reason=reason,
            regenerate=regenerate,
        )
        return self._rejection_result(rejected, regenerate)

    async def edit(
        self,
        content_id: str,
        admin_id: str,
        edits: ContentEdits | Mapping[str, Any],
    ) -> EditResult:
        """Edit whitelisted fields of a pending item and resubmit it as pending.

        One ContentEdit is appended per field whose value actually changes,
        and the quality score is recomputed over the edited content.
        """
        _require_admin(admin_id)
        requested = self._coerce_edits(edits, content_id)

        async with self._locks.hold(content_id):
            item = self._lookup(content_id)
            if item.status != ReviewStatus.PENDING:
                raise InvalidTransitionError(
                    f"Cannot edit content with status {item.status.value}", content_id
                )

            self._queue.replace(item.model_copy(update={"status": ReviewStatus.EDITING}))
            now = self._queue.now()
            try:
                edited, changes = self._apply_edits(item, requested, admin_id, now)
            except ReviewEngineError:
                self._queue.replace(item)
                raise

            resubmitted = edited.model_copy(
                update={
                    "status": ReviewStatus.PENDING,
                    "last_edited_by": admin_id,
                    "last_edited_at": now,
                }
            )
            self._queue.replace(resubmitted)

        logger.info(
            "content_edited",
            content_id=content_id,
            edited_by=admin_id,
            fields=[change.field for change in changes],
            quality_score=resubmitted.quality_score.overall,
        )
        return EditResult(content=resubmitted)

    # ─── Training-dataset signal ─────────────────────────────────────

    async def drain(self) -> None:
        """Wait for every in-flight training-dataset signal to finish."""
        if self._signal_tasks:
            await asyncio.gather(*list(self._signal_tasks), return_exceptions=True)

    def _signal_training_dataset(self, item: ReviewItem) -> None:
        example = TrainingExample(
            content_id=item.content_id,
            content=item.content,
            quality_rating=item.quality_rating,
            approved_by=item.reviewed_by,
        )
        task = asyncio.create_task(self._deliver_example(example))
        self._signal_tasks.add(task)
        task.add_done_callback(self._signal_tasks.discard)

    async def _deliver_example(self, example: TrainingExample) -> None:
        try:
            await self._training.add_example(example)
        except Exception as exc:
            # The approval stands; the dataset simply misses this example.
            logger.warning(
                "training_dataset_signal_failed",
                content_id=example.content_id,
                provider=self._training.get_provider_name(),
                error=str(exc),
            )

    # ─── Private helpers ─────────────────────────────────────────────

    def _lookup(self, content_id: str) -> ReviewItem:
        item = self._queue.get_by_content_id(content_id)
        if item is None:
            raise ContentNotFoundError(content_id=content_id)
        return item

    @staticmethod
    def _coerce_edits(
        edits: ContentEdits | Mapping[str, Any] | None, content_id: str
    ) -> dict[str, EditValue]:
        if edits is None:
            raise InputValidationError("Edit data is required", content_id)
        if not isinstance(edits, ContentEdits):
            try:
                edits = ContentEdits.model_validate(dict(edits))
            except ValidationError as exc:
                raise InputValidationError(f"Invalid edit data: {exc}", content_id) from exc

        requested = edits.requested()
        if not requested:
            raise InputValidationError(
                "Edits must change at least one of: " + ", ".join(EDITABLE_FIELDS),
                content_id,
            )
        return requested

    def _apply_edits(
        self,
        item: ReviewItem,
        requested: Mapping[str, EditValue],
        admin_id: str,
        now: datetime,
    ) -> tuple[ReviewItem, list[ContentEdit]]:
        """Apply whitelisted edits and rescore, returning the new item and its audit records."""
        try:
            content = item.content
            changes: list[ContentEdit] = []
            for name, (get_value, set_value) in EDITABLE_FIELDS.items():
                if name not in requested:
                    continue
                new_value = requested[name]
                old_value = get_value(content)
                if old_value == new_value:
                    continue
                changes.append(
                    ContentEdit(
                        field=name,
                        old_value=old_value,
                        new_value=new_value,
                        timestamp=now,
                        admin_id=admin_id,
                    )
                )
                content = set_value(content, new_value)

            content, preview, read_time = self._queue.refresh_content(content)
            score = self._queue.scorer.score(content, now=now)
        except Exception as exc:
            logger.error("edit_application_failed", content_id=item.content_id, error=str(exc))
            raise InternalEngineError(f"Failed to apply edits: {exc}", item.content_id) from exc

        updated = item.model_copy(
            update={
                "content": content,
                "preview": preview,
                "estimated_read_time": read_time,
                "quality_score": score,
                "edit_history": item.edit_history + tuple(changes),
            }
        )
        return updated, changes

    @staticmethod
    def _rejection_result(item: ReviewItem, regenerate: bool) -> ApprovalResult:
        return ApprovalResult(
            content_id=item.content_id,
            status=item.status,
            reviewed_by=item.reviewed_by,
            reviewed_at=item.reviewed_at,
            admin_notes=item.admin_notes,
            regenerate_requested=regenerate,
        )
