"""Unit tests for ApprovalEngine transitions, edits and the training signal."""

from __future__ import annotations

import asyncio

import pytest

from src.interfaces.training_dataset_provider import ITrainingDatasetProvider
from src.models.decisions import ApprovalOptions, ContentEdits, TrainingExample
from src.models.review import ReviewStatus
from src.services.approval_engine import ApprovalEngine, derive_quality_rating
from src.utils.concurrency import KeyedLock
from src.utils.errors import (
    ContentNotFoundError,
    InputValidationError,
    InternalEngineError,
    InvalidTransitionError,
)


class _FailingProvider(ITrainingDatasetProvider):
    async def add_example(self, example: TrainingExample) -> None:
        raise ConnectionError("dataset unavailable")

    def get_provider_name(self) -> str:
        return "failing"


@pytest.fixture
def pending(queue, make_candidate):
    return queue.enqueue(make_candidate(content_id="post-1"))


# ======================================================================
# approve
# ======================================================================


class TestApprove:
    @pytest.mark.asyncio
    async def test_pending_to_approved(self, engine, queue, pending) -> None:
        result = await engine.approve("post-1", "editor-1", ApprovalOptions(notes="Looks good"))

        assert result.success is True
        assert result.status == ReviewStatus.APPROVED
        assert result.reviewed_by == "editor-1"
        assert result.admin_notes == "Looks good"
        assert result.added_to_training_dataset is True

        stored = queue.get_by_content_id("post-1")
        assert stored.status == ReviewStatus.APPROVED
        assert stored.reviewed_by == "editor-1"
        assert stored.reviewed_at == result.reviewed_at

    @pytest.mark.asyncio
    async def test_rating_derived_from_score(self, engine, pending) -> None:
        # overall 20 → rating 2
        result = await engine.approve("post-1", "editor-1")
        assert result.quality_rating == 2

    @pytest.mark.asyncio
    async def test_explicit_rating_wins(self, engine, pending) -> None:
        result = await engine.approve("post-1", "editor-1", ApprovalOptions(quality_rating=9))
        assert result.quality_rating == 9

    @pytest.mark.asyncio
    async def test_auto_publish_flag_reported(self, engine, pending) -> None:
        result = await engine.approve("post-1", "editor-1", ApprovalOptions(auto_publish=True))
        assert result.queued_for_publishing is True

    @pytest.mark.asyncio
    async def test_reapprove_conflicts_and_leaves_item_unchanged(self, engine, queue, pending) -> None:
        await engine.approve("post-1", "editor-1")
        before = queue.get_by_content_id("post-1")

        with pytest.raises(InvalidTransitionError) as exc_info:
            await engine.approve("post-1", "editor-2")

        assert exc_info.value.code == "conflict"
        assert queue.get_by_content_id("post-1") == before

    @pytest.mark.asyncio
    async def test_auto_approved_item_conflicts(self, engine, queue, high_quality_candidate) -> None:
        queue.enqueue(high_quality_candidate)
        with pytest.raises(InvalidTransitionError, match="auto_approved"):
            await engine.approve("post-hq", "editor-1")

    @pytest.mark.asyncio
    async def test_rejected_item_conflicts(self, engine, pending) -> None:
        await engine.reject("post-1", "editor-1", "Off brand")
        with pytest.raises(InvalidTransitionError):
            await engine.approve("post-1", "editor-1")

    @pytest.mark.asyncio
    async def test_unknown_content(self, engine) -> None:
        with pytest.raises(ContentNotFoundError) as exc_info:
            await engine.approve("missing", "editor-1")
        assert exc_info.value.content_id == "missing"

    @pytest.mark.asyncio
    async def test_blank_admin_rejected(self, engine, queue, pending) -> None:
        with pytest.raises(InputValidationError):
            await engine.approve("post-1", "  ")
        assert queue.get_by_content_id("post-1").status == ReviewStatus.PENDING

    @pytest.mark.asyncio
    async def test_edits_applied_before_approval(self, engine, queue, pending) -> None:
        options = ApprovalOptions(edits=ContentEdits(title="Polished title"))
        await engine.approve("post-1", "editor-1", options)

        stored = queue.get_by_content_id("post-1")
        assert stored.status == ReviewStatus.APPROVED
        assert stored.content.title == "Polished title"
        assert [e.field for e in stored.edit_history] == ["title"]
        assert stored.last_edited_by == "editor-1"


# ======================================================================
# Per-item locking
# ======================================================================


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


class TestPerItemLocking:
    @pytest.mark.asyncio
    async def test_transitions_wait_for_the_item_lock(self, engine, queue, pending) -> None:
        async with engine.locks.hold("post-1"):
            task = asyncio.create_task(engine.approve("post-1", "editor-1"))
            await _settle()
            assert not task.done()
            assert queue.get_by_content_id("post-1").status == ReviewStatus.PENDING
        result = await task
        assert result.status == ReviewStatus.APPROVED

    @pytest.mark.asyncio
    async def test_concurrent_approvals_single_winner(self, engine, queue, pending) -> None:
        async with engine.locks.hold("post-1"):
            first = asyncio.create_task(engine.approve("post-1", "editor-1"))
            second = asyncio.create_task(engine.approve("post-1", "editor-2"))
            await _settle()
            assert not first.done() and not second.done()

        outcomes = await asyncio.gather(first, second, return_exceptions=True)

        assert outcomes[0].reviewed_by == "editor-1"
        assert isinstance(outcomes[1], InvalidTransitionError)
        assert queue.get_by_content_id("post-1").reviewed_by == "editor-1"

    @pytest.mark.asyncio
    async def test_edit_then_approve_applied_in_order(self, engine, queue, pending) -> None:
        async with engine.locks.hold("post-1"):
            edit = asyncio.create_task(engine.edit("post-1", "editor-1", {"title": "Edited"}))
            approve = asyncio.create_task(engine.approve("post-1", "editor-2"))
            await _settle()
            assert not edit.done() and not approve.done()

        await asyncio.gather(edit, approve)

        stored = queue.get_by_content_id("post-1")
        assert stored.status == ReviewStatus.APPROVED
        assert stored.content.title == "Edited"
        assert [e.field for e in stored.edit_history] == ["title"]
        assert stored.reviewed_by == "editor-2"

    @pytest.mark.asyncio
    async def test_approve_then_edit_rejects_the_late_edit(self, engine, queue, pending) -> None:
        async with engine.locks.hold("post-1"):
            approve = asyncio.create_task(engine.approve("post-1", "editor-1"))
            edit = asyncio.create_task(engine.edit("post-1", "editor-2", {"title": "Too late"}))
            await _settle()

        outcomes = await asyncio.gather(approve, edit, return_exceptions=True)

        assert isinstance(outcomes[1], InvalidTransitionError)
        stored = queue.get_by_content_id("post-1")
        assert stored.status == ReviewStatus.APPROVED
        assert stored.content.title == "Draft title"
        assert stored.edit_history == ()

    @pytest.mark.asyncio
    async def test_other_items_are_not_blocked(self, engine, queue, pending, make_candidate) -> None:
        queue.enqueue(make_candidate(content_id="post-2"))
        async with engine.locks.hold("post-1"):
            result = await asyncio.wait_for(engine.approve("post-2", "editor-1"), timeout=1)
        assert result.status == ReviewStatus.APPROVED


# ======================================================================
# Training-dataset signal
# ======================================================================


class TestTrainingSignal:
    @pytest.mark.asyncio
    async def test_approval_emits_one_example(self, engine, training_provider, pending) -> None:
        await engine.approve("post-1", "editor-1", ApprovalOptions(quality_rating=7))
        await engine.drain()

        assert len(training_provider) == 1
        example = training_provider.examples[0]
        assert example.content_id == "post-1"
        assert example.quality_rating == 7
        assert example.approved_by == "editor-1"
        assert example.admin_approved is True

    @pytest.mark.asyncio
    async def test_rejection_emits_nothing(self, engine, training_provider, pending) -> None:
        await engine.reject("post-1", "editor-1", "Too thin")
        await engine.drain()
        assert len(training_provider) == 0

    @pytest.mark.asyncio
    async def test_provider_failure_does_not_undo_approval(self, queue, pending) -> None:
        engine = ApprovalEngine(queue, _FailingProvider())
        result = await engine.approve("post-1", "editor-1")
        await engine.drain()

        assert result.status == ReviewStatus.APPROVED
        assert queue.get_by_content_id("post-1").status == ReviewStatus.APPROVED


# ======================================================================
# reject
# ======================================================================


class TestReject:
    @pytest.mark.asyncio
    async def test_pending_to_rejected(self, engine, queue, pending) -> None:
        result = await engine.reject("post-1", "editor-1", "Factual errors", regenerate=True)

        assert result.status == ReviewStatus.REJECTED
        assert result.admin_notes == "Factual errors"
        assert result.regenerate_requested is True
        stored = queue.get_by_content_id("post-1")
        assert stored.status == ReviewStatus.REJECTED
        assert stored.reviewed_by == "editor-1"

    @pytest.mark.asyncio
    async def test_unknown_content(self, engine) -> None:
        with pytest.raises(ContentNotFoundError):
            await engine.reject("missing", "editor-1", "Not needed")

    @pytest.mark.asyncio
    async def test_blank_reason(self, engine, pending) -> None:
        with pytest.raises(InputValidationError):
            await engine.reject("post-1", "editor-1", "   ")

    @pytest.mark.asyncio
    async def test_rejecting_twice_is_a_noop(self, engine, queue, pending) -> None:
        await engine.reject("post-1", "editor-1", "First reason")
        stored = queue.get_by_content_id("post-1")

        again = await engine.reject("post-1", "editor-2", "Second reason")

        assert again.status == ReviewStatus.REJECTED
        assert again.reviewed_by == "editor-1"
        assert queue.get_by_content_id("post-1") == stored

    @pytest.mark.asyncio
    async def test_approved_item_cannot_be_rejected(self, engine, pending) -> None:
        await engine.approve("post-1", "editor-1")
        with pytest.raises(InvalidTransitionError):
            await engine.reject("post-1", "editor-1", "Changed my mind")


# ======================================================================
# edit
# ======================================================================


class TestEdit:
    @pytest.mark.asyncio
    async def test_body_edit_rescored_and_pending(self, engine, queue, pending, structured_body) -> None:
        before = queue.get_by_content_id("post-1")
        result = await engine.edit("post-1", "editor-1", {"body": structured_body(1200)})

        item = result.content
        assert result.success is True
        assert item.status == ReviewStatus.PENDING
        assert len(item.edit_history) == 1
        edit = item.edit_history[0]
        assert edit.field == "body"
        assert edit.old_value == "A short draft."
        assert edit.admin_id == "editor-1"
        assert item.quality_score.overall > before.quality_score.overall
        assert item.quality_score.structure == 25
        assert item.last_edited_by == "editor-1"
        assert item.estimated_read_time == 7
        assert queue.get_by_content_id("post-1") == item

    @pytest.mark.asyncio
    async def test_unchanged_values_not_recorded(self, engine, pending) -> None:
        result = await engine.edit(
            "post-1", "editor-1", ContentEdits(title="Draft title", excerpt="New excerpt")
        )
        assert [e.field for e in result.content.edit_history] == ["excerpt"]

    @pytest.mark.asyncio
    async def test_metadata_fields_editable(self, engine, pending) -> None:
        result = await engine.edit(
            "post-1",
            "editor-1",
            {"keywords": ["python", "review"], "seo_title": "Better SEO title"},
        )
        metadata = result.content.content.metadata
        assert metadata.keywords == ["python", "review"]
        assert metadata.seo_title == "Better SEO title"
        assert [e.field for e in result.content.edit_history] == ["keywords", "seo_title"]

    @pytest.mark.asyncio
    async def test_history_accumulates(self, engine, pending) -> None:
        await engine.edit("post-1", "editor-1", {"title": "Second"})
        result = await engine.edit("post-1", "editor-2", {"title": "Third"})
        history = result.content.edit_history
        assert [(e.old_value, e.new_value) for e in history] == [
            ("Draft title", "Second"),
            ("Second", "Third"),
        ]

    @pytest.mark.asyncio
    async def test_only_whitelisted_fields(self, engine, queue, pending) -> None:
        with pytest.raises(InputValidationError):
            await engine.edit("post-1", "editor-1", {"status": "approved"})
        assert queue.get_by_content_id("post-1").status == ReviewStatus.PENDING

    @pytest.mark.asyncio
    async def test_empty_edits(self, engine, pending) -> None:
        with pytest.raises(InputValidationError):
            await engine.edit("post-1", "editor-1", {})

    @pytest.mark.asyncio
    async def test_field_limits_enforced(self, engine, pending) -> None:
        with pytest.raises(InputValidationError):
            await engine.edit("post-1", "editor-1", {"seo_title": "x" * 61})

    @pytest.mark.asyncio
    async def test_non_pending_item_conflicts(self, engine, pending) -> None:
        await engine.approve("post-1", "editor-1")
        with pytest.raises(InvalidTransitionError):
            await engine.edit("post-1", "editor-1", {"title": "Late change"})

    @pytest.mark.asyncio
    async def test_unknown_content(self, engine) -> None:
        with pytest.raises(ContentNotFoundError):
            await engine.edit("missing", "editor-1", {"title": "Anything"})

    @pytest.mark.asyncio
    async def test_failed_rescore_restores_item(self, engine, queue, pending, monkeypatch) -> None:
        def boom(*args, **kwargs):
            raise RuntimeError("scorer down")

        monkeypatch.setattr(queue.scorer, "score", boom)
        with pytest.raises(InternalEngineError):
            await engine.edit("post-1", "editor-1", {"title": "New"})

        assert queue.get_by_content_id("post-1") == pending
        assert not engine.locks.locked("post-1")


class TestConstruction:
    def test_keeps_injected_empty_collaborators(self, queue, training_provider) -> None:
        locks = KeyedLock()
        engine = ApprovalEngine(queue, training_provider, locks)
        assert engine.locks is locks
        assert engine.training_dataset is training_provider


class TestDeriveQualityRating:
    @pytest.mark.parametrize(
        ("overall", "expected"),
        [(0, 1), (4, 1), (20, 2), (92, 9), (100, 10)],
    )
    def test_mapping(self, overall: int, expected: int) -> None:
        assert derive_quality_rating(overall) == expected
