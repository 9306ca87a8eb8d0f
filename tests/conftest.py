"""Shared pytest fixtures for the review engine test suite."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from src.config.settings import Settings
from src.main import build_review_service
from src.models.content import CandidateMetadata, ContentCandidate
from src.providers.training.memory_training_provider import InMemoryTrainingDatasetProvider
from src.services.approval_engine import ApprovalEngine
from src.services.bulk_processor import BulkProcessor
from src.services.review_queue import ReviewQueue
from src.services.review_service import ReviewService


# ---------------------------------------------------------------------------
# Content builders
# ---------------------------------------------------------------------------


def _structured_body(filler_words: int = 1200) -> str:
    """A markdown body with a heading, several paragraphs and intro/conclusion wording."""
    filler = " ".join(["insight"] * filler_words)
    return (
        "# Field Guide\n\n"
        "Introduction to the topic.\n\n"
        f"{filler}\n\n"
        "In conclusion, the approach works."
    )


def _plain_body(words: int) -> str:
    """An unstructured body of exactly *words* words."""
    return " ".join(["word"] * words)


@pytest.fixture
def make_candidate() -> Callable[..., ContentCandidate]:
    """Factory for content candidates; low-scoring (pending) by default."""

    def _make(
        content_id: str = "post-1",
        body: str = "A short draft.",
        seo_score: float | None = None,
        uniqueness_score: float | None = None,
        title: str = "Draft title",
        keywords: list[str] | None = None,
    ) -> ContentCandidate:
        return ContentCandidate(
            content_id=content_id,
            title=title,
            body=body,
            excerpt="Excerpt",
            metadata=CandidateMetadata(
                keywords=keywords or ["review"],
                seo_title="SEO title",
                seo_description="SEO description",
                seo_score=seo_score,
                uniqueness_score=uniqueness_score,
            ),
            ai_provider="test-model",
        )

    return _make


@pytest.fixture
def high_quality_candidate(make_candidate) -> ContentCandidate:
    """Scores length 25, structure 25, seo 20, uniqueness 22.5 → 92."""
    return make_candidate(
        content_id="post-hq",
        body=_structured_body(1200),
        seo_score=80,
        uniqueness_score=0.9,
    )


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


class FakeClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start or datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + self.step
        return now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def queue(clock: FakeClock) -> ReviewQueue:
    return ReviewQueue(clock=clock)


@pytest.fixture
def training_provider() -> InMemoryTrainingDatasetProvider:
    return InMemoryTrainingDatasetProvider()


@pytest.fixture
def engine(queue: ReviewQueue, training_provider: InMemoryTrainingDatasetProvider) -> ApprovalEngine:
    return ApprovalEngine(queue, training_provider)


@pytest.fixture
def fake_sleep() -> AsyncMock:
    return AsyncMock(return_value=None)


@pytest.fixture
def bulk_processor(engine: ApprovalEngine, fake_sleep: AsyncMock) -> BulkProcessor:
    return BulkProcessor(engine, backoff_seconds=1.0, sleep=fake_sleep)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def service(
    settings: Settings,
    training_provider: InMemoryTrainingDatasetProvider,
    fake_sleep: AsyncMock,
) -> ReviewService:
    return build_review_service(settings, training_provider, sleep=fake_sleep)


@pytest.fixture
def structured_body() -> Callable[[int], str]:
    return _structured_body


@pytest.fixture
def plain_body() -> Callable[[int], str]:
    return _plain_body
