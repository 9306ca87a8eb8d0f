"""Review engine composition root.

Wires the scorer, queue, approval engine and bulk processor into one
explicit ReviewService instance.  There is no module-level service: each
caller builds (and closes) its own engine, and tests build as many
independent engines as they need.

    async with review_engine() as service:
        item = service.enqueue(candidate, priority=2)
        await service.approve(item.content_id, admin_id="editor-7")
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog

from src.config.loader import load_settings
from src.config.settings import Settings
from src.interfaces.training_dataset_provider import ITrainingDatasetProvider
from src.providers.training.memory_training_provider import InMemoryTrainingDatasetProvider
from src.services.approval_engine import ApprovalEngine
from src.services.bulk_processor import BulkProcessor, Sleep
from src.services.metrics_aggregator import MetricsAggregator
from src.services.quality_scorer import QualityScorer
from src.services.review_queue import ReviewQueue
from src.services.review_service import ReviewService
from src.utils.logging import configure_logging, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


def build_review_service(
    settings: Settings | None = None,
    training_dataset: ITrainingDatasetProvider | None = None,
    sleep: Sleep | None = None,
) -> ReviewService:
    """Construct a fully wired ReviewService.

    Parameters
    ----------
    settings:
        Engine settings; loaded from ``config/config.yaml`` plus the
        environment when omitted.
    training_dataset:
        Receiver for approved examples; in-memory when omitted.
    sleep:
        Override for the bulk inter-chunk pause (tests pass a fake).
    """
    if settings is None:
        settings = load_settings()

    queue = ReviewQueue(
        QualityScorer(),
        MetricsAggregator(),
        auto_approval_threshold=settings.auto_approval_threshold,
        auto_approval_enabled=settings.auto_approval_enabled,
        preview_max_chars=settings.preview_max_chars,
        words_per_minute=settings.words_per_minute,
    )
    provider = training_dataset if training_dataset is not None else InMemoryTrainingDatasetProvider()
    engine = ApprovalEngine(queue, provider)
    bulk_kwargs = {"sleep": sleep} if sleep is not None else {}
    bulk = BulkProcessor(engine, backoff_seconds=settings.bulk_backoff_seconds, **bulk_kwargs)

    _logger.info(
        "review_service_built",
        auto_approval_threshold=settings.auto_approval_threshold,
        bulk_concurrency=settings.bulk_concurrency,
        training_dataset=provider.get_provider_name(),
    )
    return ReviewService(queue=queue, engine=engine, bulk_processor=bulk, settings=settings)


@asynccontextmanager
async def review_engine(
    settings: Settings | None = None,
    training_dataset: ITrainingDatasetProvider | None = None,
    configure_logs: bool = False,
) -> AsyncIterator[ReviewService]:
    """Build a ReviewService for the duration of an ``async with`` block.

    On exit, in-flight training-dataset signals are awaited before the
    engine is released.
    """
    if settings is None:
        settings = load_settings()
    if configure_logs:
        configure_logging(
            log_level=settings.log_level,
            json_output=(settings.app_env == "production"),
        )
    service = build_review_service(settings, training_dataset)
    try:
        yield service
    finally:
        await service.aclose()
