"""In-memory training-dataset provider.

Suitable for development and single-process deployments.  Examples are
kept in arrival order and can be read back for inspection or handed to an
exporter in one go.
"""

from __future__ import annotations

import structlog

from src.interfaces.training_dataset_provider import ITrainingDatasetProvider
from src.models.decisions import TrainingExample

logger = structlog.get_logger(logger_name=__name__)


class InMemoryTrainingDatasetProvider(ITrainingDatasetProvider):
    """Collects training examples in a list."""

    def __init__(self) -> None:
        self._examples: list[TrainingExample] = []

    async def add_example(self, example: TrainingExample) -> None:
        self._examples.append(example)
        logger.info(
            "training_example_added",
            content_id=example.content_id,
            quality_rating=example.quality_rating,
            approved_by=example.approved_by,
        )

    def get_provider_name(self) -> str:
        return "memory"

    @property
    def examples(self) -> list[TrainingExample]:
        """A copy of all examples received so far."""
        return list(self._examples)

    def __len__(self) -> int:
        return len(self._examples)
