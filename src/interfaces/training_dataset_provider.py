"""Abstract interface for the training-dataset collaborator.

# ─── DESIGN RATIONALE ────────────────────────────────────────────────
#
# Every human approval is a labelled example: content plus a 1–10 quality
# rating plus the approving admin.  Those examples feed an external
# fine-tuning / export pipeline whose storage and transport are not the
# review engine's concern.  This interface is the seam: the approval
# engine hands examples to whatever implementation is injected and never
# waits on, or rolls back because of, the outcome.
#
# Layer: Interfaces (depended on by Services and Providers)
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.decisions import TrainingExample


class ITrainingDatasetProvider(ABC):
    """Contract for receiving approved-content training examples."""

    @abstractmethod
    async def add_example(self, example: TrainingExample) -> None:
        """Record one approved example.

        Implementations may raise on failure; the caller logs and moves on.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short name used in log events."""
