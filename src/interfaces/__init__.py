"""Public interface definitions for external collaborators.

External systems the review engine talks to are accessed exclusively
through the abstract base classes defined in this package.  Concrete
adapters implement these interfaces and are injected at construction
time (see ``src/main.py``), so tests can pass fakes or mocks.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    ITrainingDatasetProvider   →  InMemoryTrainingDatasetProvider
"""

from src.interfaces.training_dataset_provider import ITrainingDatasetProvider

__all__ = ["ITrainingDatasetProvider"]
