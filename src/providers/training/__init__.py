"""Training-dataset providers.

InMemoryTrainingDatasetProvider keeps approved examples in process memory.
It is the default collaborator and the one tests inspect.  A persistent
exporter can replace it by implementing ITrainingDatasetProvider without
touching the approval engine.
"""

from src.providers.training.memory_training_provider import InMemoryTrainingDatasetProvider

__all__ = ["InMemoryTrainingDatasetProvider"]
