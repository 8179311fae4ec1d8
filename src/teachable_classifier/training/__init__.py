"""Training and self-validation."""

from teachable_classifier.training.confusion import ConfusionMatrixBuilder
from teachable_classifier.training.orchestrator import (
    TrainingOrchestrator,
    progress_percent,
)

__all__ = ["ConfusionMatrixBuilder", "TrainingOrchestrator", "progress_percent"]
