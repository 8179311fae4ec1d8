"""Data model schemas for samples, metrics and predictions."""

from teachable_classifier.schemas.classes import ClassDefinition
from teachable_classifier.schemas.metrics import (
    ConfusionEntry,
    TrainingMetrics,
    TrainingOutcome,
)
from teachable_classifier.schemas.prediction import (
    PredictionResult,
    SimilarityPrediction,
)

__all__ = [
    "ClassDefinition",
    "ConfusionEntry",
    "PredictionResult",
    "SimilarityPrediction",
    "TrainingMetrics",
    "TrainingOutcome",
]
