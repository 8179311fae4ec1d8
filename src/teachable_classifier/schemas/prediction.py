"""Prediction result schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from teachable_classifier.types import ModelType

NOT_TRAINED_LABEL = "Not Trained"
UNKNOWN_LABEL = "Unknown"
ERROR_LABEL = "Error"


class SimilarityPrediction(BaseModel, frozen=True):
    """Nearest-neighbor vote: winning label plus the full distribution.

    ``confidences`` covers every label with at least one stored example
    and sums to 1.
    """

    label: str
    confidences: dict[str, float]

    @property
    def confidence(self) -> float:
        return self.confidences.get(self.label, 0.0)


class PredictionResult(BaseModel):
    """Normalized single-image prediction shared by all classifiers."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    model_name: ModelType
    class_name: str
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str | None = None

    @classmethod
    def not_trained(cls, model_name: ModelType) -> PredictionResult:
        return cls(model_name=model_name, class_name=NOT_TRAINED_LABEL, confidence=0.0)

    @classmethod
    def unknown(cls, model_name: ModelType) -> PredictionResult:
        return cls(model_name=model_name, class_name=UNKNOWN_LABEL, confidence=0.0)

    @classmethod
    def error(cls, model_name: ModelType, reasoning: str) -> PredictionResult:
        return cls(
            model_name=model_name,
            class_name=ERROR_LABEL,
            confidence=0.0,
            reasoning=reasoning,
        )
