"""Self-validation metrics schemas.

Field names serialize in camelCase (``totalSamples``,
``confusionMatrix``) so chart front-ends can consume them unchanged.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from teachable_classifier.types import TrainingState


class ConfusionEntry(BaseModel):
    """One actual-vs-predicted cell of the confusion matrix."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    actual: str
    predicted: str
    count: int = Field(default=0, ge=0)


class TrainingMetrics(BaseModel):
    """Result of one completed training run.

    ``confusion_matrix`` holds exactly ``len(labels())**2`` entries in
    row-major order, zero counts included.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    accuracy: float = Field(ge=0.0, le=1.0)
    total_samples: int = Field(ge=0)
    confusion_matrix: tuple[ConfusionEntry, ...] = ()

    def labels(self) -> list[str]:
        """Axis labels in first-seen order."""
        seen: dict[str, None] = {}
        for entry in self.confusion_matrix:
            seen.setdefault(entry.actual, None)
        return list(seen)

    def as_grid(self) -> dict[str, dict[str, int]]:
        """Nested ``{actual: {predicted: count}}`` view of the matrix."""
        grid: dict[str, dict[str, int]] = {}
        for entry in self.confusion_matrix:
            grid.setdefault(entry.actual, {})[entry.predicted] = entry.count
        return grid

    def row_total(self, actual: str) -> int:
        return sum(e.count for e in self.confusion_matrix if e.actual == actual)


class TrainingOutcome(BaseModel, frozen=True):
    """Terminal state of a training run, with metrics when it completed."""

    state: TrainingState
    metrics: TrainingMetrics | None = None

    @property
    def completed(self) -> bool:
        return self.state == TrainingState.DONE
