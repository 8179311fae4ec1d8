"""Mean-color nearest-centroid baseline classifier.

Needs no learned model: each class is summarized by the average RGB color
of its first few samples and a query goes to the closest centroid.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from loguru import logger

from teachable_classifier.config import CentroidConfig
from teachable_classifier.errors import SampleDecodeError
from teachable_classifier.imaging import ImageInput, decode_image, mean_color
from teachable_classifier.schemas.classes import ClassDefinition
from teachable_classifier.schemas.prediction import PredictionResult
from teachable_classifier.types import ModelType

Color = tuple[float, float, float]

REASONING = "Based on average RGB color distance (simple heuristic)."


class CentroidClassifier:
    """Classify images by Euclidean distance to per-class mean colors.

    Only the first ``max_samples_per_class`` samples of a class contribute
    to its centroid.  Classes without any decodable sample are skipped.
    Confidence is ``max(0, 1 - distance / distance_scale)``.
    """

    def __init__(self, config: CentroidConfig | None = None) -> None:
        self.config = config or CentroidConfig()

    def classify(
        self, image: ImageInput, classes: Sequence[ClassDefinition]
    ) -> PredictionResult:
        """Return the nearest class, or an ``Unknown`` result if none qualify.

        Raises:
            SampleDecodeError: If the query image cannot be decoded.
        """
        query = mean_color(decode_image(image), self.config.thumbnail_size)

        best_name: str | None = None
        min_distance = math.inf
        for cls in classes:
            centroid = self.centroid(cls)
            if centroid is None:
                continue
            distance = math.dist(query, centroid)
            if distance < min_distance:
                min_distance = distance
                best_name = cls.name

        if best_name is None:
            logger.debug("No class has samples, returning Unknown")
            return PredictionResult.unknown(ModelType.SIMPLE)

        confidence = max(0.0, 1.0 - min_distance / self.config.distance_scale)
        return PredictionResult(
            model_name=ModelType.SIMPLE,
            class_name=best_name,
            confidence=confidence,
            reasoning=REASONING,
        )

    def centroid(self, cls: ClassDefinition) -> Color | None:
        """Mean color of the class's leading samples, None if unavailable."""
        colors: list[Color] = []
        for sample in cls.samples[: self.config.max_samples_per_class]:
            try:
                colors.append(
                    mean_color(decode_image(sample), self.config.thumbnail_size)
                )
            except SampleDecodeError as exc:
                logger.warning(f"Skipping sample of class {cls.name!r}: {exc}")
        if not colors:
            return None
        n = len(colors)
        return (
            sum(c[0] for c in colors) / n,
            sum(c[1] for c in colors) / n,
            sum(c[2] for c in colors) / n,
        )
