"""Route single-image predictions to the available classifiers."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger
from PIL import Image

from teachable_classifier.classifiers.centroid import CentroidClassifier
from teachable_classifier.classifiers.remote import GeminiImageClassifier
from teachable_classifier.classifiers.similarity import (
    IncrementalSimilarityClassifier,
)
from teachable_classifier.embedding.base import EmbeddingProvider
from teachable_classifier.errors import (
    ModelUnavailable,
    NotTrained,
    SampleDecodeError,
)
from teachable_classifier.imaging import ImageInput, decode_image, encode_jpeg
from teachable_classifier.schemas.classes import ClassDefinition
from teachable_classifier.schemas.prediction import PredictionResult
from teachable_classifier.types import ModelType

DECODE_FAILED = "Image could not be decoded"
MODEL_UNAVAILABLE = "Embedding model unavailable"


class PredictionDispatcher:
    """Single entry point for inference across all classifier kinds.

    Every call returns a ``PredictionResult``.  An untrained embedding
    classifier yields ``Not Trained``, an empty class set yields
    ``Unknown``; undecodable input or an embedding backend that cannot be
    loaded yields ``Error``.

    Args:
        embedder: Provider shared with the training orchestrator.
        classifier: Similarity classifier populated by training runs.
        centroid: Mean-color baseline.
        remote: Optional remote classifier for ``ModelType.REMOTE``.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        classifier: IncrementalSimilarityClassifier,
        centroid: CentroidClassifier | None = None,
        remote: GeminiImageClassifier | None = None,
    ) -> None:
        self.embedder = embedder
        self.classifier = classifier
        self.centroid = centroid or CentroidClassifier()
        self.remote = remote

    def predict(
        self,
        image: ImageInput,
        model: ModelType,
        classes: Sequence[ClassDefinition] = (),
    ) -> PredictionResult:
        """Classify ``image`` with ``model``.

        ``classes`` is required by ``SIMPLE`` (centroids) and ``REMOTE``
        (candidate names); ``EMBEDDING_NN`` uses the trained examples.
        """
        if model == ModelType.SIMPLE:
            try:
                return self.centroid.classify(image, classes)
            except SampleDecodeError as exc:
                logger.warning(f"Simple prediction failed: {exc}")
                return PredictionResult.error(ModelType.SIMPLE, DECODE_FAILED)
        if model == ModelType.EMBEDDING_NN:
            return self._predict_embedding(image)
        return self._predict_remote(image, classes)

    def predict_all(
        self, image: ImageInput, classes: Sequence[ClassDefinition]
    ) -> list[PredictionResult]:
        """Run every classifier that is ready for ``image``."""
        models = [ModelType.SIMPLE]
        if self.classifier.is_ready:
            models.append(ModelType.EMBEDDING_NN)
        if self.remote is not None:
            models.append(ModelType.REMOTE)
        return [self.predict(image, model, classes) for model in models]

    def _predict_embedding(self, image: ImageInput) -> PredictionResult:
        if not self.classifier.is_ready:
            return PredictionResult.not_trained(ModelType.EMBEDDING_NN)
        try:
            decoded = decode_image(image)
        except SampleDecodeError as exc:
            logger.warning(f"Embedding prediction failed: {exc}")
            return PredictionResult.error(ModelType.EMBEDDING_NN, DECODE_FAILED)

        try:
            vector = self.embedder.embed(decoded)
            prediction = self.classifier.predict(vector, require_trained=True)
        except NotTrained:
            return PredictionResult.not_trained(ModelType.EMBEDDING_NN)
        except ModelUnavailable as exc:
            logger.error(f"Embedding prediction failed: {exc}")
            return PredictionResult.error(ModelType.EMBEDDING_NN, MODEL_UNAVAILABLE)
        finally:
            decoded.close()

        return PredictionResult(
            model_name=ModelType.EMBEDDING_NN,
            class_name=prediction.label,
            confidence=min(1.0, prediction.confidence),
            reasoning="Matched features from pretrained embeddings.",
        )

    def _predict_remote(
        self, image: ImageInput, classes: Sequence[ClassDefinition]
    ) -> PredictionResult:
        if self.remote is None:
            return PredictionResult.error(
                ModelType.REMOTE, "Remote classifier not configured"
            )
        payload = encode_jpeg(image) if isinstance(image, Image.Image) else image
        return self.remote.classify(payload, [cls.name for cls in classes])
