"""Training/evaluation orchestrator.

Drives one run through ``idle -> loading_model -> training -> evaluating ->
done``:

1. Load the embedding backbone (``ModelUnavailable`` aborts before any
   classifier state is touched).
2. Reset the similarity classifier and add one example per decodable sample,
   reporting progress after every sample.
3. Self-validate: predict every sample again and fill the confusion matrix.

Evaluation runs on the training set itself.  This is a deliberately
simplified estimator (accuracy is optimistic); no held-out split is made.
Samples that fail to decode are logged and skipped but still count toward
``total_samples``.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Iterator, Sequence

from loguru import logger

from teachable_classifier.classifiers.similarity import (
    IncrementalSimilarityClassifier,
)
from teachable_classifier.config import TrainingConfig
from teachable_classifier.embedding.base import EmbeddingProvider
from teachable_classifier.errors import AlreadyTraining, SampleDecodeError
from teachable_classifier.imaging import decode_image
from teachable_classifier.schemas.classes import ClassDefinition, EncodedSample
from teachable_classifier.schemas.metrics import TrainingMetrics, TrainingOutcome
from teachable_classifier.training.confusion import ConfusionMatrixBuilder
from teachable_classifier.types import (
    FeatureVector,
    ProgressCallback,
    TrainingState,
)

# Sample lists are copied when a run starts; later captures join the next run.
_ClassSnapshot = tuple[ClassDefinition, list[EncodedSample]]

_ACTIVE_STATES = frozenset(
    {TrainingState.LOADING_MODEL, TrainingState.TRAINING, TrainingState.EVALUATING}
)


def progress_percent(processed: int, total: int) -> int:
    """Rounded completion percentage; 100 only once every sample is done."""
    if total <= 0 or processed >= total:
        return 100
    return min(round(processed / total * 100), 99)


def _noop_progress(percent: int) -> None:
    pass


class TrainingOrchestrator:
    """Owns the lifecycle of training runs against one classifier.

    Only one run may be active at a time; a concurrent ``train()`` raises
    ``AlreadyTraining`` without disturbing the active run.  ``cancel()``
    is observed between samples and ends the run in ``CANCELLED``.

    Args:
        embedder: Feature extractor shared with the prediction dispatcher.
        classifier: Example store populated by each run.
        config: Orchestrator options.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        classifier: IncrementalSimilarityClassifier | None = None,
        config: TrainingConfig | None = None,
    ) -> None:
        self.embedder = embedder
        self.classifier = classifier or IncrementalSimilarityClassifier()
        self.config = config or TrainingConfig()
        self._state = TrainingState.IDLE
        self._run_lock = threading.Lock()
        self._cancel_event = threading.Event()

    @property
    def state(self) -> TrainingState:
        return self._state

    @property
    def is_training(self) -> bool:
        return self._state in _ACTIVE_STATES

    def cancel(self) -> None:
        """Request cooperative cancellation of the active run."""
        if self.is_training:
            logger.info("Cancellation requested")
            self._cancel_event.set()

    def train(
        self,
        classes: Sequence[ClassDefinition],
        on_progress: ProgressCallback | None = None,
    ) -> TrainingOutcome:
        """Run training followed by self-validation.

        Args:
            classes: Labeled sample collections.  Each ``samples`` list is
                copied when the run starts; samples appended afterwards are
                left for the next run.
            on_progress: Receives the completion percentage after each
                training sample.

        Returns:
            ``DONE`` with metrics, or ``CANCELLED`` without.

        Raises:
            AlreadyTraining: If another run is active.
            ModelUnavailable: If the embedding backbone cannot be loaded.
        """
        if not self._run_lock.acquire(blocking=False):
            raise AlreadyTraining("A training run is already in progress")
        try:
            self._cancel_event.clear()
            snapshot = [(cls, list(cls.samples)) for cls in classes]
            return self._run(snapshot, on_progress or _noop_progress)
        finally:
            self._run_lock.release()

    def _run(
        self, snapshot: list[_ClassSnapshot], on_progress: ProgressCallback
    ) -> TrainingOutcome:
        self._state = TrainingState.LOADING_MODEL
        try:
            self.embedder.load()
        except Exception:
            self._state = TrainingState.FAILED
            raise

        self._state = TrainingState.TRAINING
        self.classifier.reset()
        total = sum(len(samples) for _, samples in snapshot)
        confusion = ConfusionMatrixBuilder([cls.name for cls, _ in snapshot])
        logger.info(f"Training on {total} sample(s) across {len(snapshot)} class(es)")

        try:
            if total == 0:
                logger.warning("No samples to train on")
                return self._finish(accuracy=0.0, total=0, confusion=confusion)

            processed = 0
            for cls, index, sample in self._iter_samples(snapshot):
                if self._cancel_event.is_set():
                    return self._cancelled()
                vector = self._embed_sample(cls, index, sample)
                if vector is not None:
                    self.classifier.add_example(vector, cls.name)
                processed += 1
                on_progress(progress_percent(processed, total))
                if self.config.step_delay:
                    time.sleep(self.config.step_delay)

            self._state = TrainingState.EVALUATING
            correct = 0
            if self.classifier.num_examples == 0:
                logger.warning("No sample could be decoded, skipping evaluation")
            else:
                for cls, index, sample in self._iter_samples(snapshot):
                    if self._cancel_event.is_set():
                        return self._cancelled()
                    vector = self._embed_sample(cls, index, sample)
                    if vector is None:
                        continue
                    prediction = self.classifier.predict(vector)
                    if prediction.label == cls.name:
                        correct += 1
                    confusion.update(cls.name, prediction.label)

            return self._finish(
                accuracy=correct / total, total=total, confusion=confusion
            )
        except Exception:
            logger.exception("Training run failed")
            self.classifier.reset()
            self._state = TrainingState.FAILED
            raise

    def _finish(
        self, accuracy: float, total: int, confusion: ConfusionMatrixBuilder
    ) -> TrainingOutcome:
        metrics = TrainingMetrics(
            accuracy=accuracy if total > 0 else 0.0,
            total_samples=total,
            confusion_matrix=confusion.entries(),
        )
        self.classifier.mark_trained()
        self._state = TrainingState.DONE
        logger.info(
            f"Training done: accuracy={metrics.accuracy:.3f} "
            f"over {metrics.total_samples} sample(s)"
        )
        return TrainingOutcome(state=TrainingState.DONE, metrics=metrics)

    def _cancelled(self) -> TrainingOutcome:
        logger.info("Training run cancelled")
        self.classifier.reset()
        self._state = TrainingState.CANCELLED
        return TrainingOutcome(state=TrainingState.CANCELLED)

    def _embed_sample(
        self, cls: ClassDefinition, index: int, sample: EncodedSample
    ) -> FeatureVector | None:
        try:
            image = decode_image(sample)
        except SampleDecodeError as exc:
            logger.warning(f"Skipping sample {index} of class {cls.name!r}: {exc}")
            return None
        try:
            return self.embedder.embed(image)
        finally:
            image.close()

    @staticmethod
    def _iter_samples(
        snapshot: list[_ClassSnapshot],
    ) -> Iterator[tuple[ClassDefinition, int, EncodedSample]]:
        for cls, samples in snapshot:
            for index, sample in enumerate(samples):
                yield cls, index, sample
