"""Incremental distance-weighted nearest-neighbor classifier.

Examples are (feature vector, label) pairs appended one at a time.  A query
is scored against its ``k`` nearest examples; each neighbor votes for its
label with weight ``1 / (distance + epsilon)`` and the per-label scores are
normalized into a confidence distribution.
"""

from __future__ import annotations

import threading
from collections import Counter

import torch
import torch.nn.functional as F
from loguru import logger

from teachable_classifier.config import SimilarityConfig
from teachable_classifier.errors import NotTrained
from teachable_classifier.schemas.prediction import SimilarityPrediction
from teachable_classifier.types import FeatureVector


class IncrementalSimilarityClassifier:
    """Nearest-neighbor classifier over an additive example store.

    Lifecycle: ``reset()`` at the start of every training run, then
    ``add_example()`` per sample, then ``mark_trained()`` once the run
    completes.  ``is_ready`` only turns True after ``mark_trained()``.

    The store is shared between a training run and the prediction path, so
    every read and mutation holds one re-entrant lock.  Callers serving
    predictions pass ``require_trained=True`` so a retrain that has reset
    the store answers ``NotTrained`` instead of a partial result.

    Ties between labels with identical aggregate score resolve to the
    lexicographically smaller label, and neighbor selection orders by
    ``(distance, label)``, so results never depend on insertion order.
    """

    def __init__(self, config: SimilarityConfig | None = None) -> None:
        self.config = config or SimilarityConfig()
        self._vectors: list[torch.Tensor] = []
        self._labels: list[str] = []
        self._matrix: torch.Tensor | None = None
        self._trained = False
        self._lock = threading.RLock()

    @property
    def num_examples(self) -> int:
        with self._lock:
            return len(self._labels)

    @property
    def labels(self) -> list[str]:
        """Sorted distinct labels with at least one example."""
        with self._lock:
            return sorted(set(self._labels))

    @property
    def is_ready(self) -> bool:
        """True when a training run completed and left examples behind."""
        with self._lock:
            return self._trained and bool(self._labels)

    def example_counts(self) -> dict[str, int]:
        with self._lock:
            return dict(sorted(Counter(self._labels).items()))

    def reset(self) -> None:
        """Drop every stored example."""
        with self._lock:
            if self._labels:
                logger.debug(f"Clearing {len(self._labels)} stored example(s)")
            self._vectors.clear()
            self._labels.clear()
            self._matrix = None
            self._trained = False

    def mark_trained(self) -> None:
        with self._lock:
            self._trained = True

    def add_example(self, vector: FeatureVector, label: str) -> None:
        """Append one example; the first example of a label establishes it.

        Raises:
            ValueError: If ``vector`` length differs from stored examples.
        """
        flat = vector.detach().flatten().to("cpu", torch.float32)
        with self._lock:
            if self._vectors and flat.numel() != self._vectors[0].numel():
                raise ValueError(
                    f"Feature vector has {flat.numel()} dims, "
                    f"expected {self._vectors[0].numel()}"
                )
            self._vectors.append(flat)
            self._labels.append(label)
            self._matrix = None

    def predict(
        self, vector: FeatureVector, *, require_trained: bool = False
    ) -> SimilarityPrediction:
        """Return the winning label and the per-label confidence mapping.

        Args:
            vector: Query embedding.
            require_trained: Also refuse a store whose run has not completed.

        Raises:
            NotTrained: If no example has been added, or ``require_trained``
                is set and ``mark_trained()`` has not been called since the
                last ``reset()``.
        """
        query = vector.detach().flatten().to("cpu", torch.float32)
        with self._lock:
            if not self._labels:
                raise NotTrained("Classifier has no examples")
            if require_trained and not self._trained:
                raise NotTrained("Training run has not completed")

            distances = self._distances(query).tolist()
            labels = list(self._labels)

        k = min(self.config.k, len(distances))
        neighbors = sorted(
            range(len(distances)), key=lambda i: (distances[i], labels[i])
        )[:k]

        scores = dict.fromkeys(sorted(set(labels)), 0.0)
        for i in neighbors:
            scores[labels[i]] += 1.0 / (distances[i] + self.config.epsilon)

        total = sum(scores.values())
        confidences = {label: score / total for label, score in scores.items()}
        best = min(scores, key=lambda label: (-scores[label], label))
        return SimilarityPrediction(label=best, confidences=confidences)

    def _distances(self, query: torch.Tensor) -> torch.Tensor:
        if self._matrix is None:
            self._matrix = torch.stack(self._vectors)
        matrix = self._matrix
        if query.numel() != matrix.shape[1]:
            raise ValueError(
                f"Query has {query.numel()} dims, expected {matrix.shape[1]}"
            )
        if self.config.metric == "cosine":
            similarity = F.cosine_similarity(matrix, query.unsqueeze(0), dim=1)
            return (1.0 - similarity).clamp(min=0.0)
        return torch.cdist(
            query.unsqueeze(0),
            matrix,
            compute_mode="donot_use_mm_for_euclid_dist",
        )[0]
