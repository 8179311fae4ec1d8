"""Embedding provider protocol."""

from __future__ import annotations

from typing import Protocol

from PIL import Image

from teachable_classifier.types import FeatureVector


class EmbeddingProvider(Protocol):
    """Converts decoded images into fixed-length feature vectors.

    ``load`` is idempotent and raises ``ModelUnavailable`` when the backend
    cannot be initialized.  ``embed`` is deterministic for a fixed image and
    loaded model, and keeps no reference to the image after returning.
    """

    @property
    def is_loaded(self) -> bool:
        """Return True once ``load`` has succeeded."""
        ...

    def load(self) -> None:
        """Initialize the backend (no-op after the first success)."""
        ...

    def embed(self, image: Image.Image) -> FeatureVector:
        """Return a 1-D float32 CPU tensor for ``image``."""
        ...

    def dispose(self) -> None:
        """Release the model handle."""
        ...
