"""Embedding providers."""

from teachable_classifier.embedding.base import EmbeddingProvider
from teachable_classifier.embedding.torchvision_backbones import (
    MobileNetV3SmallEmbeddingProvider,
    ResNet18EmbeddingProvider,
    TorchvisionEmbeddingProvider,
    build_embedding_provider,
)

__all__ = [
    "EmbeddingProvider",
    "MobileNetV3SmallEmbeddingProvider",
    "ResNet18EmbeddingProvider",
    "TorchvisionEmbeddingProvider",
    "build_embedding_provider",
]
