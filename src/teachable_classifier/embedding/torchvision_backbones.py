"""Pretrained torchvision backbones used as frozen feature extractors.

The classification head is replaced with ``Identity`` so the forward pass
returns the pooled penultimate-layer activations.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

import torch
import torchvision.models as tv_models
from loguru import logger
from PIL import Image
from torchvision import transforms

from teachable_classifier.config import EmbeddingConfig
from teachable_classifier.errors import ModelUnavailable
from teachable_classifier.types import FeatureVector
from teachable_classifier.utils.hydra import register

IMAGENET_MEAN = (0.485, 0.456, 0.406)
IMAGENET_STD = (0.229, 0.224, 0.225)


class TorchvisionEmbeddingProvider(ABC):
    """Base class for frozen torchvision feature extractors.

    The model is built lazily on the first ``load()`` and kept until
    ``dispose()``.  ``embed()`` calls are serialized with a lock since
    forward passes on a shared module are not guaranteed thread-safe.

    Args:
        pretrained: Load ImageNet weights.  Pass ``False`` in tests to
            skip the weight download.
        image_size: Side of the center crop fed to the backbone.
        device: Torch device string.
    """

    name: str = "torchvision"

    def __init__(
        self,
        pretrained: bool = True,
        image_size: int = 224,
        device: str = "cpu",
    ) -> None:
        self.pretrained = pretrained
        self.image_size = image_size
        self.device = torch.device(device)
        self._lock = threading.Lock()
        self._model: torch.nn.Module | None = None
        self._transform = transforms.Compose(
            [
                transforms.Resize(image_size * 256 // 224),
                transforms.CenterCrop(image_size),
                transforms.ToTensor(),
                transforms.Normalize(mean=IMAGENET_MEAN, std=IMAGENET_STD),
            ]
        )

    @abstractmethod
    def _build_backbone(self) -> torch.nn.Module:
        """Return the backbone with its classification head removed."""

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def load(self) -> None:
        """Build the backbone once; later calls are no-ops.

        Raises:
            ModelUnavailable: If the weights or the runtime cannot be loaded.
        """
        with self._lock:
            if self._model is not None:
                return
            logger.info(
                f"Loading {self.name} embedding backbone "
                f"(pretrained={self.pretrained}, device={self.device})"
            )
            try:
                model = self._build_backbone().eval().to(self.device)
            except (OSError, RuntimeError, ImportError, ValueError) as exc:
                raise ModelUnavailable(
                    f"Could not initialize {self.name} backbone: {exc}"
                ) from exc
            self._model = model
            logger.info(f"{self.name} embedding backbone loaded")

    def embed(self, image: Image.Image) -> FeatureVector:
        """Return the pooled feature vector for a single RGB image."""
        self.load()
        with self._lock, torch.no_grad(), self._scoped_input(image) as batch:
            if self._model is None:
                raise ModelUnavailable(f"{self.name} backbone was disposed")
            features = self._model(batch)
            return features.flatten().detach().to("cpu", torch.float32).clone()

    def dispose(self) -> None:
        """Drop the model handle; the next ``load()`` rebuilds it."""
        with self._lock:
            if self._model is not None:
                logger.info(f"Disposing {self.name} embedding backbone")
            self._model = None

    @contextmanager
    def _scoped_input(self, image: Image.Image) -> Iterator[torch.Tensor]:
        """Yield the preprocessed (1, C, H, W) input; released on exit."""
        batch = self._transform(image.convert("RGB")).unsqueeze(0).to(self.device)
        try:
            yield batch
        finally:
            del batch


@register(name="mobilenet_v3_small")
class MobileNetV3SmallEmbeddingProvider(TorchvisionEmbeddingProvider):
    """MobileNetV3-Small backbone, 576-d embeddings."""

    name = "mobilenet_v3_small"

    def _build_backbone(self) -> torch.nn.Module:
        weights = (
            tv_models.MobileNet_V3_Small_Weights.DEFAULT if self.pretrained else None
        )
        backbone = tv_models.mobilenet_v3_small(weights=weights)
        backbone.classifier = torch.nn.Identity()
        return backbone


@register(name="resnet18")
class ResNet18EmbeddingProvider(TorchvisionEmbeddingProvider):
    """ResNet18 backbone, 512-d embeddings."""

    name = "resnet18"

    def _build_backbone(self) -> torch.nn.Module:
        weights = tv_models.ResNet18_Weights.DEFAULT if self.pretrained else None
        backbone = tv_models.resnet18(weights=weights)
        backbone.fc = torch.nn.Identity()
        return backbone


BACKBONES: dict[str, type[TorchvisionEmbeddingProvider]] = {
    "mobilenet_v3_small": MobileNetV3SmallEmbeddingProvider,
    "resnet18": ResNet18EmbeddingProvider,
}


def build_embedding_provider(config: EmbeddingConfig) -> TorchvisionEmbeddingProvider:
    """Instantiate the provider selected by ``config.backbone`` (not loaded)."""
    provider_cls = BACKBONES[config.backbone]
    return provider_cls(
        pretrained=config.pretrained,
        image_size=config.image_size,
        device=config.device,
    )
