"""Pydantic frozen configuration models for teachable_classifier."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingConfig(BaseModel, frozen=True):
    """Configuration for torchvision embedding providers.

    ``pretrained=False`` skips the ImageNet weight download (tests only:
    random weights give meaningless embeddings).
    """

    backbone: Literal["mobilenet_v3_small", "resnet18"] = "mobilenet_v3_small"
    pretrained: bool = True
    image_size: int = Field(default=224, ge=32)
    device: str = "cpu"


class SimilarityConfig(BaseModel, frozen=True):
    """Configuration for the incremental nearest-neighbor classifier.

    Votes come from the ``k`` nearest stored examples, each weighted by
    ``1 / (distance + epsilon)``.
    """

    k: int = Field(default=3, ge=1)
    metric: Literal["euclidean", "cosine"] = "euclidean"
    epsilon: float = Field(default=1e-6, gt=0.0)


class CentroidConfig(BaseModel, frozen=True):
    """Configuration for the mean-color centroid baseline."""

    thumbnail_size: int = Field(default=50, ge=1)
    max_samples_per_class: int = Field(default=5, ge=1)
    # Kept at 255 for compatibility even though RGB distances reach ~441.
    distance_scale: float = Field(default=255.0, gt=0.0)


class TrainingConfig(BaseModel, frozen=True):
    """Configuration for the training/evaluation orchestrator."""

    # Optional pause after each training sample, in seconds.
    step_delay: float = Field(default=0.0, ge=0.0)


class RemoteSettings(BaseSettings):
    """Remote generative classifier settings loaded from GEMINI_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        case_sensitive=False,
    )

    # None disables the remote classifier (every call returns an error result).
    api_key: str | None = None
    model: str = "gemini-2.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float = Field(default=30.0, gt=0.0)
