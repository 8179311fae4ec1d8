"""Enums and type aliases for teachable_classifier inter-module contracts."""

from collections.abc import Callable
from enum import StrEnum

import torch

# 1-D float32 tensor produced by an embedding provider.
FeatureVector = torch.Tensor

# Receives an integer percentage in [0, 100].
ProgressCallback = Callable[[int], None]


class ModelType(StrEnum):
    """Classifier a prediction was produced by."""

    SIMPLE = "SIMPLE"
    EMBEDDING_NN = "EMBEDDING_NN"
    REMOTE = "REMOTE"


class TrainingState(StrEnum):
    """Lifecycle states of a training/evaluation run."""

    IDLE = "idle"
    LOADING_MODEL = "loading_model"
    TRAINING = "training"
    EVALUATING = "evaluating"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"
