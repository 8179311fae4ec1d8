"""Shared pytest fixtures for teachable_classifier tests."""

from __future__ import annotations

import io
from collections.abc import Callable
from unittest.mock import MagicMock

import pytest
import torch
from PIL import Image

from teachable_classifier.imaging import mean_color
from teachable_classifier.schemas.classes import ClassDefinition


def _encode_png(color: tuple[int, int, int], size: int = 16) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (size, size), color=color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def png() -> Callable[..., bytes]:
    """Factory for solid-color RGB PNGs (lossless, so mean colors are exact).

    Call as ``png((r, g, b))`` or ``png((r, g, b), size=32)``.
    """
    return _encode_png


@pytest.fixture()
def embedder() -> MagicMock:
    """Embedding provider double: the embedding is the image's mean color / 255.

    ``load.call_count`` and ``embed.call_count`` track usage; tests swap in a
    ``side_effect`` to simulate backend failures.
    """
    provider = MagicMock()
    provider.embed.side_effect = lambda image: (
        torch.tensor(mean_color(image, size=4)) / 255.0
    )
    return provider


@pytest.fixture()
def cat_dog_classes() -> list[ClassDefinition]:
    """2 classes: "cat" (3 reddish samples), "dog" (2 bluish samples)."""
    return [
        ClassDefinition(
            name="cat",
            samples=[
                _encode_png((200, 30, 30)),
                _encode_png((210, 40, 20)),
                _encode_png((190, 20, 40)),
            ],
        ),
        ClassDefinition(
            name="dog",
            samples=[_encode_png((30, 30, 200)), _encode_png((20, 40, 210))],
        ),
    ]
