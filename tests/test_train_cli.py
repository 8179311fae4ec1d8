"""Tests for Hydra config composition and the training entrypoint."""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra
from omegaconf import DictConfig

# Trigger @register decorators before composing
import teachable_classifier.embedding  # noqa: F401
from teachable_classifier.train import run
from teachable_classifier.types import TrainingState

RED = (200, 30, 30)
BLUE = (30, 30, 200)

CONF_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "src", "teachable_classifier", "conf")
)


@pytest.fixture()
def compose_cfg() -> Iterator[Callable[[list[str]], DictConfig]]:
    """Factory fixture composing the root config with overrides."""

    def _compose(overrides: list[str]) -> DictConfig:
        GlobalHydra.instance().clear()
        with initialize_config_dir(config_dir=CONF_DIR, version_base=None):
            return compose(config_name="train", overrides=overrides)

    yield _compose
    GlobalHydra.instance().clear()


@pytest.fixture()
def data_root(tmp_path: Path, png: Callable[..., bytes]) -> Path:
    root = tmp_path / "data"
    for name, color in (("cat", RED), ("dog", BLUE)):
        class_dir = root / name
        class_dir.mkdir(parents=True)
        for i in range(2):
            (class_dir / f"{i}.png").write_bytes(png(color, size=32))
    return root


class TestConfigComposition:
    def test_defaults(self, compose_cfg: Callable[[list[str]], DictConfig]) -> None:
        cfg = compose_cfg(["data_root=/data"])
        assert cfg.embedding._target_.endswith("MobileNetV3SmallEmbeddingProvider")
        assert cfg.embedding.pretrained is True
        assert cfg.classifier.k == 3
        assert cfg.classifier.metric == "euclidean"

    def test_embedding_override(
        self, compose_cfg: Callable[[list[str]], DictConfig]
    ) -> None:
        cfg = compose_cfg(["data_root=/data", "embedding=resnet18"])
        assert cfg.embedding._target_.endswith("ResNet18EmbeddingProvider")


class TestRun:
    def test_end_to_end(
        self,
        compose_cfg: Callable[[list[str]], DictConfig],
        data_root: Path,
        tmp_path: Path,
    ) -> None:
        out_dir = tmp_path / "out"
        cfg = compose_cfg(
            [
                f"data_root='{data_root}'",
                f"output_dir='{out_dir}'",
                "embedding=resnet18",
                "embedding.pretrained=false",
                "embedding.image_size=64",
            ]
        )

        outcome = run(cfg)

        assert outcome.state == TrainingState.DONE
        assert outcome.metrics is not None
        assert outcome.metrics.total_samples == 4
        data = json.loads((out_dir / "metrics.json").read_text())
        assert data["totalSamples"] == 4
        assert len(data["confusionMatrix"]) == 4
        assert (out_dir / "confusion_matrix.png").exists()

    def test_missing_data_root(
        self, compose_cfg: Callable[[list[str]], DictConfig], tmp_path: Path
    ) -> None:
        missing = tmp_path / "missing"
        cfg = compose_cfg([f"data_root='{missing}'", f"output_dir='{tmp_path}'"])
        with pytest.raises(FileNotFoundError):
            run(cfg)
