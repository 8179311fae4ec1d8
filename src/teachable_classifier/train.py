"""Training entrypoint for teachable_classifier.

Usage:
    teachable-train data_root=/path/to/classes
    teachable-train data_root=/path/to/classes embedding=resnet18
    teachable-train data_root=/path/to/classes classifier.k=5 classifier.metric=cosine
"""

import sys
from pathlib import Path

import hydra
from loguru import logger
from omegaconf import DictConfig, OmegaConf
from tqdm import tqdm

# Import embedding providers to trigger @register before Hydra composes config
import teachable_classifier.embedding  # noqa: F401
from teachable_classifier.classifiers.similarity import (
    IncrementalSimilarityClassifier,
)
from teachable_classifier.config import SimilarityConfig, TrainingConfig
from teachable_classifier.data.folder import load_class_definitions
from teachable_classifier.embedding.base import EmbeddingProvider
from teachable_classifier.errors import ModelUnavailable
from teachable_classifier.reporting import (
    MetricsWriter,
    plot_confusion_matrix,
    render_metrics,
)
from teachable_classifier.schemas.metrics import TrainingOutcome
from teachable_classifier.training.orchestrator import TrainingOrchestrator


def run(cfg: DictConfig) -> TrainingOutcome:
    """Load classes, train, self-validate and write the report."""
    classes = load_class_definitions(Path(cfg.data_root))

    embedder: EmbeddingProvider = hydra.utils.instantiate(cfg.embedding)
    classifier = IncrementalSimilarityClassifier(
        SimilarityConfig(**OmegaConf.to_container(cfg.classifier, resolve=True))  # type: ignore[arg-type]
    )
    orchestrator = TrainingOrchestrator(
        embedder,
        classifier,
        TrainingConfig(**OmegaConf.to_container(cfg.training, resolve=True)),  # type: ignore[arg-type]
    )

    with tqdm(total=100, desc="training", unit="%") as bar:

        def on_progress(percent: int) -> None:
            bar.update(percent - bar.n)

        outcome = orchestrator.train(classes, on_progress)

    if not outcome.completed or outcome.metrics is None:
        logger.warning(f"Training ended without metrics (state={outcome.state})")
        return outcome

    render_metrics(outcome.metrics)

    output_dir = Path(cfg.output_dir)
    report = cfg.get("report", {})
    if report.get("save_json", True):
        out_path = MetricsWriter(output_dir).write(outcome.metrics)
        logger.info(f"Metrics written to {out_path}")
    if report.get("save_plot", True) and outcome.metrics.confusion_matrix:
        plot_confusion_matrix(outcome.metrics, output_dir / "confusion_matrix.png")
    return outcome


@hydra.main(version_base=None, config_path="conf", config_name="train")
def main(cfg: DictConfig) -> None:
    """Run training with the given Hydra config."""
    logger.remove()
    logger.add(sys.stderr, level=cfg.get("log_level", "INFO"))

    logger.info(f"Configuration:\n{OmegaConf.to_yaml(cfg)}")

    try:
        run(cfg)
    except (ModelUnavailable, FileNotFoundError) as exc:
        logger.error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
