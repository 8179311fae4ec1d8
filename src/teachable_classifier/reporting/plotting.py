"""Confusion matrix heatmap rendering."""

from __future__ import annotations

from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from loguru import logger

from teachable_classifier.schemas.metrics import TrainingMetrics


def plot_confusion_matrix(metrics: TrainingMetrics, save_path: Path) -> Path:
    """Render the confusion matrix as an annotated heatmap PNG."""
    labels = metrics.labels()
    grid = metrics.as_grid()
    n = len(labels)
    if n == 0:
        raise ValueError("Metrics have no classes to plot")
    matplotlib.use("Agg")
    save_path.parent.mkdir(parents=True, exist_ok=True)

    cm = np.array([[grid[a][p] for p in labels] for a in labels], dtype=np.int64)

    fig_size = max(4.0, n * 0.8)
    fig, ax = plt.subplots(figsize=(fig_size, fig_size * 0.85))
    im = ax.imshow(cm, interpolation="nearest", cmap="Blues")
    fig.colorbar(im, ax=ax)

    ax.set_title(f"Confusion Matrix - accuracy {metrics.accuracy * 100:.1f}%")
    ax.set_xlabel("Predicted")
    ax.set_ylabel("Actual")
    tick_marks = list(range(n))
    ax.set_xticks(tick_marks)
    ax.set_xticklabels(labels, rotation=45, ha="right", fontsize=8)
    ax.set_yticks(tick_marks)
    ax.set_yticklabels(labels, fontsize=8)

    threshold = cm.max() / 2 if cm.size else 0
    for i in range(n):
        for j in range(n):
            ax.text(
                j,
                i,
                str(cm[i, j]),
                ha="center",
                va="center",
                color="white" if cm[i, j] > threshold else "black",
            )

    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)

    logger.info(f"Confusion matrix saved to {save_path}")
    return save_path
