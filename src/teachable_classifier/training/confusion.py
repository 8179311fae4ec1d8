"""Name-keyed confusion matrix accumulated with torchmetrics."""

from __future__ import annotations

from collections.abc import Sequence

import torch
from loguru import logger
from torchmetrics.classification import MulticlassConfusionMatrix

from teachable_classifier.schemas.metrics import ConfusionEntry


class ConfusionMatrixBuilder:
    """Accumulate actual/predicted label pairs over a fixed label axis.

    The axis is the distinct ``class_names`` in first-seen order and is
    fixed at construction, so ``entries()`` always returns ``n * n`` cells
    (zero counts included) regardless of what was observed.

    Args:
        class_names: Class names at training start.  Duplicates collapse
            into a single row/column.
    """

    def __init__(self, class_names: Sequence[str]) -> None:
        self.labels: list[str] = list(dict.fromkeys(class_names))
        self._index = {name: i for i, name in enumerate(self.labels)}
        # MulticlassConfusionMatrix requires at least two classes; padded
        # rows/columns are never indexed and are sliced off in compute().
        self._metric = MulticlassConfusionMatrix(num_classes=max(2, len(self.labels)))
        self._observed = 0

    @property
    def observed(self) -> int:
        return self._observed

    def update(self, actual: str, predicted: str) -> bool:
        """Count one outcome.  Unknown labels are skipped and return False."""
        if actual not in self._index or predicted not in self._index:
            logger.warning(
                f"Confusion update skipped for unknown label pair "
                f"({actual!r}, {predicted!r})"
            )
            return False
        self._metric.update(
            torch.tensor([self._index[predicted]]),
            torch.tensor([self._index[actual]]),
        )
        self._observed += 1
        return True

    def compute(self) -> torch.Tensor:
        """Return the ``(n, n)`` count matrix, rows = actual."""
        n = len(self.labels)
        if self._observed == 0:
            return torch.zeros((n, n), dtype=torch.long)
        return self._metric.compute()[:n, :n].cpu()

    def entries(self) -> tuple[ConfusionEntry, ...]:
        """Row-major flattened matrix."""
        counts = self.compute().tolist()
        return tuple(
            ConfusionEntry(actual=actual, predicted=predicted, count=int(counts[i][j]))
            for i, actual in enumerate(self.labels)
            for j, predicted in enumerate(self.labels)
        )
