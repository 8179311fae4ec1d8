"""Tests for metrics reporting (JSON writer, console table, heatmap)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console

from teachable_classifier.reporting import (
    MetricsWriter,
    build_confusion_table,
    plot_confusion_matrix,
    render_metrics,
)
from teachable_classifier.schemas.metrics import ConfusionEntry, TrainingMetrics


@pytest.fixture()
def metrics() -> TrainingMetrics:
    return TrainingMetrics(
        accuracy=0.8,
        total_samples=5,
        confusion_matrix=(
            ConfusionEntry(actual="cat", predicted="cat", count=2),
            ConfusionEntry(actual="cat", predicted="dog", count=1),
            ConfusionEntry(actual="dog", predicted="cat", count=0),
            ConfusionEntry(actual="dog", predicted="dog", count=2),
        ),
    )


class TestTrainingMetrics:
    def test_grid_and_labels(self, metrics: TrainingMetrics) -> None:
        assert metrics.labels() == ["cat", "dog"]
        assert metrics.as_grid() == {
            "cat": {"cat": 2, "dog": 1},
            "dog": {"cat": 0, "dog": 2},
        }
        assert metrics.row_total("cat") == 3

    def test_accuracy_bounds_validated(self) -> None:
        with pytest.raises(ValueError):
            TrainingMetrics(accuracy=1.5, total_samples=1)


class TestMetricsWriter:
    def test_writes_camel_case_json(
        self, metrics: TrainingMetrics, tmp_path: Path
    ) -> None:
        out_path = MetricsWriter(tmp_path / "out").write(metrics)
        assert out_path.name == "metrics.json"
        data = json.loads(out_path.read_text())
        assert data["accuracy"] == 0.8
        assert data["totalSamples"] == 5
        assert len(data["confusionMatrix"]) == 4
        assert data["confusionMatrix"][1] == {
            "actual": "cat",
            "predicted": "dog",
            "count": 1,
        }


class TestConsole:
    def test_render_includes_accuracy_and_labels(self, metrics: TrainingMetrics) -> None:
        console = Console(record=True, width=120)
        render_metrics(metrics, console)
        text = console.export_text()
        assert "80.0%" in text
        assert "self-validation" in text
        assert "cat" in text and "dog" in text

    def test_table_shape(self, metrics: TrainingMetrics) -> None:
        table = build_confusion_table(metrics)
        assert len(table.columns) == 3
        assert table.row_count == 2


class TestPlotting:
    def test_saves_png(self, metrics: TrainingMetrics, tmp_path: Path) -> None:
        path = plot_confusion_matrix(metrics, tmp_path / "plots" / "cm.png")
        assert path.exists()
        assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"

    def test_empty_metrics_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            plot_confusion_matrix(
                TrainingMetrics(accuracy=0.0, total_samples=0), tmp_path / "cm.png"
            )
