"""Metrics reporting: console tables, heatmaps and JSON export."""

from teachable_classifier.reporting.console import (
    build_confusion_table,
    render_metrics,
)
from teachable_classifier.reporting.plotting import plot_confusion_matrix
from teachable_classifier.reporting.writer import MetricsWriter

__all__ = [
    "MetricsWriter",
    "build_confusion_table",
    "plot_confusion_matrix",
    "render_metrics",
]
