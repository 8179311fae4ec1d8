"""Training metrics writer using orjson."""

from __future__ import annotations

from pathlib import Path

import orjson

from teachable_classifier.schemas.metrics import TrainingMetrics


class MetricsWriter:
    """Write a metrics report as camelCase JSON into ``output_dir``."""

    def __init__(self, output_dir: Path, filename: str = "metrics.json") -> None:
        self.output_dir = output_dir
        self.filename = filename
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write(self, metrics: TrainingMetrics) -> Path:
        """Write the report to disk. Returns the output path."""
        out_path = self.output_dir / self.filename
        dump = metrics.model_dump(mode="json", by_alias=True)
        out_path.write_bytes(orjson.dumps(dump, option=orjson.OPT_INDENT_2))
        return out_path
