"""Rich console rendering of training metrics."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table

from teachable_classifier.schemas.metrics import TrainingMetrics


def build_confusion_table(metrics: TrainingMetrics) -> Table:
    """Actual (rows) vs predicted (columns) count grid.

    Diagonal cells are green, non-zero off-diagonal cells red.
    """
    labels = metrics.labels()
    grid = metrics.as_grid()
    table = Table(
        title="Confusion Matrix (Actual vs Predicted)",
        header_style="bold magenta",
        box=box.SQUARE,
        show_lines=True,
    )
    table.add_column("Actual \\ Predicted", style="cyan")
    for label in labels:
        table.add_column(label, justify="right")

    for actual in labels:
        cells: list[str] = []
        for predicted in labels:
            count = grid[actual][predicted]
            if actual == predicted:
                cells.append(f"[green]{count}[/green]")
            elif count:
                cells.append(f"[red]{count}[/red]")
            else:
                cells.append(str(count))
        table.add_row(actual, *cells)
    return table


def render_metrics(metrics: TrainingMetrics, console: Console | None = None) -> None:
    """Print overall accuracy and the confusion grid."""
    console = console or Console()
    console.print(
        f"[bold]Overall Accuracy:[/bold] "
        f"[bold green]{metrics.accuracy * 100:.1f}%[/bold green] "
        f"over {metrics.total_samples} sample(s)"
    )
    console.print("[dim]Based on self-validation check[/dim]")
    if metrics.confusion_matrix:
        console.print(build_confusion_table(metrics))
