"""Filesystem helpers for sample discovery."""

from pathlib import Path


def get_files(root: Path, extensions: tuple[str, ...]) -> list[Path]:
    """Sorted regular files directly under ``root`` with a matching suffix.

    Suffix matching is case-insensitive; ``extensions`` must be lowercase
    and include the dot.
    """
    return sorted(
        p for p in root.iterdir() if p.is_file() and p.suffix.lower() in extensions
    )
