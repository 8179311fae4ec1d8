"""Build class definitions from an image-folder tree.

Layout: one sub-directory per class, named after the class, holding the
encoded image files::

    root/
        cat/  img_000.jpg  img_001.png
        dog/  img_000.jpg
"""

from pathlib import Path

from loguru import logger

from teachable_classifier.data.utils import get_files
from teachable_classifier.schemas.classes import ClassDefinition

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".bmp", ".webp")


def load_class_definitions(root: Path) -> list[ClassDefinition]:
    """Load every class directory under ``root`` in sorted name order.

    Files are read as raw bytes; decoding is left to training so that
    corrupt files surface as per-sample decode warnings.

    Raises:
        FileNotFoundError: If ``root`` is not a directory.
    """
    if not root.is_dir():
        raise FileNotFoundError(f"Data root not found: {root}")

    classes: list[ClassDefinition] = []
    for class_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        files = get_files(class_dir, IMAGE_EXTENSIONS)
        classes.append(
            ClassDefinition(
                id=class_dir.name,
                name=class_dir.name,
                samples=[f.read_bytes() for f in files],
            )
        )
        logger.debug(f"Class {class_dir.name!r}: {len(files)} sample(s)")

    logger.info(f"Loaded {len(classes)} class(es) from {root}")
    return classes
