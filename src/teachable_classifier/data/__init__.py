"""Sample loading from disk."""

from teachable_classifier.data.folder import IMAGE_EXTENSIONS, load_class_definitions
from teachable_classifier.data.utils import get_files

__all__ = ["IMAGE_EXTENSIONS", "get_files", "load_class_definitions"]
