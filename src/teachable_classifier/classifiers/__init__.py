"""Classifier implementations."""

from teachable_classifier.classifiers.centroid import CentroidClassifier
from teachable_classifier.classifiers.remote import GeminiImageClassifier
from teachable_classifier.classifiers.similarity import (
    IncrementalSimilarityClassifier,
)

__all__ = [
    "CentroidClassifier",
    "GeminiImageClassifier",
    "IncrementalSimilarityClassifier",
]
