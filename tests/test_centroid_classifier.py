"""Tests for the mean-color CentroidClassifier baseline."""

from __future__ import annotations

import math
from collections.abc import Callable

import pytest

from teachable_classifier.classifiers.centroid import CentroidClassifier
from teachable_classifier.errors import SampleDecodeError
from teachable_classifier.schemas.classes import ClassDefinition
from teachable_classifier.schemas.prediction import UNKNOWN_LABEL
from teachable_classifier.types import ModelType

RED = (200, 30, 30)
GREEN = (30, 200, 30)
BLUE = (30, 30, 200)


@pytest.fixture()
def centroid() -> CentroidClassifier:
    return CentroidClassifier()


class TestCentroidClassifier:
    def test_all_classes_empty_returns_unknown(
        self, centroid: CentroidClassifier, png: Callable[..., bytes]
    ) -> None:
        classes = [ClassDefinition(name="a"), ClassDefinition(name="b")]
        result = centroid.classify(png(RED), classes)
        assert result.class_name == UNKNOWN_LABEL
        assert result.confidence == 0.0
        assert result.model_name == ModelType.SIMPLE

    def test_no_classes_returns_unknown(
        self, centroid: CentroidClassifier, png: Callable[..., bytes]
    ) -> None:
        assert centroid.classify(png(RED), []).class_name == UNKNOWN_LABEL

    def test_nearest_centroid_exact_confidence(
        self, centroid: CentroidClassifier, png: Callable[..., bytes]
    ) -> None:
        classes = [
            ClassDefinition(name="A", samples=[png((200, 0, 0))]),
            ClassDefinition(name="B", samples=[png((0, 0, 200))]),
        ]
        query = (190, 10, 0)
        result = centroid.classify(png(query), classes)
        dist_a = math.dist(query, (200, 0, 0))
        assert result.class_name == "A"
        assert result.confidence == pytest.approx(1 - dist_a / 255)
        assert result.reasoning

    def test_centroid_averages_samples(
        self, centroid: CentroidClassifier, png: Callable[..., bytes]
    ) -> None:
        cls = ClassDefinition(name="mix", samples=[png((100, 0, 0)), png((0, 100, 50))])
        assert centroid.centroid(cls) == (50.0, 50.0, 25.0)

    def test_only_first_five_samples_used(
        self, centroid: CentroidClassifier, png: Callable[..., bytes]
    ) -> None:
        samples = [png(RED)] * 5 + [png(GREEN)] * 5
        cls = ClassDefinition(name="a", samples=samples)
        assert centroid.centroid(cls) == tuple(float(c) for c in RED)

    def test_empty_class_skipped(
        self, centroid: CentroidClassifier, png: Callable[..., bytes]
    ) -> None:
        classes = [
            ClassDefinition(name="empty"),
            ClassDefinition(name="blue", samples=[png(BLUE)]),
        ]
        result = centroid.classify(png(RED), classes)
        assert result.class_name == "blue"

    def test_confidence_clamped_at_zero(
        self, centroid: CentroidClassifier, png: Callable[..., bytes]
    ) -> None:
        classes = [ClassDefinition(name="white", samples=[png((255, 255, 255))])]
        result = centroid.classify(png((0, 0, 0)), classes)
        assert result.class_name == "white"
        assert result.confidence == 0.0

    def test_undecodable_samples_skipped(
        self, centroid: CentroidClassifier, png: Callable[..., bytes]
    ) -> None:
        classes = [
            ClassDefinition(name="broken", samples=[b"junk"]),
            ClassDefinition(name="red", samples=[b"junk", png(RED)]),
        ]
        result = centroid.classify(png(RED), classes)
        assert result.class_name == "red"
        assert result.confidence == pytest.approx(1.0)
        assert centroid.centroid(classes[0]) is None

    def test_undecodable_query_raises(
        self, centroid: CentroidClassifier, png: Callable[..., bytes]
    ) -> None:
        classes = [ClassDefinition(name="red", samples=[png(RED)])]
        with pytest.raises(SampleDecodeError):
            centroid.classify(b"junk", classes)
