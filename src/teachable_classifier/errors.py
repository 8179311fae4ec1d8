"""Exception taxonomy for teachable_classifier.

Only per-run failures are raised to callers.  Expected conditions such as
an untrained classifier or an empty class set are reported as result
values by the public entry points.
"""

from __future__ import annotations


class TeachableClassifierError(RuntimeError):
    """Base class for all teachable_classifier errors."""


class ModelUnavailable(TeachableClassifierError):
    """The feature-extraction backend could not be initialized."""


class NotTrained(TeachableClassifierError):
    """A prediction was requested before any example was added."""


class AlreadyTraining(TeachableClassifierError):
    """A training run was requested while another one is in progress."""


class SampleDecodeError(TeachableClassifierError, ValueError):
    """An encoded sample could not be decoded into an RGB image."""
