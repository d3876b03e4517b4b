from typing import Any


class DiabetesApiError(Exception):
    """Base class for errors raised by the prediction service."""


class InsufficientDataError(DiabetesApiError):
    """A feature has no usable observations in the reference dataset.

    Raised while building the default table; the service must not start.
    """

    def __init__(self, feature: str, reason: str = "no non-missing observations"):
        self.feature = feature
        self.reason = reason
        super().__init__(f"Cannot compute default for '{feature}': {reason}")


class InvalidFeatureValueError(DiabetesApiError):
    """A caller-supplied value cannot be coerced to its feature's kind."""

    def __init__(self, feature: str, value: Any, expected: str):
        self.feature = feature
        self.value = value
        self.expected = expected
        super().__init__(f"Invalid value {value!r} for '{feature}': expected {expected}")


class ScoringError(DiabetesApiError):
    """The fitted model failed to produce a probability."""
