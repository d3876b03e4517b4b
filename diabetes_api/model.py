"""Scoring contract between the prediction endpoint and a fitted model.

Any object with ``score(vector) -> float`` can serve predictions. The shipped
implementation wraps a scikit-learn estimator persisted with joblib.
"""
import logging
from pathlib import Path
from typing import Any, Protocol, Union

import joblib

from diabetes_api.errors import ScoringError
from diabetes_api.features import FeatureVector

logger = logging.getLogger(__name__)


class Scorer(Protocol):
    def score(self, vector: FeatureVector) -> float:
        """Probability that the positive class applies, in [0, 1]."""
        ...


class SklearnScorer:
    """Adapts an estimator exposing ``predict_proba`` to the scoring contract."""

    def __init__(self, estimator: Any, positive_label: int = 1):
        if not hasattr(estimator, "predict_proba"):
            raise TypeError(f"{type(estimator).__name__} does not implement predict_proba")
        self.estimator = estimator
        classes = list(getattr(estimator, "classes_", [0, 1]))
        if positive_label not in classes:
            raise ValueError(f"Positive label {positive_label!r} not among model classes {classes}")
        self._positive_index = classes.index(positive_label)

    def score(self, vector: FeatureVector) -> float:
        X = vector.to_frame()
        try:
            proba = float(self.estimator.predict_proba(X)[0][self._positive_index])
        except Exception as e:
            raise ScoringError(f"Model failed to score feature vector: {e}") from e

        return proba


def load_scorer(model_path: Union[str, Path]) -> SklearnScorer:
    model_path = Path(model_path)
    if not model_path.exists():
        raise FileNotFoundError(
            f"Model not found at {model_path}. Train first: python -m diabetes_api.train"
        )
    estimator = joblib.load(model_path)
    logger.info("Loaded model %s from %s", type(estimator).__name__, model_path)
    return SklearnScorer(estimator)
