"""Resolve sparse feature overrides against the default table and score them."""
import logging
import math
from typing import Any, Dict, Mapping, Optional, Union

from diabetes_api.config import Config
from diabetes_api.defaults import DefaultTable, build_default_table
from diabetes_api.errors import InvalidFeatureValueError, ScoringError
from diabetes_api.features import FEATURES, FeatureDefinition, FeatureVector
from diabetes_api.model import Scorer, load_scorer
from diabetes_api.preprocessing import load_reference_data
from diabetes_api.schemas import PredictionResult

logger = logging.getLogger(__name__)

DECISION_THRESHOLD = 0.5


def _parse_number(feature: FeatureDefinition, raw: Any, expected: str) -> float:
    # bool is an int subclass and parses to 0.0 / 1.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidFeatureValueError(feature.name, raw, expected) from None
    if not math.isfinite(value):
        raise InvalidFeatureValueError(feature.name, raw, expected)
    return value


def coerce_value(feature: FeatureDefinition, raw: Any) -> Union[float, int]:
    """Parse a raw value into the representation ``feature`` is trained on.

    Continuous features become finite floats. Binary features accept any numeric
    spelling of 0 or 1 ("1", "1.0", 1, True) and become ints; anything else,
    including out-of-domain integers, is rejected.
    """
    if not feature.is_categorical:
        return _parse_number(feature, raw, "a finite number")

    value = _parse_number(feature, raw, "0 or 1")
    if value not in (0.0, 1.0):
        raise InvalidFeatureValueError(feature.name, raw, "0 or 1")
    return int(value)


def classify(probability: float) -> int:
    return 1 if probability > DECISION_THRESHOLD else 0


class Predictor:
    """Holds the fitted model and default table shared by every request.

    Both are built once and only read afterwards, so a single instance can
    serve concurrent requests without locking.
    """

    def __init__(self, scorer: Scorer, default_table: DefaultTable):
        missing = [f.name for f in FEATURES if f.name not in default_table]
        if missing:
            raise ValueError(f"Default table has no entry for: {missing}")
        self.scorer = scorer
        self.default_table = default_table

    def resolve(self, overrides: Optional[Mapping[str, Any]] = None) -> FeatureVector:
        """Build a complete feature vector; unknown override names are ignored."""
        overrides = overrides or {}
        values: Dict[str, Union[float, int]] = {}
        for feature in FEATURES:
            if feature.name in overrides:
                raw = overrides[feature.name]
            else:
                raw = self.default_table[feature.name]
            values[feature.name] = coerce_value(feature, raw)
        return FeatureVector(values)

    def _score(self, vector: FeatureVector) -> float:
        """Call the scorer; every failure or non-probability becomes ``ScoringError``."""
        try:
            probability = float(self.scorer.score(vector))
        except ScoringError:
            raise
        except Exception as e:
            raise ScoringError(f"Model failed to score feature vector: {e}") from e

        if not math.isfinite(probability) or not 0.0 <= probability <= 1.0:
            raise ScoringError(f"Model returned an invalid probability: {probability!r}")
        return probability

    def predict(self, overrides: Optional[Mapping[str, Any]] = None) -> PredictionResult:
        vector = self.resolve(overrides)
        probability = self._score(vector)
        return PredictionResult(
            predicted_probability=probability,
            predicted_class=classify(probability),
        )


def load_predictor(cfg: Optional[Config] = None) -> Predictor:
    """Startup sequence: reference data, then defaults, then the fitted model.

    Any failure here propagates; the service must not come up half-built.
    """
    cfg = cfg or Config()
    reference = load_reference_data(cfg)
    default_table = build_default_table(reference)
    scorer = load_scorer(cfg.model_path)
    logger.info("Predictor ready: %d features, model %s", len(default_table), cfg.model_path)
    return Predictor(scorer, default_table)
