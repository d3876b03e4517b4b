"""Model input features for the BRFSS 2015 diabetes health indicators.

``HighChol`` is excluded from the predictor set; every other survey indicator
is a model input. Ordinal survey scales (GenHlth, Age, Education, Income) are
treated as continuous, as are the day counts MentHlth and PhysHlth.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Tuple, Union

import pandas as pd


class FeatureKind(str, Enum):
    CONTINUOUS = "continuous"
    CATEGORICAL = "categorical"


BINARY_DOMAIN = frozenset({0, 1})


@dataclass(frozen=True)
class FeatureDefinition:
    name: str
    kind: FeatureKind
    description: str = ""

    @property
    def is_categorical(self) -> bool:
        return self.kind is FeatureKind.CATEGORICAL


# Column order of the BRFSS 2015 file, minus HighChol
FEATURES: Tuple[FeatureDefinition, ...] = (
    FeatureDefinition("HighBP", FeatureKind.CATEGORICAL, "High Blood Pressure (0 or 1)"),
    FeatureDefinition("CholCheck", FeatureKind.CATEGORICAL, "Cholesterol Check (0 or 1)"),
    FeatureDefinition("BMI", FeatureKind.CONTINUOUS, "Body Mass Index"),
    FeatureDefinition("Smoker", FeatureKind.CATEGORICAL, "Smoker (0 or 1)"),
    FeatureDefinition("Stroke", FeatureKind.CATEGORICAL, "Stroke (0 or 1)"),
    FeatureDefinition("HeartDiseaseorAttack", FeatureKind.CATEGORICAL, "Heart Disease or Attack (0 or 1)"),
    FeatureDefinition("PhysActivity", FeatureKind.CATEGORICAL, "Physical Activity (0 or 1)"),
    FeatureDefinition("Fruits", FeatureKind.CATEGORICAL, "Fruits (0 or 1)"),
    FeatureDefinition("Veggies", FeatureKind.CATEGORICAL, "Vegetables (0 or 1)"),
    FeatureDefinition("HvyAlcoholConsump", FeatureKind.CATEGORICAL, "Heavy Alcohol Consumption (0 or 1)"),
    FeatureDefinition("AnyHealthcare", FeatureKind.CATEGORICAL, "Any Healthcare (0 or 1)"),
    FeatureDefinition("NoDocbcCost", FeatureKind.CATEGORICAL, "No Doctor because of Cost (0 or 1)"),
    FeatureDefinition("GenHlth", FeatureKind.CONTINUOUS, "General Health (1-5 scale)"),
    FeatureDefinition("MentHlth", FeatureKind.CONTINUOUS, "Mental Health (days in past 30)"),
    FeatureDefinition("PhysHlth", FeatureKind.CONTINUOUS, "Physical Health (days in past 30)"),
    FeatureDefinition("DiffWalk", FeatureKind.CATEGORICAL, "Difficulty Walking (0 or 1)"),
    FeatureDefinition("Sex", FeatureKind.CATEGORICAL, "Sex (0 or 1)"),
    FeatureDefinition("Age", FeatureKind.CONTINUOUS, "Age (13-level category)"),
    FeatureDefinition("Education", FeatureKind.CONTINUOUS, "Education (1-6 scale)"),
    FeatureDefinition("Income", FeatureKind.CONTINUOUS, "Income (1-8 scale)"),
)

FEATURE_NAMES: Tuple[str, ...] = tuple(f.name for f in FEATURES)
CONTINUOUS_FEATURES: Tuple[str, ...] = tuple(f.name for f in FEATURES if not f.is_categorical)
CATEGORICAL_FEATURES: Tuple[str, ...] = tuple(f.name for f in FEATURES if f.is_categorical)

FEATURES_BY_NAME: Mapping[str, FeatureDefinition] = MappingProxyType({f.name: f for f in FEATURES})


class FeatureVector(Mapping[str, Union[float, int]]):
    """Fully resolved model input for one request, in canonical feature order."""

    def __init__(self, values: Mapping[str, Union[float, int]]):
        missing = [name for name in FEATURE_NAMES if name not in values]
        if missing:
            raise ValueError(f"Feature vector is missing features: {missing}")
        self._values = MappingProxyType({name: values[name] for name in FEATURE_NAMES})

    def __getitem__(self, name: str) -> Union[float, int]:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FeatureVector):
            return dict(self._values) == dict(other._values)
        return NotImplemented

    def __repr__(self) -> str:
        return f"FeatureVector({dict(self._values)!r})"

    def to_frame(self) -> pd.DataFrame:
        # one row, columns named as the training frame
        return pd.DataFrame([dict(self._values)], columns=list(FEATURE_NAMES))
