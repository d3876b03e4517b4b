"""Per-feature fallback values used to complete partial prediction requests.

Continuous features default to the arithmetic mean of their non-missing
observations, binary features to their most frequent observed value. When two
binary values are equally frequent the one seen first in the reference data
wins, so the result depends on row order for perfectly balanced columns.
"""
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Sequence, Union

import pandas as pd

from diabetes_api.errors import InsufficientDataError
from diabetes_api.features import BINARY_DOMAIN, FEATURES, FeatureDefinition

logger = logging.getLogger(__name__)

ReferenceData = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]


class DefaultTable(Mapping[str, Union[float, int]]):
    """Read-only mapping of feature name to default value."""

    def __init__(self, values: Mapping[str, Union[float, int]]):
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, name: str) -> Union[float, int]:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"DefaultTable({dict(self._values)!r})"


def mean_default(feature: str, values: pd.Series) -> float:
    observed = pd.to_numeric(values).dropna()
    if len(observed) == 0:
        raise InsufficientDataError(feature)
    return float(observed.sum() / len(observed))


def mode_default(feature: str, values: Iterable[Any]) -> int:
    # dict keeps first-seen order, and max() returns the first of equal counts
    counts: Dict[int, int] = {}
    for value in values:
        if pd.isna(value):
            continue
        if value not in BINARY_DOMAIN:
            continue
        label = int(value)
        counts[label] = counts.get(label, 0) + 1

    if not counts:
        raise InsufficientDataError(feature, "no observed values in {0, 1}")
    return max(counts, key=counts.get)


def _column(df: pd.DataFrame, feature: FeatureDefinition) -> pd.Series:
    if feature.name not in df.columns:
        raise InsufficientDataError(feature.name, "column missing from reference data")
    return df[feature.name]


def build_default_table(reference: ReferenceData) -> DefaultTable:
    """Compute one default per model feature from a cleaned reference dataset.

    ``reference`` is either a DataFrame or an ordered sequence of row mappings.
    Raises ``InsufficientDataError`` when any feature has nothing to average or
    count; callers treat that as fatal at startup.
    """
    df = reference if isinstance(reference, pd.DataFrame) else pd.DataFrame.from_records(list(reference))

    values: Dict[str, Union[float, int]] = {}
    for feature in FEATURES:
        column = _column(df, feature)
        if feature.is_categorical:
            values[feature.name] = mode_default(feature.name, column)
        else:
            values[feature.name] = mean_default(feature.name, column)

    logger.info("Built default table for %d features from %d reference rows", len(values), len(df))
    return DefaultTable(values)
