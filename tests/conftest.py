import numpy as np
import pandas as pd
import pytest

from diabetes_api.defaults import build_default_table
from diabetes_api.features import CATEGORICAL_FEATURES
from diabetes_api.predictor import Predictor


class StubScorer:
    """Returns a fixed probability and records every vector it scored."""

    def __init__(self, probability=0.3):
        self.probability = probability
        self.calls = []

    def score(self, vector):
        self.calls.append(vector)
        return self.probability


@pytest.fixture
def reference_df():
    rng = np.random.default_rng(0)
    n = 200
    data = {name: rng.integers(0, 2, size=n) for name in CATEGORICAL_FEATURES}
    data.update(
        {
            "BMI": rng.uniform(18.0, 45.0, size=n),
            "GenHlth": rng.integers(1, 6, size=n).astype(float),
            "MentHlth": rng.integers(0, 31, size=n).astype(float),
            "PhysHlth": rng.integers(0, 31, size=n).astype(float),
            "Age": rng.integers(1, 14, size=n).astype(float),
            "Education": rng.integers(1, 7, size=n).astype(float),
            "Income": rng.integers(1, 9, size=n).astype(float),
            "Diabetes_binary": rng.integers(0, 2, size=n),
        }
    )
    return pd.DataFrame(data)


@pytest.fixture
def default_table(reference_df):
    return build_default_table(reference_df)


@pytest.fixture
def stub_scorer():
    return StubScorer()


@pytest.fixture
def predictor(stub_scorer, default_table):
    return Predictor(stub_scorer, default_table)
