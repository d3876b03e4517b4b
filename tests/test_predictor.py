from concurrent.futures import ThreadPoolExecutor

import pytest

from diabetes_api.defaults import DefaultTable, build_default_table
from diabetes_api.errors import InvalidFeatureValueError, ScoringError
from diabetes_api.features import FEATURE_NAMES, FEATURES_BY_NAME, FeatureVector
from diabetes_api.predictor import Predictor, classify, coerce_value

from conftest import StubScorer


def test_no_overrides_uses_defaults(predictor, default_table):
    vector = predictor.resolve({})
    assert list(vector) == list(FEATURE_NAMES)
    for name in FEATURE_NAMES:
        assert vector[name] == pytest.approx(default_table[name])


def test_no_overrides_predicts(predictor, stub_scorer):
    result = predictor.predict()
    assert result.predicted_probability == pytest.approx(0.3)
    assert result.predicted_class == 0
    assert len(stub_scorer.calls) == 1


def test_partial_overrides(predictor, default_table, stub_scorer):
    stub_scorer.probability = 0.81
    result = predictor.predict({"HighBP": "1", "BMI": "25"})

    vector = stub_scorer.calls[0]
    assert vector["HighBP"] == 1
    assert vector["BMI"] == 25.0
    for name in FEATURE_NAMES:
        if name not in ("HighBP", "BMI"):
            assert vector[name] == pytest.approx(default_table[name])
    assert result.predicted_class == 1


def test_unknown_overrides_are_ignored(predictor):
    assert predictor.resolve({"HighChol": "1", "foo": "bar"}) == predictor.resolve({})


def test_idempotent(predictor):
    overrides = {"Smoker": "0", "Age": "50", "Income": "4"}
    assert predictor.predict(overrides) == predictor.predict(overrides)


def test_smoker_default_resolves_to_mode(reference_df):
    rows = reference_df.head(4).to_dict("records")
    for row, smoker in zip(rows, [0, 0, 0, 1]):
        row["Smoker"] = smoker
    predictor = Predictor(StubScorer(), build_default_table(rows))

    assert predictor.resolve()["Smoker"] == 0


def test_malformed_override_is_not_defaulted(predictor, stub_scorer):
    with pytest.raises(InvalidFeatureValueError) as err:
        predictor.predict({"Smoker": "maybe"})
    assert err.value.feature == "Smoker"
    assert err.value.value == "maybe"
    assert stub_scorer.calls == []


@pytest.mark.parametrize(
    "probability, expected",
    [(0.0, 0), (0.4999, 0), (0.5, 0), (0.5001, 1), (1.0, 1)],
)
def test_classify_threshold(probability, expected):
    assert classify(probability) == expected


def test_threshold_boundary(default_table):
    predictor = Predictor(StubScorer(0.5), default_table)
    assert predictor.predict().predicted_class == 0


@pytest.mark.parametrize("raw, expected", [("1", 1), ("0", 0), (" 1 ", 1), ("1.0", 1), (0, 0), (True, 1), (1.0, 1)])
def test_coerce_categorical(raw, expected):
    value = coerce_value(FEATURES_BY_NAME["Smoker"], raw)
    assert value == expected
    assert type(value) is int


@pytest.mark.parametrize("raw", ["maybe", "", "2", "-1", "0.5", "yes", None, "nan"])
def test_coerce_categorical_rejects(raw):
    with pytest.raises(InvalidFeatureValueError):
        coerce_value(FEATURES_BY_NAME["Smoker"], raw)


@pytest.mark.parametrize("raw, expected", [("25", 25.0), ("27.5", 27.5), (30, 30.0), ("1e1", 10.0)])
def test_coerce_continuous(raw, expected):
    value = coerce_value(FEATURES_BY_NAME["BMI"], raw)
    assert value == expected
    assert type(value) is float


@pytest.mark.parametrize("raw", ["heavy", "", "inf", "nan", None, "25kg"])
def test_coerce_continuous_rejects(raw):
    with pytest.raises(InvalidFeatureValueError):
        coerce_value(FEATURES_BY_NAME["BMI"], raw)


def test_incomplete_default_table_rejected(stub_scorer):
    with pytest.raises(ValueError):
        Predictor(stub_scorer, DefaultTable({"BMI": 28.0}))


def test_feature_vector_requires_every_feature():
    with pytest.raises(ValueError):
        FeatureVector({"BMI": 28.0})


class RaisingScorer:
    def score(self, vector):
        raise RuntimeError("numerical failure")


@pytest.mark.parametrize("probability", [1.5, -0.1, float("nan"), float("inf")])
def test_any_scorer_invalid_probability_is_scoring_error(default_table, probability):
    predictor = Predictor(StubScorer(probability), default_table)
    with pytest.raises(ScoringError):
        predictor.predict()


def test_any_scorer_failure_is_scoring_error(default_table):
    with pytest.raises(ScoringError) as err:
        Predictor(RaisingScorer(), default_table).predict()
    assert isinstance(err.value.__cause__, RuntimeError)


class AgeScorer:
    def score(self, vector):
        return vector["Age"] / 20.0


def test_concurrent_predictions_match(default_table):
    predictor = Predictor(AgeScorer(), default_table)
    overrides = [{"Age": str(age), "Smoker": str(age % 2)} for age in range(1, 14)] * 8

    expected = [predictor.predict(o) for o in overrides]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(predictor.predict, overrides))

    assert results == expected
    assert dict(predictor.default_table) == dict(default_table)
