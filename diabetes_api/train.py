"""Fit the logistic-regression artifact the prediction service loads.

Usage:
  python -m diabetes_api.train

Reads the BRFSS 2015 CSV from DIABETES_DATA_PATH and writes MODEL_PATH. When
MLFLOW_TRACKING_URI is set the run, its metrics and the model are logged there.
"""
import logging
from typing import Optional

import joblib
import mlflow
import mlflow.sklearn
import pandas as pd
from mlflow.models import infer_signature
from sklearn.compose import ColumnTransformer
from sklearn.impute import SimpleImputer
from sklearn.linear_model import LogisticRegression
from sklearn.metrics import accuracy_score, log_loss, roc_auc_score
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder

from diabetes_api.config import Config, configure_logging
from diabetes_api.features import CATEGORICAL_FEATURES, CONTINUOUS_FEATURES
from diabetes_api.preprocessing import load_reference_data, split_features_target

logger = logging.getLogger(__name__)


def build_pipeline() -> Pipeline:
    numeric_transformer = Pipeline(
        steps=[
            ("imputer", SimpleImputer(strategy="mean")),
        ]
    )

    # drop="if_binary" leaves one dummy per 0/1 column, like a glm factor
    categorical_transformer = Pipeline(
        steps=[
            ("onehot", OneHotEncoder(drop="if_binary", handle_unknown="ignore")),
        ]
    )

    preprocessor = ColumnTransformer(
        transformers=[
            ("num", numeric_transformer, list(CONTINUOUS_FEATURES)),
            ("cat", categorical_transformer, list(CATEGORICAL_FEATURES)),
        ]
    )

    model = LogisticRegression(max_iter=1000)

    return Pipeline(steps=[("preprocess", preprocessor), ("model", model)])


def classification_metrics(y_true, proba) -> dict:
    return {
        "accuracy": float(accuracy_score(y_true, (proba > 0.5).astype(int))),
        "roc_auc": float(roc_auc_score(y_true, proba)),
        "log_loss": float(log_loss(y_true, proba, labels=[0, 1])),
    }


def fit(df: pd.DataFrame, cfg: Optional[Config] = None):
    """Fit on a cleaned frame; returns (pipeline, holdout metrics, X_train)."""
    cfg = cfg or Config()
    X, y = split_features_target(df, cfg)

    X_train, X_test, y_train, y_test = train_test_split(
        X, y, test_size=cfg.test_size, random_state=cfg.random_state, stratify=y
    )

    pipe = build_pipeline()
    pipe.fit(X_train, y_train)

    proba = pipe.predict_proba(X_test)[:, 1]
    metrics = classification_metrics(y_test, proba)
    return pipe, metrics, X_train


def _log_to_mlflow(cfg: Config, pipe: Pipeline, metrics: dict, X_train: pd.DataFrame) -> None:
    mlflow.set_tracking_uri(cfg.mlflow_tracking_uri)
    mlflow.set_experiment(cfg.experiment_name)

    with mlflow.start_run(run_name="logistic_regression"):
        mlflow.set_tag("dataset", "brfss2015-diabetes-binary")
        mlflow.set_tag("problem_type", "classification")
        mlflow.log_param("model", "LogisticRegression")
        mlflow.log_param("target_col", cfg.target_col)
        mlflow.log_param("dropped_cols", ",".join(cfg.dropped_cols))
        mlflow.log_param("bmi_upper_bound", cfg.bmi_upper_bound)
        mlflow.log_param("test_size", cfg.test_size)
        mlflow.log_param("random_state", cfg.random_state)
        mlflow.log_metrics({f"test_{k}": v for k, v in metrics.items()})

        signature = infer_signature(X_train, pipe.predict_proba(X_train))
        mlflow.sklearn.log_model(
            sk_model=pipe,
            artifact_path="model",
            signature=signature,
            input_example=X_train.head(5),
        )


def train(cfg: Optional[Config] = None) -> dict:
    cfg = cfg or Config()
    df = load_reference_data(cfg)

    pipe, metrics, X_train = fit(df, cfg)

    cfg.model_path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(pipe, cfg.model_path)
    logger.info("Saved model to %s", cfg.model_path)
    logger.info("Holdout metrics: %s", metrics)

    if cfg.mlflow_tracking_uri:
        _log_to_mlflow(cfg, pipe, metrics, X_train)
        logger.info("Run logged to MLflow experiment %s", cfg.experiment_name)
    else:
        logger.info("MLFLOW_TRACKING_URI not set; skipping MLflow logging")

    return metrics


def main():
    cfg = Config.from_env()
    configure_logging(cfg.log_level)
    train(cfg)


if __name__ == "__main__":
    main()
