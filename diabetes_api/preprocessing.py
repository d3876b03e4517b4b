import logging
from typing import Optional, Tuple

import pandas as pd

from diabetes_api.config import Config
from diabetes_api.features import CATEGORICAL_FEATURES, CONTINUOUS_FEATURES, FEATURE_NAMES

logger = logging.getLogger(__name__)


def clean_reference_data(df: pd.DataFrame, cfg: Optional[Config] = None) -> pd.DataFrame:
    """Select, filter and type the survey columns the model is trained on.

    Drops the excluded predictors, removes BMI outliers (``BMI >= bmi_upper_bound``,
    and rows with no BMI), drops rows missing a binary value or the target, casts
    binary columns and the target to int and the rest to float. Other continuous
    gaps are kept as NaN. Returns the features in canonical order followed by the target.
    """
    cfg = cfg or Config()

    # raise error if columns missing in the source file
    required = list(FEATURE_NAMES) + [cfg.target_col]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns: {missing}")

    out = df.drop(columns=[c for c in cfg.dropped_cols if c in df.columns])
    out = out[out["BMI"] < cfg.bmi_upper_bound]

    # binary columns cannot hold NaN once cast to int
    out = out[required].dropna(subset=list(CATEGORICAL_FEATURES) + [cfg.target_col]).copy()
    for col in list(CATEGORICAL_FEATURES) + [cfg.target_col]:
        out[col] = out[col].astype(int)
    for col in CONTINUOUS_FEATURES:
        out[col] = out[col].astype(float)

    return out.reset_index(drop=True)


def load_reference_data(cfg: Optional[Config] = None) -> pd.DataFrame:
    cfg = cfg or Config()
    if not cfg.data_path.exists():
        raise FileNotFoundError(
            f"Reference dataset not found at '{cfg.data_path}'. "
            f"Set DIABETES_DATA_PATH to the BRFSS 2015 diabetes CSV."
        )

    raw = pd.read_csv(cfg.data_path)
    df = clean_reference_data(raw, cfg)
    logger.info(
        "Loaded reference data from %s: %d rows (%d removed by cleaning)",
        cfg.data_path, len(df), len(raw) - len(df),
    )
    return df


def split_features_target(df: pd.DataFrame, cfg: Optional[Config] = None) -> Tuple[pd.DataFrame, pd.Series]:
    cfg = cfg or Config()
    X = df[list(FEATURE_NAMES)]
    y = df[cfg.target_col]
    return X, y
