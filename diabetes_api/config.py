import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Config:
    # Paths
    data_path: Path = Path("data/diabetes_binary_health_indicators_BRFSS2015.csv")
    artifacts_dir: Path = Path("artifacts")
    model_path: Path = Path("artifacts/model.joblib")

    # Data
    target_col: str = "Diabetes_binary"
    dropped_cols: Tuple[str, ...] = ("HighChol",)
    bmi_upper_bound: float = 50.0

    # Split
    test_size: float = 0.2
    random_state: int = 42

    # MLflow
    experiment_name: str = "diabetes-logistic-regression"
    mlflow_tracking_uri: Optional[str] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Build a config from defaults overlaid with environment variables (and .env)."""
        load_dotenv()
        defaults = cls()
        artifacts_dir = Path(os.getenv("ARTIFACTS_DIR", str(defaults.artifacts_dir)))
        return cls(
            data_path=Path(os.getenv("DIABETES_DATA_PATH", str(defaults.data_path))),
            artifacts_dir=artifacts_dir,
            model_path=Path(os.getenv("MODEL_PATH", str(artifacts_dir / "model.joblib"))),
            bmi_upper_bound=float(os.getenv("BMI_UPPER_BOUND", defaults.bmi_upper_bound)),
            experiment_name=os.getenv("EXPERIMENT_NAME", defaults.experiment_name),
            mlflow_tracking_uri=os.getenv("MLFLOW_TRACKING_URI") or None,
            host=os.getenv("HOST", defaults.host),
            port=int(os.getenv("PORT", defaults.port)),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
