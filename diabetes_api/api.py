"""HTTP surface of the diabetes risk predictor.

Run:
  uvicorn diabetes_api.api:app --host 0.0.0.0 --port 8000

Example:
  curl "http://localhost:8000/pred?HighBP=1&BMI=25"
  {"predicted_probability": 0.21, "predicted_class": 0}
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from diabetes_api import __version__
from diabetes_api.config import Config, configure_logging
from diabetes_api.errors import InvalidFeatureValueError, ScoringError
from diabetes_api.features import FEATURES
from diabetes_api.predictor import Predictor, load_predictor
from diabetes_api.schemas import ErrorResponse, HealthResponse, PredictionResult

logger = logging.getLogger(__name__)

PRED_DESCRIPTION = "Predict diabetes. Every feature is an optional query parameter:\n\n" + "\n".join(
    f"- `{f.name}`: {f.description} (default: {'mode' if f.is_categorical else 'mean'} value)"
    for f in FEATURES
)


def create_app(predictor: Optional[Predictor] = None, cfg: Optional[Config] = None) -> FastAPI:
    """Build the app around an already-built predictor, or load one at startup.

    Without an explicit ``cfg`` the environment (and .env) is read at startup,
    not when the module is imported.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "predictor", None) is None:
            settings = cfg or Config.from_env()
            configure_logging(settings.log_level)
            app.state.predictor = load_predictor(settings)
        yield

    app = FastAPI(title="Diabetes Risk Predictor", version=__version__, lifespan=lifespan)
    app.state.predictor = predictor

    @app.exception_handler(InvalidFeatureValueError)
    async def invalid_feature_handler(request: Request, exc: InvalidFeatureValueError):
        logger.info("Rejected override for %s: %r", exc.feature, exc.value)
        return JSONResponse(status_code=422, content={"detail": str(exc), "feature": exc.feature})

    @app.exception_handler(ScoringError)
    async def scoring_error_handler(request: Request, exc: ScoringError):
        logger.error("Scoring failed: %s", exc, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Prediction error"})

    @app.get("/health", response_model=HealthResponse)
    def health(request: Request):
        loaded = getattr(request.app.state, "predictor", None)
        return HealthResponse(
            status="ok" if loaded is not None else "unavailable",
            model_loaded=loaded is not None,
            n_features=len(FEATURES),
        )

    @app.get(
        "/pred",
        response_model=PredictionResult,
        description=PRED_DESCRIPTION,
        responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    def pred(request: Request):
        return request.app.state.predictor.predict(request.query_params)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _cfg = Config.from_env()
    uvicorn.run(app, host=_cfg.host, port=_cfg.port)
