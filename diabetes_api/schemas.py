from typing import Literal, Optional

from pydantic import BaseModel, Field


class PredictionResult(BaseModel):
    predicted_probability: float = Field(..., ge=0.0, le=1.0)
    predicted_class: Literal[0, 1]


class HealthResponse(BaseModel):
    status: str
    model_loaded: bool
    n_features: int


class ErrorResponse(BaseModel):
    detail: str
    feature: Optional[str] = None
