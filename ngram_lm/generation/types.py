
from typing import List, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Prediction(BaseModel):
    """Model representing a single next-token prediction."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="Predicted token")
    probability: float = Field(..., ge=0.0, le=1.0, description="Probability of the token")


class PredictionResult(BaseModel):
    """Model representing the most probable continuations of a context."""

    predictions: List[Prediction] = Field(default_factory=list, description="List of predictions")
    context_used: Tuple[str, ...] = Field(..., description="Context used for prediction")
    context_seen: bool = Field(..., description="Whether the context was observed in training")

    @field_validator('predictions')
    @classmethod
    def validate_predictions(cls, v: List[Prediction]) -> List[Prediction]:
        """Ensure predictions are sorted by probability (stable on ties)."""
        return sorted(v, key=lambda x: x.probability, reverse=True)
