
from typing import Dict, Annotated
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProbabilityDistribution(BaseModel):
    """Model representing a next-token distribution for one context."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    probabilities: Dict[str, Annotated[float, Field(ge=0.0, le=1.0)]] = Field(
        ...,
        description="Mapping of tokens to their probabilities, in tie-break order"
    )
    total_probability: Annotated[float, Field(ge=0.0, le=1.01)] = Field(
        1.0,
        description="Sum of all probabilities (should be ~1.0)"
    )
    context_seen: bool = Field(
        True, description="Whether the context was observed during training"
    )

    def most_probable(self) -> str:
        """Return the highest-probability token, earliest on ties."""
        best_token = None
        best_prob = -1.0
        for token, prob in self.probabilities.items():
            if prob > best_prob:
                best_token, best_prob = token, prob
        if best_token is None:
            raise ValueError("Empty distribution")
        return best_token


class PerplexityResult(BaseModel):
    """Model for perplexity calculation results."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    perplexity: float = Field(..., description="Perplexity score")
    sequence_length: int = Field(..., description="Number of scored n-grams")

    @field_validator('perplexity')
    @classmethod
    def _validate_perplexity(cls, v: float) -> float:
        """Ensure perplexity is positive."""
        if v <= 0 and v != float('inf'):
            raise ValueError("Perplexity must be positive or infinity")
        return v
