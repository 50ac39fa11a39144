
from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from ngram_lm.errors import ConfigError


class SamplingStrategy(str, Enum):
    """Supported strategies for choosing the next token."""

    STOCHASTIC = "stochastic"
    GREEDY = "greedy"


class ModelConfig(BaseModel):
    """
    Immutable settings for an n-gram model.

    Invalid values raise ConfigError, whether the config is constructed or
    validated from data. Build a changed config with with_options().

    Example:
        >>> config = ModelConfig(order=3, smoothing=0.5, sampling="greedy")
        >>> config.order
        3
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    order: StrictInt = Field(2, description="Number of preceding tokens used as context")
    smoothing: float = Field(
        1.0, allow_inf_nan=False, description="Additive (Laplace add-k) smoothing constant"
    )
    sampling: SamplingStrategy = Field(
        SamplingStrategy.STOCHASTIC, description="How the next token is chosen"
    )
    temperature: float = Field(
        1.0, allow_inf_nan=False, description="Reshapes stochastic sampling (p ** (1 / T))"
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid model configuration: {e}") from e

    # model_validate* bypass __init__, so they convert errors themselves
    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any) -> "ModelConfig":
        try:
            return super().model_validate(obj, **kwargs)
        except ValidationError as e:
            raise ConfigError(f"Invalid model configuration: {e}") from e

    @classmethod
    def model_validate_json(cls, json_data: Any, **kwargs: Any) -> "ModelConfig":
        try:
            return super().model_validate_json(json_data, **kwargs)
        except ValidationError as e:
            raise ConfigError(f"Invalid model configuration: {e}") from e

    @field_validator("order")
    @classmethod
    def validate_order(cls, v: int) -> int:
        """Validate that the context holds at least one token."""
        if v < 1:
            raise ValueError("order must be at least 1")
        return v

    @field_validator("smoothing")
    @classmethod
    def validate_smoothing(cls, v: float) -> float:
        """Validate that smoothing is non-negative."""
        if v < 0:
            raise ValueError("smoothing must be non-negative")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        """Validate that temperature is positive."""
        if v <= 0:
            raise ValueError("temperature must be positive")
        return v

    def with_options(self, **changes: Any) -> "ModelConfig":
        """Return a new, validated config with the given fields replaced."""
        return ModelConfig(**{**self.model_dump(), **changes})
