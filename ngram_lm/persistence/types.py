from typing import Annotated, Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator

from ngram_lm.config.types import ModelConfig, SamplingStrategy
from ngram_lm.errors import PersistenceError

# Reserved separator joining context tokens into a single key
CONTEXT_SEPARATOR = "\x1f"

Count = Annotated[StrictInt, Field(ge=0)]


def encode_context(context: Tuple[str, ...]) -> str:
    """
    Join context tokens into a serialized key.

    Raises:
        PersistenceError: If a token contains the reserved separator
    """
    for token in context:
        if CONTEXT_SEPARATOR in token:
            raise PersistenceError(
                f"Token {token!r} contains the reserved context separator"
            )
    return CONTEXT_SEPARATOR.join(context)


def decode_context(key: str) -> Tuple[str, ...]:
    """Split a serialized key back into context tokens."""
    return tuple(key.split(CONTEXT_SEPARATOR))


class SerializedConfig(BaseModel):
    """Serialized form of a ModelConfig; every core field is required."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    order: StrictInt = Field(..., ge=1, description="Context length")
    smoothing: float = Field(..., ge=0.0, allow_inf_nan=False, description="Smoothing constant")
    sampling: SamplingStrategy = Field(..., description="Sampling strategy")
    temperature: float = Field(
        1.0, gt=0.0, allow_inf_nan=False, description="Stochastic sampling temperature"
    )

    @classmethod
    def from_config(cls, config: ModelConfig) -> "SerializedConfig":
        return cls(**config.model_dump())

    def to_config(self) -> ModelConfig:
        return ModelConfig(**self.model_dump())


class SerializedModel(BaseModel):
    """
    Canonical, lossless form of a trained model.

    counts maps encoded context keys to {next token -> count}. The optional
    vocabulary keeps the first-seen token order; when present it must hold
    exactly the tokens that appear in counts.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    config: SerializedConfig = Field(..., description="Settings used to build the counts")
    counts: Dict[str, Dict[str, Count]] = Field(
        ..., description="Encoded context -> next token -> count"
    )
    vocabulary: Optional[List[str]] = Field(
        None, description="Vocabulary in first-seen order"
    )

    @model_validator(mode="after")
    def validate_consistency(self) -> "SerializedModel":
        """Validate context lengths, positive mass per context and the vocabulary."""
        order = self.config.order
        tokens = set()

        for key, continuations in self.counts.items():
            context = decode_context(key)
            if len(context) != order:
                raise ValueError(
                    f"Context {context} has {len(context)} tokens, expected {order}"
                )
            if not any(count > 0 for count in continuations.values()):
                raise ValueError(f"Context {context} has no positive count")
            tokens.update(context)
            tokens.update(continuations)

        if self.vocabulary is not None:
            if len(set(self.vocabulary)) != len(self.vocabulary):
                raise ValueError("Vocabulary contains duplicate tokens")
            if set(self.vocabulary) != tokens:
                raise ValueError("Vocabulary doesn't match the tokens found in counts")

        return self

    def decoded_counts(self) -> Dict[Tuple[str, ...], Dict[str, int]]:
        """Return counts keyed by context tuples, preserving order."""
        return {
            decode_context(key): dict(continuations)
            for key, continuations in self.counts.items()
        }
