from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import List, Tuple


class CountTableStatistics(BaseModel):
    """Model for count table statistics."""

    model_config = ConfigDict(frozen=True)

    order: int = Field(..., description="Context length of the table")
    total_count: int = Field(default=0, description="Total number of n-grams counted")
    unique_contexts: int = Field(default=0, description="Number of distinct contexts")
    vocabulary_size: int = Field(default=0, description="Number of distinct tokens")

    @field_validator("total_count", "unique_contexts", "vocabulary_size")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Validate that counts are non-negative."""
        if v < 0:
            raise ValueError("Count values must be non-negative")
        return v


class ContinuationCount(BaseModel):
    """Model for one observed continuation of a context."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="The next token")
    count: int = Field(..., description="Number of times it followed the context")

    @field_validator("count")
    @classmethod
    def validate_count(cls, v: int) -> int:
        """Validate count is non-negative."""
        if v < 0:
            raise ValueError("Count must be non-negative")
        return v


class ContextCounts(BaseModel):
    """Model for all observed continuations of a single context."""

    model_config = ConfigDict(frozen=True)

    context: Tuple[str, ...] = Field(..., description="The context tuple")
    continuations: List[ContinuationCount] = Field(
        default_factory=list, description="Continuations in insertion order"
    )
    total: int = Field(default=0, description="Sum of continuation counts")

    @model_validator(mode="after")
    def validate_total(self) -> "ContextCounts":
        """Validate that total matches the continuation counts."""
        if self.total != sum(c.count for c in self.continuations):
            raise ValueError("total does not match the sum of continuation counts")
        return self
