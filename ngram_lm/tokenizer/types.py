from pydantic import BaseModel, Field, ConfigDict
from typing import List, Dict


class BatchTokenizationResult(BaseModel):
    """Model for batch tokenization results."""

    model_config = ConfigDict(frozen=True)

    streams: List[List[str]] = Field(
        ..., description="Sentinel-bracketed token streams, in input order"
    )
    failed_indices: List[int] = Field(
        default_factory=list, description="Indices of texts that failed to tokenize"
    )
    errors: Dict[int, str] = Field(
        default_factory=dict, description="Error messages for failed tokenizations"
    )
