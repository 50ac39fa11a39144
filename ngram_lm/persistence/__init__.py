from ngram_lm.persistence.store import ModelStore, parse_serialized
from ngram_lm.persistence.types import (
    CONTEXT_SEPARATOR,
    SerializedConfig,
    SerializedModel,
    decode_context,
    encode_context,
)


def create_model_store() -> ModelStore:
    """
    Factory function to create a ModelStore instance.

    Returns:
        ModelStore choosing JSON or pickle by file suffix
    """
    return ModelStore()


__all__ = [
    "create_model_store",
    "ModelStore",
    "parse_serialized",
    "CONTEXT_SEPARATOR",
    "SerializedConfig",
    "SerializedModel",
    "decode_context",
    "encode_context",
]
