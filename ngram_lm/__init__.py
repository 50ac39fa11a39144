"""
Statistical n-gram language model: count n-grams from token streams,
compute smoothed next-token probabilities and generate new sequences.
"""

from ngram_lm.config import ModelConfig, SamplingStrategy, create_config
from ngram_lm.corpus import tiny_corpus
from ngram_lm.errors import ConfigError, GenerationError, NGramError, PersistenceError
from ngram_lm.model import NGramModel
from ngram_lm.persistence import CONTEXT_SEPARATOR, ModelStore, SerializedModel
from ngram_lm.tokenizer import EOS, SOS, Tokenizer, eos, sos, tokenize

__version__ = "0.1.0"

__all__ = [
    "NGramModel",
    "ModelConfig",
    "SamplingStrategy",
    "create_config",
    "NGramError",
    "ConfigError",
    "GenerationError",
    "PersistenceError",
    "ModelStore",
    "SerializedModel",
    "CONTEXT_SEPARATOR",
    "Tokenizer",
    "tokenize",
    "sos",
    "eos",
    "SOS",
    "EOS",
    "tiny_corpus",
]
