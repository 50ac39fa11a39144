"""
Exception hierarchy for the n-gram language model.
"""


class NGramError(Exception):
    """Base class for all errors raised by the n-gram model."""


class ConfigError(NGramError, ValueError):
    """Raised when a ModelConfig is constructed with invalid parameters."""


class GenerationError(NGramError):
    """Raised when the next-token distribution for a context is undefined."""


class PersistenceError(NGramError):
    """Raised when a serialized model cannot be written, read or validated."""
