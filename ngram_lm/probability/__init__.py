from ngram_lm.probability.normalizer import ProbabilityNormalizer
from ngram_lm.probability.types import (
    PerplexityResult,
    ProbabilityDistribution,
)


def create_probability_normalizer(smoothing: float = 1.0) -> ProbabilityNormalizer:
    """
    Factory function to create a ProbabilityNormalizer instance.

    Args:
        smoothing: Additive smoothing constant (0 disables smoothing)

    Returns:
        Instance of ProbabilityNormalizer
    """
    return ProbabilityNormalizer(smoothing)


__all__ = [
    "create_probability_normalizer",
    "ProbabilityNormalizer",
    "PerplexityResult",
    "ProbabilityDistribution",
]
