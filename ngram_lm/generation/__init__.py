
from ngram_lm.generation.types import Prediction, PredictionResult
from ngram_lm.generation.engine import GenerationEngine
from ngram_lm.config.types import ModelConfig
from ngram_lm.counts import CountTable
from ngram_lm.probability import ProbabilityNormalizer
from typing import Optional
import random


def create_generation_engine(
    table: CountTable,
    config: ModelConfig,
    rng: Optional[random.Random] = None,
) -> GenerationEngine:
    """
    Factory function to create a GenerationEngine from a model configuration.

    Args:
        table: CountTable instance to read counts from
        config: ModelConfig supplying smoothing, sampling and temperature
        rng: Random number generator for stochastic sampling

    Returns:
        Initialized GenerationEngine instance
    """
    return GenerationEngine(
        table=table,
        normalizer=ProbabilityNormalizer(config.smoothing),
        sampling=config.sampling,
        temperature=config.temperature,
        rng=rng,
    )

__all__ = [
    "create_generation_engine",
    "GenerationEngine",
    "Prediction",
    "PredictionResult",
]
