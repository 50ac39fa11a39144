from typing import Union
from ngram_lm.config.types import ModelConfig, SamplingStrategy


def create_config(
    order: int = 2,
    smoothing: float = 1.0,
    sampling: Union[SamplingStrategy, str] = SamplingStrategy.STOCHASTIC,
    temperature: float = 1.0,
) -> ModelConfig:
    """
    Factory function to create a model configuration.

    Args:
        order: Number of preceding tokens used as context (>= 1)
        smoothing: Additive smoothing constant (>= 0)
        sampling: Sampling strategy ('stochastic' or 'greedy')
        temperature: Temperature for stochastic sampling (> 0)

    Returns:
        Validated ModelConfig instance

    Raises:
        ConfigError: If any parameter is invalid

    Examples:
        >>> config = create_config(order=1, sampling="greedy")
        >>> config.sampling.value
        'greedy'
    """
    return ModelConfig(
        order=order, smoothing=smoothing, sampling=sampling, temperature=temperature
    )


__all__ = [
    "create_config",
    "ModelConfig",
    "SamplingStrategy",
]
