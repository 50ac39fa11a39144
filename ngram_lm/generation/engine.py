from typing import List, MutableSequence, Optional, Sequence, Tuple
from ngram_lm.config.types import SamplingStrategy
from ngram_lm.counts import CountTable
from ngram_lm.generation.types import Prediction, PredictionResult
from ngram_lm.probability import ProbabilityNormalizer
from ngram_lm.tokenizer.sentinels import EOS
import logging
import random

# Configure logging
logger = logging.getLogger(__name__)

# Stands for the whole block of vocabulary tokens never seen after a context
_UNSEEN = object()


class GenerationEngine:
    """
    Chooses next tokens from a count table and extends token sequences.

    Attributes:
        table: Count table holding n-gram statistics
        normalizer: Probability normalizer applying the smoothing formula
        sampling: Strategy used to pick the next token
        temperature: Temperature applied to stochastic sampling
        rng: Random number generator used for stochastic draws
        eos_token: Token that ends generation early
    """

    def __init__(
        self,
        table: CountTable,
        normalizer: ProbabilityNormalizer,
        sampling: SamplingStrategy = SamplingStrategy.STOCHASTIC,
        temperature: float = 1.0,
        rng: Optional[random.Random] = None,
        eos_token: str = EOS,
    ) -> None:
        """
        Initialize generation engine.

        Args:
            table: CountTable instance
            normalizer: ProbabilityNormalizer instance
            sampling: Sampling strategy
            temperature: Temperature for stochastic sampling, must be > 0
            rng: Random number generator (a fresh one if None)
            eos_token: End-of-sequence sentinel

        Raises:
            ValueError: If temperature is not positive
        """
        if temperature <= 0:
            raise ValueError("temperature must be positive")

        self.table = table
        self.normalizer = normalizer
        self.sampling = SamplingStrategy(sampling)
        self.temperature = temperature
        self.rng = rng or random.Random()
        self.eos_token = eos_token

        logger.debug(
            f"GenerationEngine initialized with sampling={self.sampling.value}, "
            f"temperature={temperature}"
        )

    def select_next(self, context: Sequence[str]) -> str:
        """
        Choose the next token for a context.

        Args:
            context: Exactly `table.order` context tokens

        Returns:
            The selected token

        Raises:
            ValueError: If the context has the wrong length
            GenerationError: If the distribution for the context is undefined
        """
        context = tuple(context)
        if len(context) != self.table.order:
            raise ValueError(
                f"Context size {len(context)} doesn't match order {self.table.order}"
            )

        if self.sampling == SamplingStrategy.GREEDY:
            token = self._select_greedy(context)
        else:
            token = self._select_stochastic(context)

        logger.debug(f"Selected {token!r} after context {context}")
        return token

    def _select_greedy(self, context: Tuple[str, ...]) -> str:
        """
        Pick the most probable token, earliest in insertion order on ties.

        Observed continuations always outrank unobserved vocabulary, so the
        observed counter alone decides a seen context.
        """
        observed = self.table.continuations(context)
        if not observed:
            # Raises when the uniform fallback is undefined
            self.normalizer.smoothed_probability(0, 0, self.table.vocabulary_size)
            return self.table.first_token()

        best_token = None
        best_count = -1
        for token, count in observed.items():
            if count > best_count:
                best_token, best_count = token, count
        return best_token

    def _select_stochastic(self, context: Tuple[str, ...]) -> str:
        """
        Draw a token proportionally to p ** (1 / temperature).

        The unobserved part of the vocabulary shares a single probability,
        so it is drawn as one block and resolved to a uniform token choice.
        """
        vocabulary_size = self.table.vocabulary_size
        observed = self.table.continuations(context)
        if not observed:
            self.normalizer.smoothed_probability(0, 0, vocabulary_size)
            return self.table.random_token(self.rng)

        total = self.table.total(context)
        exponent = 1.0 / self.temperature

        candidates: List[object] = list(observed.keys())
        weights = [
            self.normalizer.smoothed_probability(count, total, vocabulary_size) ** exponent
            for count in observed.values()
        ]

        unseen_count = vocabulary_size - len(candidates)
        if unseen_count > 0:
            unseen_weight = (
                self.normalizer.smoothed_probability(0, total, vocabulary_size) ** exponent
            )
            if unseen_weight > 0:
                candidates.append(_UNSEEN)
                weights.append(unseen_weight * unseen_count)

        if sum(weights) <= 0:
            # Every weight underflowed at a very low temperature
            return self._select_greedy(context)

        choice = self.rng.choices(candidates, weights=weights)[0]
        if choice is _UNSEEN:
            return self.table.random_token_excluding(observed, self.rng)
        return choice

    def generate(self, tokens: MutableSequence[str], max_new: int) -> int:
        """
        Extend a token sequence in place.

        Each step uses the last `order` tokens as context and appends one
        selected token. Generation stops after `max_new` tokens or right
        after the end-of-sequence token is appended.

        Args:
            tokens: Seed tokens, at least `order` of them
            max_new: Maximum number of tokens to append

        Returns:
            Number of tokens appended

        Raises:
            ValueError: If the seed is too short or max_new is negative
            GenerationError: If a context has an undefined distribution;
                tokens appended before the failing step are kept

        Example:
            >>> tokens = [SOS, SOS]
            >>> engine.generate(tokens, 10)
            7
        """
        order = self.table.order
        if max_new < 0:
            raise ValueError("max_new must be non-negative")
        if len(tokens) < order:
            raise ValueError(
                f"Seed has {len(tokens)} tokens, at least {order} are required"
            )

        appended = 0
        for _ in range(max_new):
            context = tuple(tokens[len(tokens) - order:])
            token = self.select_next(context)
            tokens.append(token)
            appended += 1

            if token == self.eos_token:
                logger.debug("Stopping at end-of-sequence token")
                break

        logger.info(f"Generated {appended} tokens")
        return appended

    def top_predictions(self, context: Sequence[str], top_k: int = 5) -> PredictionResult:
        """
        Get the most probable next tokens for a context.

        Args:
            context: Exactly `table.order` context tokens
            top_k: Number of predictions to return

        Returns:
            PredictionResult sorted by probability, ties in insertion order

        Raises:
            ValueError: If top_k is not positive or the context has the wrong length
            GenerationError: If the distribution for the context is undefined
        """
        if top_k <= 0:
            raise ValueError("top_k must be positive")

        distribution = self.normalizer.distribution(self.table, context)
        ranked = sorted(
            distribution.probabilities.items(), key=lambda x: x[1], reverse=True
        )

        return PredictionResult(
            predictions=[
                Prediction(token=token, probability=prob)
                for token, prob in ranked[:top_k]
            ],
            context_used=tuple(context),
            context_seen=distribution.context_seen,
        )
