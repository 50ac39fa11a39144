
from typing import Dict, List, Sequence
import math
from ngram_lm.counts import CountTable
from ngram_lm.errors import GenerationError
from ngram_lm.probability.types import (
    ProbabilityDistribution,
    PerplexityResult
)
import logging

# Configure logging
logger = logging.getLogger(__name__)

class ProbabilityNormalizer:
    """
    Convert raw n-gram counts into additively smoothed probabilities.

    For a context with continuation counts c(t) and total C over a
    vocabulary of size V, and smoothing constant s:

        P(t | context) = (c(t) + s) / (C + s * V)

    An unseen context gets C = 0, i.e. the uniform distribution 1 / V.
    When the denominator would be zero (unseen context with s = 0, or an
    empty vocabulary) the distribution is undefined and GenerationError
    is raised instead.

    Attributes:
        smoothing: Additive smoothing constant (0 disables smoothing)

    Example:
        >>> normalizer = ProbabilityNormalizer(smoothing=1.0)
        >>> normalizer.smoothed_probability(count=1, total=1, vocabulary_size=5)
        0.3333333333333333
    """

    def __init__(self, smoothing: float = 1.0) -> None:
        """
        Initialize probability normalizer.

        Args:
            smoothing: Additive smoothing constant, must be >= 0

        Raises:
            ValueError: If smoothing is negative
        """
        if smoothing < 0:
            raise ValueError("Smoothing must be non-negative")

        self.smoothing = smoothing

        logger.debug(f"Initialized ProbabilityNormalizer with smoothing={smoothing}")

    def smoothed_probability(
        self,
        count: int,
        total: int,
        vocabulary_size: int
    ) -> float:
        """
        Apply the smoothing formula to raw counts.

        Args:
            count: Occurrences of the candidate after the context
            total: Occurrences of the context
            vocabulary_size: Number of distinct tokens

        Returns:
            Smoothed probability

        Raises:
            GenerationError: If the denominator is zero
        """
        denominator = total + self.smoothing * vocabulary_size
        if denominator <= 0:
            if vocabulary_size == 0:
                raise GenerationError(
                    "Vocabulary is empty: train the model before querying it"
                )
            raise GenerationError(
                "Unseen context with zero smoothing: distribution is undefined"
            )
        return (count + self.smoothing) / denominator

    def probability(
        self,
        table: CountTable,
        context: Sequence[str],
        token: str
    ) -> float:
        """
        Calculate P(token | context) from a count table.

        Args:
            table: Trained count table
            context: Exactly `table.order` context tokens
            token: Candidate next token

        Returns:
            Smoothed conditional probability

        Raises:
            ValueError: If the context has the wrong length
            GenerationError: If the distribution is undefined
        """
        context = self._check_context(table, context)
        return self.smoothed_probability(
            table.count(context, token),
            table.total(context),
            table.vocabulary_size,
        )

    def distribution(
        self,
        table: CountTable,
        context: Sequence[str]
    ) -> ProbabilityDistribution:
        """
        Compute the full next-token distribution over the vocabulary.

        Observed continuations come first in count-table insertion order,
        followed by the remaining vocabulary in first-seen order.

        Args:
            table: Trained count table
            context: Exactly `table.order` context tokens

        Returns:
            ProbabilityDistribution summing to 1

        Raises:
            ValueError: If the context has the wrong length
            GenerationError: If the distribution is undefined
        """
        context = self._check_context(table, context)
        vocabulary_size = table.vocabulary_size
        total = table.total(context)
        observed = table.continuations(context) or {}

        probabilities: Dict[str, float] = {}
        for token, count in observed.items():
            probabilities[token] = self.smoothed_probability(count, total, vocabulary_size)

        unseen_probability = self.smoothed_probability(0, total, vocabulary_size)
        for token in table.vocabulary:
            if token not in probabilities:
                probabilities[token] = unseen_probability

        total_prob = sum(probabilities.values())
        logger.debug(
            f"Distribution for context {context}: {len(observed)} observed, "
            f"vocab_size={vocabulary_size}"
        )

        return ProbabilityDistribution(
            probabilities=probabilities,
            total_probability=total_prob,
            context_seen=context in table,
        )

    def _check_context(self, table: CountTable, context: Sequence[str]) -> tuple:
        context = tuple(context)
        if len(context) != table.order:
            raise ValueError(
                f"Context size {len(context)} doesn't match order {table.order}"
            )
        return context

    def calculate_perplexity(
        self,
        probabilities: List[float]
    ) -> PerplexityResult:
        """
        Calculate perplexity of a sequence of probabilities.

        Perplexity measures how well a probability model predicts a sample.
        Lower perplexity indicates better prediction.

        Args:
            probabilities: List of probabilities

        Returns:
            PerplexityResult with perplexity score

        Raises:
            ValueError: If probabilities list is empty
        """
        if not probabilities:
            raise ValueError("Cannot calculate perplexity for empty sequence")

        if any(p <= 0 for p in probabilities):
            logger.warning("Zero or negative probability detected, returning infinity")
            return PerplexityResult(
                perplexity=float('inf'),
                sequence_length=len(probabilities)
            )

        log_prob_sum = sum(math.log(p) for p in probabilities)
        avg_log_prob = log_prob_sum / len(probabilities)
        perplexity = math.exp(-avg_log_prob)

        logger.debug(f"Calculated perplexity: {perplexity:.4f}")

        return PerplexityResult(
            perplexity=perplexity,
            sequence_length=len(probabilities)
        )

    def calculate_entropy(
        self,
        distribution: ProbabilityDistribution
    ) -> float:
        """
        Calculate entropy of a probability distribution.

        Args:
            distribution: Probability distribution

        Returns:
            Entropy in bits
        """
        entropy = 0.0
        for prob in distribution.probabilities.values():
            if prob > 0:
                entropy -= prob * math.log2(prob)

        logger.debug(f"Calculated entropy: {entropy:.4f} bits")

        return entropy
