"""
N-gram language model.

Ties the count table, the smoothing normalizer and the generation engine
together behind one object that can be trained, sampled from, reset,
saved and loaded.
"""

from typing import Any, Iterable, List, Mapping, MutableSequence, Optional, Sequence, Tuple, Union
from pathlib import Path
import logging
import random

from ngram_lm.config import ModelConfig
from ngram_lm.counts import CountTable, CountTableStatistics
from ngram_lm.generation import GenerationEngine, PredictionResult, create_generation_engine
from ngram_lm.probability import PerplexityResult, ProbabilityDistribution
from ngram_lm.persistence import (
    ModelStore,
    create_model_store,
    SerializedConfig,
    SerializedModel,
    encode_context,
    parse_serialized,
)
from ngram_lm.errors import PersistenceError
from ngram_lm.tokenizer import BatchTokenizationResult, Tokenizer, sos

# Configure logging
logger = logging.getLogger(__name__)


class NGramModel:
    """
    Statistical n-gram language model.

    Learns P(token | previous `order` tokens) from token streams and
    generates new tokens by sampling from the smoothed distribution.

    Example:
        >>> from ngram_lm.tokenizer import EOS, SOS
        >>> model = NGramModel(ModelConfig(order=2))
        >>> model.train([[SOS, SOS, "eat", "tasty", "cakes", EOS]])
        >>> tokens = [SOS, SOS]
        >>> model.generate(tokens, 10)
        >>> path = model.save("model.json")
        >>> model.reset()
        >>> model.load(path)
        >>> len(model.counts)
        4
    """

    def __init__(
        self,
        config: Optional[ModelConfig] = None,
        seed: Optional[int] = None,
        tokenizer: Optional[Tokenizer] = None,
        store: Optional[ModelStore] = None,
    ):
        """
        Initialize an untrained model.

        Args:
            config: Model settings (defaults: order=2, smoothing=1.0, stochastic)
            seed: Seed for the stochastic sampler, for reproducible generation
            tokenizer: Tokenizer used by the text convenience methods
            store: Persistence backend used by save()/load()
        """
        self._config = config or ModelConfig()
        self._rng = random.Random(seed)
        self._table = CountTable(self._config.order)
        self._engine = self._build_engine()
        self._tokenizer = tokenizer
        self.store = store or create_model_store()

        logger.info(
            f"Initialized NGramModel with order={self._config.order}, "
            f"smoothing={self._config.smoothing}, sampling={self._config.sampling.value}"
        )

    def _build_engine(self) -> GenerationEngine:
        return create_generation_engine(self._table, self._config, self._rng)

    @property
    def config(self) -> ModelConfig:
        return self._config

    @property
    def counts(self) -> CountTable:
        """The model's count table (read it, don't mutate it)."""
        return self._table

    @property
    def tokenizer(self) -> Tokenizer:
        if self._tokenizer is None:
            self._tokenizer = Tokenizer()
        return self._tokenizer

    def _context_of(self, tokens: Sequence[str]) -> Tuple[str, ...]:
        order = self._config.order
        if len(tokens) < order:
            raise ValueError(
                f"Need at least {order} tokens of context, got {len(tokens)}"
            )
        return tuple(tokens[len(tokens) - order:])

    # Training

    def train(self, corpus: Iterable[Sequence[str]]) -> None:
        """
        Accumulate n-gram counts from token streams.

        Counts add to those of earlier calls; call reset() first to start over.
        Streams too short to hold an n-gram are skipped.

        Args:
            corpus: Iterable of token streams (see ngram_lm.tokenizer.sos/eos)
        """
        streams = list(corpus)
        if not streams:
            logger.warning("Empty corpus provided for training")
            return

        used = self._table.update_many(streams)

        stats = self._table.get_statistics()
        logger.info(
            f"Trained on {used}/{len(streams)} streams: {stats.unique_contexts} contexts, "
            f"vocabulary of {stats.vocabulary_size}"
        )

    def train_from_texts(self, texts: Sequence[str]) -> BatchTokenizationResult:
        """
        Tokenize raw texts, bracket them with sentinels and train on them.

        Each text gets `order` SOS tokens so that generation can start from
        a seed made of SOS tokens alone.

        Args:
            texts: Raw training texts

        Returns:
            BatchTokenizationResult describing the tokenized streams
        """
        if not texts:
            logger.warning("No texts provided for training")
            return BatchTokenizationResult(streams=[])

        batch = self.tokenizer.prepare_batch(texts, order=self._config.order)
        if batch.failed_indices:
            logger.warning(f"Skipped {len(batch.failed_indices)} texts that failed to tokenize")

        self.train(batch.streams)
        return batch

    # Probabilities

    def probability(self, context: Sequence[str], token: str) -> float:
        """
        Smoothed P(token | context).

        Raises:
            ValueError: If the context length differs from the order
            GenerationError: If the distribution is undefined
        """
        return self._engine.normalizer.probability(self._table, context, token)

    def distribution(self, context: Sequence[str]) -> ProbabilityDistribution:
        """Full next-token distribution over the vocabulary for a context."""
        return self._engine.normalizer.distribution(self._table, context)

    def entropy(self, context: Sequence[str]) -> float:
        """Entropy in bits of the next-token distribution for a context."""
        return self._engine.normalizer.calculate_entropy(self.distribution(context))

    def perplexity(self, corpus: Iterable[Sequence[str]]) -> PerplexityResult:
        """
        Evaluate model perplexity over every n-gram of the given token streams.

        Raises:
            ValueError: If the streams contain no n-grams
            GenerationError: If an n-gram's distribution is undefined
        """
        order = self._config.order
        probabilities = []
        for tokens in corpus:
            for i in range(order, len(tokens)):
                probabilities.append(
                    self.probability(tokens[i - order:i], tokens[i])
                )
        return self._engine.normalizer.calculate_perplexity(probabilities)

    # Generation

    def predict(self, tokens: Sequence[str]) -> str:
        """
        Choose the next token after `tokens` without appending it.

        Raises:
            ValueError: If fewer than `order` tokens are given
            GenerationError: If the distribution is undefined
        """
        return self._engine.select_next(self._context_of(tokens))

    def top_predictions(self, tokens: Sequence[str], top_k: int = 5) -> PredictionResult:
        """Most probable next tokens after `tokens`, with probabilities."""
        return self._engine.top_predictions(self._context_of(tokens), top_k)

    def generate(self, tokens: MutableSequence[str], max_new: int) -> None:
        """
        Extend `tokens` in place by at most `max_new` tokens.

        Stops right after the end-of-sequence token is generated.

        Raises:
            ValueError: If fewer than `order` seed tokens are given or max_new < 0
            GenerationError: If a context has an undefined distribution; tokens
                generated before the failure stay appended
        """
        self._engine.generate(tokens, max_new)

    def generate_from_text(self, seed_text: str, max_new: int = 20) -> List[str]:
        """
        Generate a continuation of raw seed text.

        Args:
            seed_text: Starting text (may be empty)
            max_new: Maximum number of tokens to generate

        Returns:
            Token list: `order` SOS tokens, the seed tokens, then the generated ones
        """
        seed_tokens = self.tokenizer.tokenize(seed_text)
        if not seed_tokens:
            logger.warning("No tokens found in seed text, starting from SOS only")

        tokens = sos(seed_tokens, self._config.order)
        self.generate(tokens, max_new)
        return tokens

    # State

    def reset(self) -> None:
        """Clear all learned counts; the configuration is kept."""
        self._table.clear()
        logger.info("Model reset")

    def get_statistics(self) -> CountTableStatistics:
        return self._table.get_statistics()

    def to_serialized(self) -> SerializedModel:
        """
        Export config and counts in the canonical serialized form.

        Raises:
            PersistenceError: If a token cannot be encoded
        """
        return SerializedModel(
            config=SerializedConfig.from_config(self._config),
            counts={
                encode_context(context): continuations
                for context, continuations in self._table.as_nested().items()
            },
            vocabulary=self._table.vocabulary,
        )

    def to_dict(self) -> dict:
        """Export the serialized form as JSON-compatible plain data."""
        return self.to_serialized().model_dump(mode="json")

    def load_serialized(self, data: Union[SerializedModel, Mapping[str, Any]]) -> None:
        """
        Replace config and counts with a serialized model.

        The new state is built completely before it is swapped in, so on
        failure the current state is untouched.

        Raises:
            PersistenceError: If the data is malformed or inconsistent
        """
        if not isinstance(data, SerializedModel):
            data = parse_serialized(data)

        try:
            config = data.config.to_config()
            table = CountTable.from_nested(
                config.order, data.decoded_counts(), data.vocabulary
            )
        except ValueError as e:
            raise PersistenceError(f"Inconsistent serialized model: {e}") from e

        self._config = config
        self._table = table
        self._engine = self._build_engine()

        logger.info(
            f"Loaded model state: order={config.order}, {len(table)} contexts"
        )

    def save(self, filepath: Union[str, Path]) -> Path:
        """
        Save the model to a file (JSON, or pickle for .pkl/.pickle).

        Raises:
            PersistenceError: If the model cannot be serialized or written
        """
        return self.store.save(filepath, self.to_serialized())

    def load(self, filepath: Union[str, Path]) -> None:
        """
        Load a model file, replacing the current config and counts.

        Raises:
            PersistenceError: If the file cannot be read or is invalid; the
                current state is then left unchanged
        """
        self.load_serialized(self.store.load(filepath))


# Simple usage example and demo
def demo():
    """
    Demonstration of the n-gram language model on the built-in corpus.
    """
    from ngram_lm.corpus import tiny_corpus
    from ngram_lm.tokenizer import EOS, SOS

    logging.basicConfig(level=logging.INFO)

    print("N-gram Language Model Demo")
    print("=" * 40)

    model = NGramModel(ModelConfig(order=2, smoothing=0.1), seed=7)

    print("\nTraining the model...")
    model.train_from_texts(tiny_corpus())
    stats = model.get_statistics()
    print(f"   Contexts: {stats.unique_contexts}")
    print(f"   Vocabulary: {stats.vocabulary_size}")

    print("\nTop predictions after 'the quick':")
    result = model.top_predictions(sos(["the", "quick"], 2), top_k=3)
    for pred in result.predictions:
        print(f"   -> '{pred.token}' (probability: {pred.probability:.3f})")

    print("\nGenerating text:")
    tokens = model.generate_from_text("The quick", max_new=15)
    words = [t for t in tokens if t not in (SOS, EOS)]
    print(f"   {' '.join(words)}{'' if tokens[-1] == EOS else ' ...'}")

    print("\nSaving and reloading the model...")
    path = model.save("ngram_model.json")
    model.reset()
    model.load(path)
    print(f"   Reloaded {len(model.counts)} contexts from {path}")


if __name__ == "__main__":
    demo()
