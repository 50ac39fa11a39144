
from collections import defaultdict, Counter
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Set, Tuple
import random
import logging

from ngram_lm.counts.types import (
    CountTableStatistics,
    ContinuationCount,
    ContextCounts,
)


# Configure logging
logger = logging.getLogger(__name__)

Context = Tuple[str, ...]


class CountTable:
    """
    Stores n-gram frequency data as a two-level mapping
    (context -> next token -> count) together with the vocabulary
    and per-context totals, both maintained incrementally.

    Insertion order of contexts, continuations and vocabulary is preserved.
    """

    def __init__(self, order: int):
        """
        Initialize an empty count table.

        Args:
            order: Number of context tokens per n-gram

        Raises:
            ValueError: If order is not a positive integer
        """
        if not isinstance(order, int) or order < 1:
            raise ValueError("order must be a positive integer")

        self.order = order

        self._counts: Dict[Context, Counter] = defaultdict(Counter)
        self._totals: Dict[Context, int] = defaultdict(int)

        # Vocabulary: a set for membership, a list for order and O(1) random access
        self._vocabulary: Set[str] = set()
        self._vocabulary_list: List[str] = []

        self.total_count: int = 0

        logger.debug(f"Initialized CountTable with order={order}")

    def update(self, tokens: Sequence[str]) -> int:
        """
        Count every n-gram of a single token stream.

        Args:
            tokens: Token stream, typically bracketed by sentinels

        Returns:
            Number of n-grams counted (0 if the stream is too short)
        """
        if len(tokens) <= self.order:
            logger.debug(
                f"Skipping stream of {len(tokens)} tokens: no {self.order + 1}-grams"
            )
            return 0

        tokens = list(tokens)
        for token in tokens:
            self._add_to_vocabulary(token)

        for i in range(self.order, len(tokens)):
            context = tuple(tokens[i - self.order:i])
            target = tokens[i]

            self._counts[context][target] += 1
            self._totals[context] += 1

        counted = len(tokens) - self.order
        self.total_count += counted
        logger.debug(f"Counted {counted} {self.order + 1}-grams")
        return counted

    def update_many(self, corpus: Iterable[Sequence[str]]) -> int:
        """
        Count the n-grams of every stream in a corpus.

        Args:
            corpus: Iterable of token streams

        Returns:
            Number of streams that contributed at least one n-gram
        """
        used = 0
        for tokens in corpus:
            if self.update(tokens):
                used += 1
        return used

    def add(self, context: Sequence[str], token: str, count: int = 1) -> None:
        """
        Add a count for a single (context, token) pair.

        Args:
            context: Exactly `order` context tokens
            token: The next token
            count: Non-negative amount to add

        Raises:
            ValueError: If the context length or count is invalid
        """
        context = tuple(context)
        if len(context) != self.order:
            raise ValueError(
                f"Context length {len(context)} doesn't match order {self.order}"
            )
        if count < 0:
            raise ValueError("count must be non-negative")

        for item in context:
            self._add_to_vocabulary(item)
        self._add_to_vocabulary(token)

        self._counts[context][token] += count
        self._totals[context] += count
        self.total_count += count

    def _add_to_vocabulary(self, token: str) -> None:
        if token not in self._vocabulary:
            self._vocabulary.add(token)
            self._vocabulary_list.append(token)

    def continuations(self, context: Context) -> Optional[Counter]:
        """
        Return the live continuation counter of a context, or None if unseen.

        The counter is owned by the table and must not be mutated.
        """
        return self._counts.get(context)

    def count(self, context: Context, token: str) -> int:
        """Return count(context, token), 0 if never observed."""
        counter = self._counts.get(context)
        if counter is None:
            return 0
        return counter.get(token, 0)

    def total(self, context: Context) -> int:
        """Return the sum of continuation counts for a context."""
        return self._totals.get(context, 0)

    def get_context_counts(self, context: Sequence[str]) -> ContextCounts:
        """
        Get the observed continuations of a context.

        Args:
            context: Context tokens

        Returns:
            ContextCounts with continuations in insertion order
            (empty if the context was never observed)
        """
        context = tuple(context)
        counter = self._counts.get(context, Counter())
        return ContextCounts(
            context=context,
            continuations=[
                ContinuationCount(token=token, count=count)
                for token, count in counter.items()
            ],
            total=self._totals.get(context, 0),
        )

    def contexts(self) -> Iterator[Context]:
        """Iterate over observed contexts in insertion order."""
        return iter(list(self._counts.keys()))

    def as_nested(self) -> Dict[Context, Dict[str, int]]:
        """Return an independent copy of the table as nested plain dicts."""
        return {
            context: dict(counter) for context, counter in self._counts.items()
        }

    @property
    def vocabulary(self) -> List[str]:
        """Distinct tokens in first-seen order (a copy)."""
        return list(self._vocabulary_list)

    @property
    def vocabulary_size(self) -> int:
        return len(self._vocabulary_list)

    def in_vocabulary(self, token: str) -> bool:
        return token in self._vocabulary

    def first_token(self) -> Optional[str]:
        """Return the earliest-seen vocabulary token, or None if empty."""
        return self._vocabulary_list[0] if self._vocabulary_list else None

    def random_token(self, rng: random.Random) -> str:
        """
        Draw a vocabulary token uniformly at random.

        Raises:
            IndexError: If the vocabulary is empty
        """
        return rng.choice(self._vocabulary_list)

    def random_token_excluding(
        self, excluded: Mapping[str, int], rng: random.Random
    ) -> str:
        """
        Draw uniformly from the vocabulary tokens that are not keys of `excluded`.

        Raises:
            ValueError: If every vocabulary token is excluded
        """
        remaining = len(self._vocabulary_list) - sum(
            1 for token in excluded if token in self._vocabulary
        )
        if remaining <= 0:
            raise ValueError("No vocabulary tokens left to draw from")

        # Rejection sampling is cheap while most of the vocabulary is eligible
        if remaining * 2 >= len(self._vocabulary_list):
            while True:
                token = rng.choice(self._vocabulary_list)
                if token not in excluded:
                    return token

        candidates = [t for t in self._vocabulary_list if t not in excluded]
        return rng.choice(candidates)

    def __contains__(self, context: object) -> bool:
        return context in self._counts

    def __len__(self) -> int:
        return len(self._counts)

    def is_empty(self) -> bool:
        return not self._counts

    def get_statistics(self) -> CountTableStatistics:
        """
        Get count table statistics.

        Returns:
            CountTableStatistics with totals and sizes
        """
        return CountTableStatistics(
            order=self.order,
            total_count=self.total_count,
            unique_contexts=len(self._counts),
            vocabulary_size=len(self._vocabulary_list),
        )

    @classmethod
    def from_nested(
        cls,
        order: int,
        counts: Mapping[Context, Mapping[str, int]],
        vocabulary: Optional[Sequence[str]] = None,
    ) -> "CountTable":
        """
        Build a table from nested mappings, preserving their iteration order.

        Args:
            order: Context length
            counts: context tuple -> {next token -> count}
            vocabulary: Optional explicit vocabulary order; tokens of `counts`
                missing from it are appended in first-seen order

        Returns:
            New CountTable

        Raises:
            ValueError: If a context length or count is invalid
        """
        table = cls(order)
        for token in vocabulary or ():
            table._add_to_vocabulary(token)
        for context, continuations in counts.items():
            for token, count in continuations.items():
                table.add(context, token, count)
        return table

    def merge(self, other: "CountTable") -> None:
        """
        Merge another count table into this one.

        Args:
            other: Another CountTable instance

        Raises:
            ValueError: If the orders don't match
        """
        if self.order != other.order:
            raise ValueError("Cannot merge: orders don't match")

        for context, counter in other._counts.items():
            for token, count in counter.items():
                self.add(context, token, count)

        logger.info(f"Merged count table with {len(other)} contexts")

    def clear(self) -> None:
        """Clear all data from the count table."""
        self._counts.clear()
        self._totals.clear()
        self._vocabulary.clear()
        self._vocabulary_list.clear()
        self.total_count = 0

        logger.info("Cleared all data from count table")
