from ngram_lm.counts.count_table import CountTable, Context
from ngram_lm.counts.types import (
    CountTableStatistics,
    ContinuationCount,
    ContextCounts,
)


def create_count_table(order: int = 2) -> CountTable:
    """
    Factory function to create an empty count table.

    Args:
        order: Number of context tokens per n-gram (default: 2)

    Returns:
        Empty CountTable instance

    Examples:
        >>> table = create_count_table(1)
        >>> len(table)
        0
    """
    return CountTable(order)


__all__ = [
    "create_count_table",
    "CountTable",
    "Context",
    "CountTableStatistics",
    "ContinuationCount",
    "ContextCounts",
]
