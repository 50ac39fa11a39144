"""
Tokenizer component for the n-gram language model.

Splits raw text into tokens and brackets token streams with the
start/end-of-sequence sentinels the model is trained on.
"""

from ngram_lm.tokenizer.tokenizer import Tokenizer
from typing import List, Optional
from ngram_lm.tokenizer.base import TokenizerBase
from ngram_lm.tokenizer.sentinels import EOS, SOS, eos, sos
from ngram_lm.tokenizer.types import BatchTokenizationResult
from ngram_lm.tokenizer.word_tokenizer import WhitespaceTokenizer, WordTokenizer


def tokenize(text: str) -> List[str]:
    """
    Split text on whitespace, keeping case and punctuation attached.

    Examples:
        >>> tokenize("Eat tasty cakes")
        ['Eat', 'tasty', 'cakes']
    """
    return WhitespaceTokenizer().tokenize(text)


def create_tokenizer(
    lowercase: bool = True,
    split_punctuation: bool = True,
    max_workers: Optional[int] = None,
) -> Tokenizer:
    """
    Factory function to create a tokenizer instance.

    Args:
        lowercase: Whether to convert text to lowercase
        split_punctuation: Emit punctuation as separate tokens
        max_workers: Maximum number of workers for batch processing

    Returns:
        Configured Tokenizer instance

    Examples:
        >>> tokenizer = create_tokenizer()
        >>> isinstance(tokenizer, Tokenizer)
        True
    """
    return Tokenizer(
        lowercase=lowercase, split_punctuation=split_punctuation, max_workers=max_workers
    )


__all__ = [
    "create_tokenizer",
    "tokenize",
    "sos",
    "eos",
    "SOS",
    "EOS",
    "Tokenizer",
    "TokenizerBase",
    "WordTokenizer",
    "WhitespaceTokenizer",
    "BatchTokenizationResult",
]
