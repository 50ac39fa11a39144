from abc import ABC, abstractmethod
from typing import FrozenSet, List
import logging

from ngram_lm.tokenizer.sentinels import EOS, SOS

# Configure logging
logger = logging.getLogger(__name__)

# Sentinels may only enter a stream through sos()/eos(), never from raw text
RESERVED_TOKENS: FrozenSet[str] = frozenset({SOS, EOS})


class TokenizerBase(ABC):
    """
    Abstract base class for text-to-token splitters.

    Subclasses implement _split(); tokenize() applies lowercasing and drops
    tokens that collide with the sequence sentinels.
    """

    def __init__(self, lowercase: bool = True):
        self._lowercase = lowercase

    @abstractmethod
    def _split(self, text: str) -> List[str]:
        """Split already-normalized text into raw tokens."""
        pass

    def tokenize(self, text: str) -> List[str]:
        """
        Split raw text into an ordered list of token strings.

        Args:
            text: Input text to tokenize

        Returns:
            List of tokens, without any sentinel strings found in the text
        """
        if self._lowercase:
            text = text.lower()

        tokens = self._split(text)
        kept = [token for token in tokens if token not in RESERVED_TOKENS]
        if len(kept) != len(tokens):
            logger.debug(f"Dropped {len(tokens) - len(kept)} sentinel strings from text")
        return kept
