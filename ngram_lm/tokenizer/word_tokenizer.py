from ngram_lm.tokenizer.base import TokenizerBase
from typing import List
import re
import logging

# Configure logging
logger = logging.getLogger(__name__)

# Words (letters, digits, underscores) or single punctuation marks
WORD_PATTERN = re.compile(r"\b\w+\b|[^\w\s]")


class WordTokenizer(TokenizerBase):
    """
    Tokenizer splitting text into words and separate punctuation marks.

    Examples:
        >>> WordTokenizer().tokenize("Hello, world!")
        ['hello', ',', 'world', '!']
        >>> WordTokenizer().tokenize("say __eos__ now")
        ['say', 'now']
    """

    def _split(self, text: str) -> List[str]:
        tokens = WORD_PATTERN.findall(text)
        logger.debug(f"Tokenized into {len(tokens)} words")
        return tokens


class WhitespaceTokenizer(TokenizerBase):
    """
    Tokenizer splitting text on runs of whitespace only, so punctuation
    stays attached to its word.

    Examples:
        >>> WhitespaceTokenizer().tokenize("Eat  tasty cakes.")
        ['Eat', 'tasty', 'cakes.']
    """

    def __init__(self, lowercase: bool = False):
        super().__init__(lowercase=lowercase)

    def _split(self, text: str) -> List[str]:
        return text.split()
