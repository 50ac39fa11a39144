from ngram_lm.tokenizer.base import TokenizerBase
from ngram_lm.tokenizer.sentinels import sos, eos
from ngram_lm.tokenizer.types import BatchTokenizationResult
from ngram_lm.tokenizer.word_tokenizer import WhitespaceTokenizer, WordTokenizer
from concurrent.futures import ThreadPoolExecutor, as_completed
import multiprocessing
from functools import partial
import logging
from typing import List, Optional, Sequence

# Configure logging
logger = logging.getLogger(__name__)


class Tokenizer:
    """
    Turns raw text into sentinel-bracketed token streams ready for training,
    with batch processing support.
    """

    def __init__(
        self,
        lowercase: bool = True,
        split_punctuation: bool = True,
        max_workers: Optional[int] = None,
    ):
        """
        Initialize the tokenizer.

        Args:
            lowercase: Whether to convert text to lowercase
            split_punctuation: Emit punctuation as separate tokens; when False
                text is split on whitespace only
            max_workers: Maximum number of workers for batch processing (None for CPU count)
        """
        self._splitter: TokenizerBase = (
            WordTokenizer(lowercase=lowercase)
            if split_punctuation
            else WhitespaceTokenizer(lowercase=lowercase)
        )
        self._max_workers = max_workers or multiprocessing.cpu_count()
        logger.info(
            f"Initialized Tokenizer ({type(self._splitter).__name__}) "
            f"with max_workers={self._max_workers}"
        )

    def tokenize(self, text: str) -> List[str]:
        """
        Split text into tokens.

        Raises:
            ValueError: If text is not a string
        """
        if not isinstance(text, str):
            raise ValueError("Input must be a string")

        return self._splitter.tokenize(text)

    @staticmethod
    def sos(tokens: Sequence[str], n: int = 1) -> List[str]:
        """Prefix tokens with `n` start-of-sequence sentinels."""
        return sos(tokens, n)

    @staticmethod
    def eos(tokens: Sequence[str]) -> List[str]:
        """Suffix tokens with the end-of-sequence sentinel."""
        return eos(tokens)

    def prepare(self, text: str, order: int = 1) -> List[str]:
        """
        Tokenize text and bracket it with sentinels.

        Args:
            text: Input text string
            order: Model order; this many SOS tokens are prefixed

        Returns:
            Token stream ready for training

        Examples:
            >>> Tokenizer().prepare("Eat cakes.", order=2)
            ['__sos__', '__sos__', 'eat', 'cakes', '.', '__eos__']
        """
        return sos(eos(self.tokenize(text)), order)

    def prepare_batch(
        self, texts: Sequence[str], order: int = 1
    ) -> BatchTokenizationResult:
        """
        Prepare multiple texts in parallel.

        Args:
            texts: List of input text strings
            order: Model order, see prepare()

        Returns:
            BatchTokenizationResult with streams in input order and error information
        """
        if not texts:
            return BatchTokenizationResult(streams=[], failed_indices=[], errors={})

        logger.info(f"Starting batch tokenization of {len(texts)} texts")

        results: List[Optional[List[str]]] = [None] * len(texts)
        failed_indices = []
        errors = {}

        prepare_func = partial(self.prepare, order=order)

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            future_to_index = {
                executor.submit(prepare_func, text): i for i, text in enumerate(texts)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    results[index] = future.result()
                except Exception as e:
                    logger.error(f"Failed to tokenize text at index {index}: {str(e)}")
                    failed_indices.append(index)
                    errors[index] = str(e)

        streams = [r for r in results if r is not None]

        logger.info(
            f"Batch tokenization complete: {len(streams)} successful, {len(failed_indices)} failed"
        )

        return BatchTokenizationResult(
            streams=streams, failed_indices=sorted(failed_indices), errors=errors
        )
