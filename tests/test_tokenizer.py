"""
Tests for tokenization and sentinel helpers.
"""

import unittest
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ngram_lm.tokenizer import (
    EOS,
    SOS,
    Tokenizer,
    WhitespaceTokenizer,
    WordTokenizer,
    create_tokenizer,
    eos,
    sos,
    tokenize,
)


class TestSentinels(unittest.TestCase):
    """Tests for sos() and eos()."""

    def test_sos(self):
        """Test a single start sentinel is prefixed by default."""
        self.assertEqual(sos(["eat", "cakes"]), [SOS, "eat", "cakes"])

    def test_sos_padding(self):
        """Test sos() can prefix one sentinel per context position."""
        self.assertEqual(sos(["eat"], 3), [SOS, SOS, SOS, "eat"])
        self.assertEqual(sos(["eat"], 0), ["eat"])
        with self.assertRaises(ValueError):
            sos(["eat"], -1)

    def test_eos(self):
        """Test the end sentinel is appended."""
        self.assertEqual(eos(["eat", "cakes"]), ["eat", "cakes", EOS])

    def test_inputs_not_modified(self):
        """Test the helpers return new lists."""
        tokens = ["eat"]
        sos(eos(tokens))
        self.assertEqual(tokens, ["eat"])

    def test_sentinels_distinct(self):
        """Test the sentinels differ from each other and from ordinary words."""
        self.assertNotEqual(SOS, EOS)
        self.assertNotIn(SOS, tokenize("the sos eos start end"))


class TestTokenize(unittest.TestCase):
    """Tests for the tokenizers."""

    def test_whitespace_split(self):
        """Test tokenize() splits on whitespace only."""
        self.assertEqual(tokenize("Eat  tasty\tcakes."), ["Eat", "tasty", "cakes."])
        self.assertEqual(tokenize(""), [])

    def test_word_tokenizer(self):
        """Test words and punctuation are separated and lowercased."""
        self.assertEqual(
            WordTokenizer().tokenize("Hello, World!"), ["hello", ",", "world", "!"]
        )
        self.assertEqual(WordTokenizer(lowercase=False).tokenize("Hi."), ["Hi", "."])

    def test_whitespace_tokenizer_lowercase(self):
        """Test optional lowercasing of whitespace tokens."""
        self.assertEqual(WhitespaceTokenizer(lowercase=True).tokenize("A B"), ["a", "b"])

    def test_separator_never_in_tokens(self):
        """Test the unit separator character splits tokens."""
        self.assertEqual(tokenize("a\x1fb"), ["a", "b"])
        self.assertEqual(WordTokenizer().tokenize("a\x1fb"), ["a", "b"])

    def test_sentinel_strings_dropped_from_text(self):
        """Test raw text can't smuggle sentinel tokens into a stream."""
        text = f"say {EOS} now {SOS}"
        self.assertEqual(WordTokenizer().tokenize(text), ["say", "now"])
        self.assertEqual(WhitespaceTokenizer().tokenize(text), ["say", "now"])
        self.assertEqual(tokenize(text), ["say", "now"])
        self.assertEqual(WordTokenizer().tokenize(EOS.upper()), [])

    def test_prepare_keeps_only_real_sentinels(self):
        """Test prepared streams hold exactly the sentinels added by prepare()."""
        stream = Tokenizer().prepare(f"eat {EOS} cakes", order=2)
        self.assertEqual(stream, [SOS, SOS, "eat", "cakes", EOS])
        self.assertEqual(stream.count(EOS), 1)

    def test_tokenizer_rejects_non_strings(self):
        """Test Tokenizer.tokenize() requires a string."""
        with self.assertRaises(ValueError):
            Tokenizer().tokenize(123)


class TestTokenizer(unittest.TestCase):
    """Tests for stream preparation."""

    def setUp(self):
        """Set up test fixtures."""
        self.tokenizer = create_tokenizer(max_workers=2)

    def test_prepare(self):
        """Test prepare() brackets tokens with order SOS and one EOS."""
        self.assertEqual(
            self.tokenizer.prepare("Eat cakes.", order=2),
            [SOS, SOS, "eat", "cakes", ".", EOS],
        )

    def test_prepare_without_punctuation_split(self):
        """Test whitespace mode keeps punctuation attached."""
        tokenizer = create_tokenizer(lowercase=False, split_punctuation=False)
        self.assertEqual(tokenizer.prepare("Eat cakes."), [SOS, "Eat", "cakes.", EOS])

    def test_prepare_batch_keeps_order(self):
        """Test batch results follow input order."""
        texts = [f"text number {i}" for i in range(20)]
        result = self.tokenizer.prepare_batch(texts, order=1)

        self.assertEqual(len(result.streams), 20)
        self.assertEqual(result.failed_indices, [])
        for i, stream in enumerate(result.streams):
            self.assertEqual(stream, [SOS, "text", "number", str(i), EOS])

    def test_prepare_batch_records_failures(self):
        """Test failing inputs are reported and skipped."""
        result = self.tokenizer.prepare_batch(["a b", 123, "c"], order=1)

        self.assertEqual(result.streams, [[SOS, "a", "b", EOS], [SOS, "c", EOS]])
        self.assertEqual(result.failed_indices, [1])
        self.assertIn(1, result.errors)

    def test_prepare_batch_empty(self):
        """Test an empty batch."""
        result = self.tokenizer.prepare_batch([])
        self.assertEqual(result.streams, [])
        self.assertEqual(result.failed_indices, [])


if __name__ == '__main__':
    unittest.main()
