"""
Tests for saving and loading models.
"""

import json
import pickle
import tempfile
import unittest
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ngram_lm.config import ModelConfig, SamplingStrategy
from ngram_lm.corpus import tiny_corpus
from ngram_lm.errors import PersistenceError
from ngram_lm.model import NGramModel
from ngram_lm.persistence import (
    CONTEXT_SEPARATOR,
    ModelStore,
    SerializedModel,
    decode_context,
    encode_context,
    parse_serialized,
)
from ngram_lm.tokenizer import EOS, SOS


def valid_data(**overrides):
    data = {
        "config": {"order": 1, "smoothing": 1.0, "sampling": "greedy"},
        "counts": {"a": {"b": 2}, "b": {"a": 1}},
    }
    data.update(overrides)
    return data


class TestContextKeys(unittest.TestCase):
    """Tests for context key encoding."""

    def test_encode_and_decode(self):
        """Test context tuples survive key encoding."""
        key = encode_context((SOS, "the"))
        self.assertEqual(key, SOS + CONTEXT_SEPARATOR + "the")
        self.assertEqual(decode_context(key), (SOS, "the"))

    def test_separator_in_token_rejected(self):
        """Test tokens containing the separator cannot be encoded."""
        with self.assertRaises(PersistenceError):
            encode_context(("a" + CONTEXT_SEPARATOR + "b",))


class TestSerializedModel(unittest.TestCase):
    """Tests for validation of serialized data."""

    def test_valid_data(self):
        """Test a well-formed mapping is accepted."""
        model = parse_serialized(valid_data())
        self.assertEqual(model.config.order, 1)
        self.assertEqual(model.config.sampling, SamplingStrategy.GREEDY)
        self.assertEqual(model.config.temperature, 1.0)
        self.assertEqual(model.decoded_counts(), {("a",): {"b": 2}, ("b",): {"a": 1}})

    def test_negative_count(self):
        """Test negative counts are rejected."""
        with self.assertRaises(PersistenceError):
            parse_serialized(valid_data(counts={"a": {"b": -1}}))

    def test_non_integer_counts(self):
        """Test fractional, boolean and string counts are rejected."""
        for bad in (1.5, True, "1"):
            with self.assertRaises(PersistenceError):
                parse_serialized(valid_data(counts={"a": {"b": bad}}))

    def test_missing_order(self):
        """Test a config without an order is rejected."""
        data = valid_data(config={"smoothing": 1.0, "sampling": "greedy"})
        with self.assertRaises(PersistenceError):
            parse_serialized(data)

    def test_missing_config(self):
        """Test data without a config is rejected."""
        with self.assertRaises(PersistenceError):
            parse_serialized({"counts": {}})

    def test_context_length_mismatch(self):
        """Test keys whose length differs from the order are rejected."""
        data = valid_data(counts={"a" + CONTEXT_SEPARATOR + "b": {"c": 1}})
        with self.assertRaises(PersistenceError):
            parse_serialized(data)

    def test_context_without_mass(self):
        """Test a context with no positive count is rejected."""
        with self.assertRaises(PersistenceError):
            parse_serialized(valid_data(counts={"a": {}}))
        with self.assertRaises(PersistenceError):
            parse_serialized(valid_data(counts={"a": {"b": 0}}))

    def test_zero_count_alongside_positive(self):
        """Test zero counts are allowed next to positive ones."""
        model = parse_serialized(valid_data(counts={"a": {"b": 1, "c": 0}}))
        self.assertEqual(model.decoded_counts()[("a",)]["c"], 0)

    def test_vocabulary_mismatch(self):
        """Test a vocabulary must hold exactly the tokens of the counts."""
        with self.assertRaises(PersistenceError):
            parse_serialized(valid_data(vocabulary=["a"]))
        with self.assertRaises(PersistenceError):
            parse_serialized(valid_data(vocabulary=["a", "b", "b"]))
        model = parse_serialized(valid_data(vocabulary=["b", "a"]))
        self.assertEqual(model.vocabulary, ["b", "a"])

    def test_unknown_fields(self):
        """Test unexpected top-level fields are rejected."""
        with self.assertRaises(PersistenceError):
            parse_serialized(valid_data(extra=1))


class TestModelPersistence(unittest.TestCase):
    """Tests for NGramModel save/load round trips."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self.temp_dir.name)
        self.model = NGramModel(ModelConfig(order=2, smoothing=0.5, sampling="greedy"))
        self.model.train_from_texts(tiny_corpus())

    def tearDown(self):
        """Clean up temporary files."""
        self.temp_dir.cleanup()

    def assert_same_state(self, left, right):
        self.assertEqual(left.config, right.config)
        self.assertEqual(left.counts.as_nested(), right.counts.as_nested())
        self.assertEqual(left.counts.vocabulary, right.counts.vocabulary)

    def test_json_round_trip(self):
        """Test save then load restores config and counts."""
        path = self.model.save(self.dir / "model.json")
        self.assertTrue(path.exists())

        loaded = NGramModel(ModelConfig(order=3))
        loaded.load(path)
        self.assert_same_state(self.model, loaded)

    def test_json_file_layout(self):
        """Test the JSON file holds config and separator-joined context keys."""
        path = self.model.save(self.dir / "model.json")
        data = json.loads(path.read_text(encoding="utf-8"))

        self.assertEqual(data["config"]["order"], 2)
        self.assertEqual(data["config"]["sampling"], "greedy")
        self.assertIn(SOS + CONTEXT_SEPARATOR + SOS, data["counts"])

    def test_pickle_round_trip(self):
        """Test pickle files round trip as well."""
        path = self.model.save(self.dir / "model.pkl")
        with open(path, "rb") as f:
            self.assertIsInstance(pickle.load(f), dict)

        loaded = NGramModel()
        loaded.load(path)
        self.assert_same_state(self.model, loaded)

    def test_generation_after_reload(self):
        """Test a reloaded greedy model generates the same tokens."""
        path = self.model.save(self.dir / "nested" / "dir" / "model.json")
        loaded = NGramModel()
        loaded.load(path)

        expected = [SOS, SOS]
        actual = [SOS, SOS]
        self.model.generate(expected, 15)
        loaded.generate(actual, 15)
        self.assertEqual(expected, actual)

    def test_empty_model_round_trip(self):
        """Test an untrained model can be saved and loaded."""
        empty = NGramModel(ModelConfig(order=1))
        path = empty.save(self.dir / "empty.json")
        self.model.load(path)
        self.assertEqual(self.model.config.order, 1)
        self.assertTrue(self.model.counts.is_empty())

    def test_to_dict_round_trip(self):
        """Test load_serialized accepts the plain dict export."""
        loaded = NGramModel()
        loaded.load_serialized(self.model.to_dict())
        self.assert_same_state(self.model, loaded)
        self.assertIsInstance(self.model.to_serialized(), SerializedModel)

    def test_failed_load_keeps_state(self):
        """Test malformed data leaves the model unchanged."""
        before = self.model.counts.as_nested()
        config = self.model.config

        bad_inputs = [
            valid_data(counts={"a": {"b": -1}}),
            valid_data(counts={"a": {"b": 1.5}}),
            valid_data(config={"smoothing": 1.0, "sampling": "greedy"}),
            valid_data(counts={"a" + CONTEXT_SEPARATOR + "b": {"c": 1}}),
        ]
        for data in bad_inputs:
            with self.assertRaises(PersistenceError):
                self.model.load_serialized(data)

        self.assertEqual(self.model.counts.as_nested(), before)
        self.assertEqual(self.model.config, config)

    def test_invalid_json_file(self):
        """Test unparsable and schema-violating files raise PersistenceError."""
        broken = self.dir / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        with self.assertRaises(PersistenceError):
            self.model.load(broken)

        fractional = self.dir / "fractional.json"
        fractional.write_text(
            json.dumps(valid_data(counts={"a": {"b": 1.0}})), encoding="utf-8"
        )
        with self.assertRaises(PersistenceError):
            self.model.load(fractional)

    def test_invalid_pickle_file(self):
        """Test pickles that aren't model mappings are rejected."""
        path = self.dir / "list.pkl"
        path.write_bytes(pickle.dumps([1, 2, 3]))
        with self.assertRaises(PersistenceError):
            self.model.load(path)

        path = self.dir / "garbage.pkl"
        path.write_bytes(b"not a pickle")
        with self.assertRaises(PersistenceError):
            self.model.load(path)

    def test_missing_file(self):
        """Test loading a missing file raises PersistenceError."""
        with self.assertRaises(PersistenceError):
            self.model.load(self.dir / "missing.json")

    def test_unwritable_target(self):
        """Test write failures raise PersistenceError."""
        blocker = self.dir / "blocker"
        blocker.write_text("", encoding="utf-8")
        with self.assertRaises(PersistenceError):
            self.model.save(blocker / "model.json")

    def test_unencodable_token(self):
        """Test saving a token containing the separator fails without writing."""
        model = NGramModel(ModelConfig(order=1))
        model.train([["a" + CONTEXT_SEPARATOR + "b", "c"]])
        path = self.dir / "model.json"
        with self.assertRaises(PersistenceError):
            model.save(path)
        self.assertFalse(path.exists())

    def test_overwrite_leaves_no_temp_files(self):
        """Test saving twice replaces the file atomically."""
        path = self.dir / "model.json"
        self.model.save(path)
        self.model.save(path)
        self.assertEqual([p.name for p in self.dir.iterdir()], ["model.json"])


class TestModelStore(unittest.TestCase):
    """Tests for the store used directly."""

    def test_store_round_trip(self):
        """Test the store writes and validates serialized models."""
        store = ModelStore()
        serialized = parse_serialized(valid_data())
        with tempfile.TemporaryDirectory() as tmp:
            path = store.save(Path(tmp) / "model.json", serialized)
            self.assertEqual(store.load(path), serialized)


if __name__ == '__main__':
    unittest.main()
