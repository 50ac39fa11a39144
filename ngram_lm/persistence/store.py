
from typing import Any, Mapping, Union
from pathlib import Path
import contextlib
import os
import pickle
import tempfile
import logging

from pydantic import ValidationError

from ngram_lm.errors import PersistenceError
from ngram_lm.persistence.types import SerializedModel


# Configure logging
logger = logging.getLogger(__name__)

PICKLE_SUFFIXES = {".pkl", ".pickle"}


def parse_serialized(data: Mapping[str, Any]) -> SerializedModel:
    """
    Validate a plain mapping against the serialized model schema.

    Raises:
        PersistenceError: If the mapping is malformed or inconsistent
    """
    try:
        return SerializedModel.model_validate(data)
    except ValidationError as e:
        raise PersistenceError(f"Invalid serialized model: {e}") from e


class ModelStore:
    """
    Reads and writes serialized models.

    The format follows the file suffix: `.pkl`/`.pickle` files hold a pickled
    plain dict (only load pickles you trust), anything else is JSON. Writes go
    to a temporary file that atomically replaces the target, so a failed save
    never leaves a partial file behind.
    """

    def save(self, filepath: Union[str, Path], model: SerializedModel) -> Path:
        """
        Save a serialized model to file.

        Args:
            filepath: Path to save file
            model: Serialized model

        Returns:
            The written path

        Raises:
            PersistenceError: If the file cannot be written
        """
        filepath = Path(filepath)

        try:
            # Ensure parent directory exists
            filepath.parent.mkdir(parents=True, exist_ok=True)

            if filepath.suffix in PICKLE_SUFFIXES:
                payload = pickle.dumps(
                    model.model_dump(mode="json"), protocol=pickle.HIGHEST_PROTOCOL
                )
            else:
                payload = model.model_dump_json(indent=2).encode("utf-8")

            fd, tmp_name = tempfile.mkstemp(
                dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
                os.replace(tmp_name, filepath)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise

            logger.info(f"Saved model to {filepath}")
            return filepath

        except (OSError, pickle.PicklingError) as e:
            logger.error(f"Failed to save model: {str(e)}")
            raise PersistenceError(f"Could not save model: {str(e)}") from e

    def load(self, filepath: Union[str, Path]) -> SerializedModel:
        """
        Load and validate a serialized model from file.

        Args:
            filepath: Path to load file

        Returns:
            Validated SerializedModel

        Raises:
            PersistenceError: If the file cannot be read or is malformed
        """
        filepath = Path(filepath)

        try:
            raw = filepath.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read model file: {str(e)}")
            raise PersistenceError(f"Could not read model file: {filepath}") from e

        if filepath.suffix in PICKLE_SUFFIXES:
            try:
                data = pickle.loads(raw)
            except Exception as e:
                logger.error(f"Failed to unpickle model: {str(e)}")
                raise PersistenceError(f"Could not unpickle model: {str(e)}") from e
            if not isinstance(data, Mapping):
                raise PersistenceError("Invalid model file: expected a mapping")
            model = parse_serialized(data)
        else:
            try:
                model = SerializedModel.model_validate_json(raw)
            except ValidationError as e:
                logger.error(f"Invalid model file {filepath}")
                raise PersistenceError(f"Invalid model file: {e}") from e

        logger.info(f"Loaded model from {filepath}")
        return model
