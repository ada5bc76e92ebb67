# xypoker/persistence.py
from typing import Optional, Dict, Any
import os
import logging
import pickle

import joblib

logger = logging.getLogger(__name__)


def save_learning_data(data_to_save: Dict[str, Any], filepath: str):
    """Saves the AI's learning record to a file."""
    if not filepath or not isinstance(filepath, str):
        logger.error(
            "Cannot save learning data: Invalid filepath provided (received: %s).",
            filepath,
        )
        return

    try:
        # Ensure parent directory exists
        parent_dir = os.path.dirname(filepath)
        # Handle case where filepath is just a filename (dirname is '')
        if parent_dir:
            os.makedirs(parent_dir, exist_ok=True)

        joblib.dump(data_to_save, filepath)
        logger.debug(
            "Learning data saved to %s (games: %s)",
            filepath,
            data_to_save.get("total_games", "N/A"),
        )

    except (OSError, pickle.PicklingError, TypeError) as e:
        logger.error("Error saving learning data to %s: %s", filepath, e)


def load_learning_data(filepath: str) -> Optional[Dict[str, Any]]:
    """Loads the AI's learning record. Returns None when there is nothing usable."""
    if not filepath or not isinstance(filepath, str):
        logger.error(
            "Cannot load learning data: Invalid filepath provided (received: %s).",
            filepath,
        )
        return None

    try:
        if os.path.exists(filepath) and os.path.getsize(filepath) > 0:
            loaded_data = joblib.load(filepath)
            if not isinstance(loaded_data, dict):
                logger.warning(
                    "Learning data in %s is a %s, not a dict. Ignoring it.",
                    filepath,
                    type(loaded_data).__name__,
                )
                return None
            logger.debug("Learning data loaded from %s.", filepath)
            return loaded_data
        if os.path.exists(filepath):  # File exists but is empty
            logger.warning(
                "Learning data file found at %s but is empty. Starting fresh.", filepath
            )
            return None
        else:  # File does not exist
            logger.info("Learning data file not found at %s. Starting fresh.", filepath)
            return None
    except (
        OSError,
        pickle.UnpicklingError,
        EOFError,
        ValueError,
    ) as e:
        logger.error("Error loading learning data from %s: %s", filepath, e)
        return None


def delete_learning_data(filepath: str) -> bool:
    """Removes the learning file. Returns True if a file was deleted."""
    try:
        os.remove(filepath)
        logger.info("Deleted learning data at %s", filepath)
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.error("Error deleting learning data at %s: %s", filepath, e)
        return False
