"""
Game Configuration Constants Module

This module defines all game configuration constants: board dimensions,
reveal timings, local storage keys and the target word database.
All game parameters are centralized here to enable easy modification.
"""

import json
import os
from typing import List, Final

# Core Game Configuration Constants
MAX_ATTEMPTS: Final[int] = 6
"""
Maximum number of guess attempts (board rows) allowed per game.
Type: Final[int] - Immutable to prevent accidental modification
"""

WORD_LENGTH: Final[int] = 5
"""Number of letters per guess (board columns)."""

# Reveal timings, in seconds
LETTER_REVEAL_DELAY: Final[float] = 0.3
"""Delay between flipping consecutive tiles of a scored row."""

REVEAL_TOTAL_DURATION: Final[float] = 1.5
"""Time from the first flip until the row settles and the result is checked."""

# Local durable storage keys
STATS_KEY: Final[str] = "wordle_stats"
GAME_STATE_KEY: Final[str] = "game_state"
ACTIVE_GAME_KEY: Final[str] = "active_game"

# Keys the client keyboard sends
ENTER_KEY: Final[str] = "ENTER"
DELETE_KEY: Final[str] = "⌫"

# Player-facing messages
MSG_NOT_ENOUGH_LETTERS: Final[str] = "Not enough letters"
MSG_NOT_IN_WORD_LIST: Final[str] = "Not in word list"
MSG_VALIDATION_ERROR: Final[str] = "Error validating word"
MSG_SESSION_RESTORED: Final[str] = "Game refreshed but restored"


def _load_word_list() -> List[str]:
    """
    Load the target word list from wordles.json.

    Returns:
        List[str]: List of uppercase words of WORD_LENGTH letters

    Raises:
        FileNotFoundError: If wordles.json file is not found
        ValueError: If JSON is malformed, the list is empty or contains invalid words
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'wordles.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            word_list = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in wordles.json: {e}")

    if not isinstance(word_list, list):
        raise ValueError("JSON file must contain an array of words")

    if not word_list:
        raise ValueError("Word list cannot be empty")

    # Convert all words to uppercase and validate
    uppercase_words = [word.upper() for word in word_list]

    for word in uppercase_words:
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word '{word}' is not {WORD_LENGTH} characters long")
        if not word.isalpha():
            raise ValueError(f"Word '{word}' contains non-alphabetic characters")

    return uppercase_words


# Curated target word database loaded from JSON file
WORD_LIST: Final[List[str]] = _load_word_list()


def validate_word_list_integrity() -> bool:
    """
    Validates the integrity and consistency of the word database.

    Checks length, alphabetic characters, uppercase format and uniqueness.

    Returns:
        bool: True if word list passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not WORD_LIST:
        raise ValueError("Word list cannot be empty")

    for index, word in enumerate(WORD_LIST):
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word at index {index} '{word}' is not {WORD_LENGTH} characters long")

        if not word.isalpha():
            raise ValueError(f"Word at index {index} '{word}' contains non-alphabetic characters")

        if not word.isupper():
            raise ValueError(f"Word at index {index} '{word}' is not in uppercase format")

    if len(WORD_LIST) != len(set(WORD_LIST)):
        duplicates = sorted({word for word in WORD_LIST if WORD_LIST.count(word) > 1})
        raise ValueError(f"Duplicate words found in word list: {duplicates}")

    return True


if __name__ == "__main__":

    try:
        validate_word_list_integrity()
        print(" Word list validation passed")
        print(f" {len(WORD_LIST)} target words loaded")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
