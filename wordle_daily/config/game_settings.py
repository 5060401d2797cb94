"""
Game Configuration Constants Module

This module defines the game rules: board dimensions, key names,
day-index derivation and the curated word list the daily secret is
drawn from.
"""

import json
import os
from typing import List, Final

# Core Game Configuration Constants
TRIES: Final[int] = 6
"""
Number of guess attempts (board rows) allowed per game.
Type: Final[int] - Immutable to prevent accidental modification
"""

WORD_LENGTH: Final[int] = 5
"""Letters per word (board columns) for the bundled word list."""

# Special keys delivered by the on-screen keyboard
ENTER: Final[str] = "ENTER"
CLEAR: Final[str] = "CLEAR"
BACKSPACE: Final[str] = "BACKSPACE"

DAY_INDEX_STRIDE: Final[int] = 3
"""Multiplier applied to the day of the year when picking the daily word."""


# Load word list from JSON file
def _load_word_list() -> List[str]:
    """
    Load word list from wordles.json file.

    Returns:
        List[str]: List of lowercase WORD_LENGTH-letter words

    Raises:
        FileNotFoundError: If wordles.json file is not found
        ValueError: If the JSON is malformed, the list is empty or contains invalid words
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'wordles.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            word_list = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in wordles.json: {e}") from e

    if not isinstance(word_list, list):
        raise ValueError("JSON file must contain an array of words")

    if not word_list:
        raise ValueError("Word list cannot be empty")

    # Secrets are compared in lowercase
    lowercase_words = [str(word).strip().lower() for word in word_list]

    for word in lowercase_words:
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word '{word}' is not {WORD_LENGTH} characters long")
        if not word.isalpha():
            raise ValueError(f"Word '{word}' contains non-alphabetic characters")

    return lowercase_words


# Curated Word Database loaded from JSON file
WORD_LIST: Final[List[str]] = _load_word_list()


def validate_word_list_integrity(words: List[str] = WORD_LIST) -> bool:
    """
    Validates the integrity and consistency of the word database.

    This function performs validation to ensure:
    1. Length validation: All words must be exactly WORD_LENGTH characters
    2. Character validation: Only alphabetic characters allowed
    3. Format validation: Consistent lowercase formatting
    4. Uniqueness validation: No duplicate entries

    Returns:
        bool: True if word list passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not words:
        raise ValueError("Word list cannot be empty")

    for index, word in enumerate(words):
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word at index {index} '{word}' is not {WORD_LENGTH} characters long")

        if not word.isalpha():
            raise ValueError(f"Word at index {index} '{word}' contains non-alphabetic characters")

        if not word.islower():
            raise ValueError(f"Word at index {index} '{word}' is not in lowercase format")

    if len(words) != len(set(words)):
        duplicates = sorted({word for word in words if words.count(word) > 1})
        raise ValueError(f"Duplicate words found in word list: {duplicates}")

    return True


if __name__ == "__main__":

    try:
        validate_word_list_integrity()
        print(f" Word list validation passed ({len(WORD_LIST)} words)")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
