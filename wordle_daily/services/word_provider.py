"""
Word Provider

Maps a day index to the secret word for that day.
"""

from datetime import date
from typing import List, Optional, Sequence

from ..config.game_settings import WORD_LIST, DAY_INDEX_STRIDE


def day_index_for(today: Optional[date] = None) -> int:
    """
    Day index for a calendar date: the day of the year times DAY_INDEX_STRIDE.

    The clock is only read when no date is passed in.
    """
    if today is None:
        today = date.today()
    return today.timetuple().tm_yday * DAY_INDEX_STRIDE


class WordProvider:
    """Deterministic day-index to word lookup over a fixed word list."""

    def __init__(self, words: Sequence[str] = WORD_LIST):
        if not words:
            raise ValueError("Word list cannot be empty")
        self.words: List[str] = [word.lower() for word in words]

    def get_word(self, day_index: int) -> str:
        """Secret word for a day. Indexes past the end of the list wrap around."""
        if day_index < 0:
            raise ValueError("Day index cannot be negative")
        return self.words[day_index % len(self.words)]
