"""
Game Data Models

Contains all game-related data structures, enums and error types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, NamedTuple, Optional


class GameStatus(Enum):
    """Lifecycle of a single puzzle. WON and LOST are terminal."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class CellColor(Enum):
    """Feedback color of a board cell, derived from the board and the secret."""
    UNKNOWN = "UNKNOWN"
    CORRECT = "CORRECT"
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"


# Glyph used for each color when sharing a result
COLOR_GLYPHS = {
    CellColor.UNKNOWN: "⬜",   # white square
    CellColor.CORRECT: "\U0001f7e9",  # green square
    CellColor.PRESENT: "\U0001f7e8",  # yellow square
    CellColor.ABSENT: "⬛",    # black square
}


class LetterColorSets(NamedTuple):
    """Letters typed so far, grouped by the best color each has reached."""
    correct: FrozenSet[str]
    present: FrozenSet[str]
    absent: FrozenSet[str]


@dataclass
class PersistedState:
    """Serializable snapshot of everything the engine needs to resume a game."""
    board: List[List[str]]
    current_row: int
    current_col: int
    game_status: GameStatus
    day_index: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "board": [list(row) for row in self.board],
            "currentRow": self.current_row,
            "currentCol": self.current_col,
            "gameStatus": self.game_status.value,
            "dayIndex": self.day_index,
        }


class GameError(Exception):
    """Base class for game engine errors."""


class StateCorrupt(GameError):
    """A persisted snapshot could not be parsed or is structurally invalid."""


class BoardExhausted(GameError):
    """A row was submitted after the last row of the board was used."""
