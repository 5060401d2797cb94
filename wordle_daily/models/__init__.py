"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    GameStatus, CellColor, COLOR_GLYPHS, LetterColorSets, PersistedState,
    GameError, StateCorrupt, BoardExhausted,
)

__all__ = [
    'GameStatus', 'CellColor', 'COLOR_GLYPHS', 'LetterColorSets', 'PersistedState',
    'GameError', 'StateCorrupt', 'BoardExhausted',
]
