"""
Utilities Package

Contains utility functions and helper modules.
"""

from .helpers import resolve_player_id, storage_key
from .game_logger import game_logger

__all__ = ['resolve_player_id', 'storage_key', 'game_logger']
