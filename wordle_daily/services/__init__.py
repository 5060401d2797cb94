"""
Services Package

Contains all business logic and service classes.
"""

from .game_engine import GameEngine
from .game_service import GameService, get_game_service, initialize_game_service
from .storage import KeyValueStore, MemoryStore, MongoStore, StateWriter, build_store
from .word_provider import WordProvider, day_index_for

__all__ = [
    'GameEngine',
    'GameService', 'get_game_service', 'initialize_game_service',
    'KeyValueStore', 'MemoryStore', 'MongoStore', 'StateWriter', 'build_store',
    'WordProvider', 'day_index_for',
]
