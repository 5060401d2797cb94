"""
Game Service

Owns one GameEngine per player, wires each engine to persistence and
end-of-game notifications, and builds JSON-ready views for the controllers.
"""

import logging
import threading
from functools import partial
from typing import Callable, Dict, Optional, Tuple

from ..config.game_settings import TRIES
from ..models.game import GameStatus, StateCorrupt
from ..utils.game_logger import game_logger
from ..utils.helpers import resolve_player_id, storage_key
from .game_engine import GameEngine
from .storage import StateWriter
from .word_provider import WordProvider, day_index_for

logger = logging.getLogger('wordle_game.service')

GameEndedListener = Callable[[str, GameEngine, GameStatus], None]


class GameService:
    """
    Game session manager.

    This class handles:
    - Picking the daily secret from the word provider
    - Restoring a player's saved game before any key is accepted
    - Saving the game after every change
    - Fanning end-of-game transitions out to listeners (e.g. WebSocket rooms)

    A player's engine is only touched while holding that player's lock, so
    HTTP and WebSocket events for one player are applied one at a time.
    """

    def __init__(self, writer: StateWriter, provider: Optional[WordProvider] = None,
                 tries: int = TRIES, state_key: str = "@game", strict: bool = False,
                 share_title: str = "Wordle"):
        self.writer = writer
        self.provider = provider or WordProvider()
        self.tries = tries
        self.state_key = state_key
        self.strict = strict
        self.share_title = share_title
        self.games: Dict[str, GameEngine] = {}
        self._game_ended_listeners: Dict[str, GameEndedListener] = {}
        self._locks_guard = threading.Lock()
        # Reentrant: game-ended listeners call back into share_message
        self._player_locks: Dict[str, threading.RLock] = {}

    def add_status_listener(self, listener: GameEndedListener, name: Optional[str] = None) -> None:
        """
        Register a callback for (player_id, engine, status) on game end.

        A listener added under a name that is already registered replaces it.
        """
        if name is None:
            name = f"listener-{id(listener)}"
        self._game_ended_listeners[name] = listener

    def _player_lock(self, player_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._player_locks.get(player_id)
            if lock is None:
                lock = self._player_locks[player_id] = threading.RLock()
            return lock

    def start_game(self, player_id: Optional[str] = None,
                   day_index: Optional[int] = None) -> Tuple[str, GameEngine]:
        """
        Starts or resumes a player's game for a day.

        Args:
            player_id: Player identifier, generated when omitted
            day_index: Day to play, taken from today's date when omitted

        Returns:
            Tuple of (player_id, engine)
        """
        player_id = resolve_player_id(player_id)
        if day_index is None:
            day_index = day_index_for()

        with self._player_lock(player_id):
            existing = self.games.get(player_id)
            if existing is not None and existing.day_index == day_index:
                return player_id, existing

            engine = GameEngine(self.provider.get_word(day_index), self.tries,
                                day_index=day_index, strict=self.strict)
            key = storage_key(self.state_key, player_id)

            # Resolve fresh-vs-restored before the engine is handed out
            blob = self.writer.load(key)
            if blob is not None:
                try:
                    engine.restore(blob)
                    game_logger.log_game_event(
                        player_id, 'state_restored',
                        day_index=day_index, current_row=engine.current_row,
                        status=engine.status.value
                    )
                except StateCorrupt as e:
                    logger.warning("Discarding saved game for %s: %s", player_id, e)
                    game_logger.log_game_event(
                        player_id, 'state_corrupt',
                        day_index=day_index, reason=str(e)
                    )

            engine.add_change_listener(partial(self._save, key))
            engine.add_status_listener(partial(self._on_status_change, player_id))

            self.games[player_id] = engine
            return player_id, engine

    def get_engine(self, player_id: str) -> Optional[GameEngine]:
        return self.games.get(player_id)

    def press_key(self, player_id: str, key: str) -> Optional[bool]:
        """
        Applies a key event to a player's game.

        Returns:
            True if the state changed, False for an ignored key,
            None if the player has no game
        """
        with self._player_lock(player_id):
            engine = self.games.get(player_id)
            if engine is None:
                return None
            return engine.press_key(key)

    def share_message(self, player_id: str) -> Optional[str]:
        """Share text with a title line, e.g. 'Wordle 42 3/6'."""
        with self._player_lock(player_id):
            engine = self.games.get(player_id)
            if engine is None:
                return None

            title = self.share_title
            if engine.day_index is not None:
                title = f"{title} {engine.day_index}"
            if engine.status is GameStatus.WON:
                title = f"{title} {engine.current_row}/{engine.tries}"
            elif engine.status is GameStatus.LOST:
                title = f"{title} X/{engine.tries}"

            grid = engine.share_text()
            return f"{title}\n{grid}" if grid else title

    def game_view(self, player_id: str) -> Optional[Dict]:
        """
        Returns the current game state for a player (without revealing the
        answer until the game is over).
        """
        with self._player_lock(player_id):
            engine = self.games.get(player_id)
            if engine is None:
                return None

            keyboard = engine.letter_color_sets()
            active_cell = None
            if not engine.is_over:
                active_cell = [engine.current_row, engine.current_col]

            return {
                'player_id': player_id,
                'day_index': engine.day_index,
                'tries': engine.tries,
                'word_length': engine.word_length,
                'board': [[cell.upper() for cell in row] for row in engine.board],
                'colors': [[color.value for color in row] for row in engine.colors()],
                'current_row': engine.current_row,
                'current_col': engine.current_col,
                'active_cell': active_cell,
                'status': engine.status.value,
                'keyboard': {
                    'correct': sorted(keyboard.correct),
                    'present': sorted(keyboard.present),
                    'absent': sorted(keyboard.absent),
                },
                'answer': engine.secret_word.upper() if engine.is_over else None,
            }

    def end_game(self, player_id: str) -> bool:
        """
        Drops a player's game from memory. The saved blob is kept.

        Returns:
            bool: True if a game was removed, False if not found
        """
        with self._player_lock(player_id):
            if player_id in self.games:
                del self.games[player_id]
                return True
            return False

    def _save(self, key: str, engine: GameEngine) -> None:
        self.writer.save(key, engine.serialize())

    def _on_status_change(self, player_id: str, engine: GameEngine, status: GameStatus) -> None:
        event = 'game_won' if status is GameStatus.WON else 'game_lost'
        game_logger.log_game_event(
            player_id, event,
            day_index=engine.day_index, rows_used=engine.current_row,
            target_word=engine.secret_word
        )
        for listener in list(self._game_ended_listeners.values()):
            try:
                listener(player_id, engine, status)
            except Exception as e:
                game_logger.logger.error(f"Game-ended listener failed for {player_id}: {e}")


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(writer: StateWriter, provider: Optional[WordProvider] = None,
                            **kwargs) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(writer, provider, **kwargs)
    return _game_service
