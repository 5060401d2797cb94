"""
Game Engine

The state machine behind a single daily puzzle: board, cursor and status,
key-event transitions, end-of-game evaluation, color derivation, share text
and snapshot persistence.

Colors are never stored. They are a pure function of the board, the secret
and the current row, and are recomputed on every query.
"""

import copy
import json
import logging
from typing import Callable, List, Mapping, Optional, Union

from ..config.game_settings import TRIES, ENTER, CLEAR, BACKSPACE
from ..models.game import (
    GameStatus, CellColor, COLOR_GLYPHS, LetterColorSets, PersistedState,
    StateCorrupt, BoardExhausted,
)

logger = logging.getLogger('wordle_game.engine')

ChangeListener = Callable[['GameEngine'], None]
StatusListener = Callable[['GameEngine', GameStatus], None]

Snapshot = Union[str, bytes, Mapping, PersistedState]


class GameEngine:
    """
    Owns the board for one secret word.

    Mutating operations silently ignore input that does not apply
    (typing past the end of a row, clearing an empty row, submitting a
    partial row, any key after the game is over).
    """

    def __init__(self, secret_word: str, tries: int = TRIES,
                 day_index: Optional[int] = None, strict: bool = False):
        if not isinstance(secret_word, str) or not secret_word.lower().isalpha():
            raise ValueError("Secret word must be a non-empty alphabetic string")
        if tries < 1:
            raise ValueError("Tries must be at least 1")

        self._secret = secret_word.lower()
        self._tries = tries
        self._day_index = day_index
        self._strict = strict

        self._change_listeners: List[ChangeListener] = []
        self._status_listeners: List[StatusListener] = []

        self._reset()

    def _reset(self) -> None:
        self._board: List[List[str]] = [["" for _ in range(self.word_length)] for _ in range(self._tries)]
        self._current_row = 0
        self._current_col = 0
        self._status = GameStatus.PLAYING

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    @property
    def secret_word(self) -> str:
        return self._secret

    @property
    def word_length(self) -> int:
        return len(self._secret)

    @property
    def tries(self) -> int:
        return self._tries

    @property
    def day_index(self) -> Optional[int]:
        return self._day_index

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def current_row(self) -> int:
        return self._current_row

    @property
    def current_col(self) -> int:
        return self._current_col

    @property
    def is_over(self) -> bool:
        return self._status is not GameStatus.PLAYING

    @property
    def board(self) -> List[List[str]]:
        """A copy of the board; callers can never alias the engine's rows."""
        return [list(row) for row in self._board]

    def _in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._tries and 0 <= col < self.word_length

    def get_cell(self, row: int, col: int) -> str:
        """Lowercase letter at a cell, or "" for an empty or off-board cell."""
        if not self._in_bounds(row, col):
            return ""
        return self._board[row][col]

    def display_cell(self, row: int, col: int) -> str:
        return self.get_cell(row, col).upper()

    def is_active_cell(self, row: int, col: int) -> bool:
        return row == self._current_row and col == self._current_col

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_change_listener(self, listener: ChangeListener) -> None:
        """Called with the engine after every state-mutating operation."""
        self._change_listeners.append(listener)

    def add_status_listener(self, listener: StatusListener) -> None:
        """Called with (engine, status) when the game is won or lost."""
        self._status_listeners.append(listener)

    def _notify_change(self) -> None:
        for listener in self._change_listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("Change listener failed")

    def _notify_status(self) -> None:
        for listener in self._status_listeners:
            try:
                listener(self, self._status)
            except Exception:
                logger.exception("Status listener failed")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def submit_letter(self, ch: str) -> bool:
        """Type one letter at the cursor. Returns True if the board changed."""
        if self._status is not GameStatus.PLAYING:
            return False
        if not isinstance(ch, str) or len(ch) != 1:
            return False
        # Some capitals lowercase to more than one code point
        letter = ch.lower()
        if len(letter) != 1 or not letter.isalpha():
            return False
        if self._current_col >= self.word_length:
            return False

        self._board[self._current_row][self._current_col] = letter
        self._current_col += 1
        self._notify_change()
        return True

    def clear_letter(self) -> bool:
        """Erase the letter before the cursor. Returns True if the board changed."""
        if self._status is not GameStatus.PLAYING or self._current_col == 0:
            return False

        self._current_col -= 1
        self._board[self._current_row][self._current_col] = ""
        self._notify_change()
        return True

    def submit_row(self) -> bool:
        """
        Commit the current row and evaluate the end of the game.

        Returns True if a row was committed. A partial row is ignored.

        Raises:
            BoardExhausted: In strict mode, when every row is already
                committed but the game is still playing.
        """
        if self._status is not GameStatus.PLAYING:
            return False

        if self._current_row >= self._tries:
            message = f"Row {self._current_row} submitted on a board of {self._tries} rows"
            if self._strict:
                raise BoardExhausted(message)
            logger.error("Ignoring submit: %s", message)
            return False

        if self._current_col != self.word_length:
            return False

        self._current_row += 1
        self._current_col = 0

        status_changed = self._evaluate()
        self._notify_change()
        if status_changed:
            self._notify_status()
        return True

    def _evaluate(self) -> bool:
        """Update the status after a commit. Returns True on a transition."""
        guess = "".join(self._board[self._current_row - 1])

        # A correct guess on the final row is a win, never a loss
        if guess == self._secret:
            self._status = GameStatus.WON
        elif self._current_row == self._tries:
            self._status = GameStatus.LOST
        else:
            return False

        logger.info("Game finished: %s after %d rows", self._status.value, self._current_row)
        return True

    def press_key(self, key: str) -> bool:
        """Dispatch a keyboard key. Returns True if the state changed."""
        if not isinstance(key, str):
            return False
        normalized = key.strip().upper()
        if normalized == ENTER:
            return self.submit_row()
        if normalized in (CLEAR, BACKSPACE):
            return self.clear_letter()
        return self.submit_letter(key.strip())

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def color_of(self, row: int, col: int) -> CellColor:
        """
        Feedback color of a cell.

        Uncommitted rows are UNKNOWN. A letter that appears anywhere in the
        secret is PRESENT for every occurrence; repeated letters are not
        limited by how often they occur in the secret.
        """
        if row >= self._current_row or not self._in_bounds(row, col):
            return CellColor.UNKNOWN

        letter = self._board[row][col]
        if letter == self._secret[col]:
            return CellColor.CORRECT
        if letter and letter in self._secret:
            return CellColor.PRESENT
        return CellColor.ABSENT

    def colors(self) -> List[List[CellColor]]:
        return [[self.color_of(row, col) for col in range(self.word_length)]
                for row in range(self._tries)]

    def letter_color_sets(self) -> LetterColorSets:
        """Classify every committed letter by the best color it has reached."""
        correct, present, absent = set(), set(), set()
        for row in range(self._current_row):
            for col, letter in enumerate(self._board[row]):
                color = self.color_of(row, col)
                if color is CellColor.CORRECT:
                    correct.add(letter)
                elif color is CellColor.PRESENT:
                    present.add(letter)
                elif color is CellColor.ABSENT:
                    absent.add(letter)

        present -= correct
        absent -= correct | present
        return LetterColorSets(frozenset(correct), frozenset(present), frozenset(absent))

    def share_text(self) -> str:
        """Color grid of the committed rows, one line per row."""
        lines = []
        for row in range(self._current_row):
            lines.append("".join(COLOR_GLYPHS[self.color_of(row, col)]
                                 for col in range(self.word_length)))
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def snapshot(self) -> PersistedState:
        return PersistedState(
            board=self.board,
            current_row=self._current_row,
            current_col=self._current_col,
            game_status=self._status,
            day_index=self._day_index,
        )

    def serialize(self) -> str:
        return json.dumps(self.snapshot().to_dict())

    def restore(self, snapshot: Snapshot) -> None:
        """
        Replace board, cursor and status with a persisted snapshot.

        The secret word is not revalidated against the board.

        Raises:
            StateCorrupt: If the snapshot is malformed. The engine is left
                in the fresh state.
        """
        try:
            state = self._parse_snapshot(snapshot)
        except StateCorrupt:
            self._reset()
            raise

        self._board = copy.deepcopy(state.board)
        self._current_row = state.current_row
        self._current_col = state.current_col
        self._status = state.game_status
        self._notify_change()

    def _parse_snapshot(self, snapshot: Snapshot) -> PersistedState:
        if isinstance(snapshot, PersistedState):
            data = snapshot.to_dict()
        elif isinstance(snapshot, (str, bytes)):
            try:
                data = json.loads(snapshot)
            except ValueError as e:
                raise StateCorrupt(f"Snapshot is not valid JSON: {e}") from e
        else:
            data = snapshot

        if not isinstance(data, Mapping):
            raise StateCorrupt("Snapshot must be an object")

        missing = [name for name in ("board", "currentRow", "currentCol", "gameStatus") if name not in data]
        if missing:
            raise StateCorrupt(f"Snapshot is missing fields: {', '.join(missing)}")

        board = data["board"]
        row = data["currentRow"]
        col = data["currentCol"]

        try:
            status = GameStatus(data["gameStatus"])
        except ValueError:
            raise StateCorrupt(f"Unknown game status: {data['gameStatus']!r}") from None

        day_index = data.get("dayIndex")
        if day_index is not None and type(day_index) is not int:
            raise StateCorrupt("Day index must be an integer")
        if self._day_index is not None and day_index != self._day_index:
            raise StateCorrupt(f"Snapshot is for day {day_index}, expected day {self._day_index}")

        for name, value in (("currentRow", row), ("currentCol", col)):
            if type(value) is not int:
                raise StateCorrupt(f"{name} must be an integer")
        if not 0 <= row <= self._tries:
            raise StateCorrupt(f"currentRow {row} out of range")
        if not 0 <= col <= self.word_length:
            raise StateCorrupt(f"currentCol {col} out of range")
        if row == self._tries and col != 0:
            raise StateCorrupt("currentCol must be 0 once every row is committed")

        if not isinstance(board, list) or len(board) != self._tries:
            raise StateCorrupt(f"Board must have {self._tries} rows")
        for r, cells in enumerate(board):
            if not isinstance(cells, list) or len(cells) != self.word_length:
                raise StateCorrupt(f"Board row {r} must have {self.word_length} cells")
            for c, cell in enumerate(cells):
                if not isinstance(cell, str) or len(cell.lower()) > 1 or (cell and not cell.isalpha()):
                    raise StateCorrupt(f"Board cell ({r}, {c}) is not a letter")
                filled = r < row or (r == row and c < col)
                if filled != bool(cell):
                    raise StateCorrupt(f"Board cell ({r}, {c}) disagrees with the cursor")

        if status is GameStatus.PLAYING and row == self._tries:
            raise StateCorrupt("Game is still playing with no rows left")
        if status is not GameStatus.PLAYING and (row == 0 or col != 0):
            raise StateCorrupt("Finished game must have a committed row and an empty cursor row")
        if status is GameStatus.LOST and row != self._tries:
            raise StateCorrupt("Lost game must have every row committed")

        return PersistedState(
            board=[[cell.lower() for cell in cells] for cells in board],
            current_row=row,
            current_col=col,
            game_status=status,
            day_index=day_index,
        )
