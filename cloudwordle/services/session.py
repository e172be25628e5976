"""
Session State Machine

Owns the attempt/tile cursors, the target word and the guess history for
one game, and drives the transitions triggered by submitted guesses.

The session is the single source of truth for the board; everything the
renderer shows is projected from it, and snapshots are built from it.
"""

import random
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple
from ..config.game_settings import MAX_ATTEMPTS, WORD_LENGTH
from ..errors import InvalidTransitionError, SnapshotError
from ..models.game import LetterStatus, SessionState, Tile
from .scoring import aggregate_key_status, score

GuessRecord = Tuple[str, Tuple[LetterStatus, ...]]


class Session:
    """
    One Wordle game.

    States:
    - FILLING: accepting letters and deletions on the active row
    - SUBMITTING: complete guess handed to the word check
    - ROW_COMPLETE: guess scored and recorded, result not yet applied
    - WON / LOST: terminal, nothing mutates any more
    """

    def __init__(self, target_word: str,
                 word_length: int = WORD_LENGTH,
                 max_attempts: int = MAX_ATTEMPTS):
        target_word = (target_word or "").strip().upper()
        if len(target_word) != word_length or not target_word.isalpha():
            raise ValueError(f"Target word must be {word_length} letters, got {target_word!r}")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self._target_word = target_word
        self.word_length = word_length
        self.max_attempts = max_attempts

        self.attempt_index = 0
        self.cursor_index = 0
        self.state = SessionState.FILLING
        self._letters: List[str] = []
        self._history: List[GuessRecord] = []

    @property
    def target_word(self) -> str:
        return self._target_word

    @property
    def terminal(self) -> bool:
        return self.state.terminal

    @property
    def won(self) -> bool:
        return self.state is SessionState.WON

    @property
    def started(self) -> bool:
        """True once the player has entered at least one letter."""
        return bool(self._history) or self.attempt_index > 0 or self.cursor_index > 0

    @property
    def history(self) -> Tuple[GuessRecord, ...]:
        return tuple(self._history)

    @property
    def current_letters(self) -> str:
        return "".join(self._letters)

    @property
    def attempts_used(self) -> int:
        return len(self._history)

    # ------------------------------------------------------------------
    # Row editing
    # ------------------------------------------------------------------

    def add_letter(self, letter: str) -> bool:
        """Appends a letter to the active row. Returns False when nothing changed."""
        if self.state is not SessionState.FILLING:
            return False
        if self.cursor_index >= self.word_length:
            return False
        if not isinstance(letter, str) or len(letter) != 1 or not letter.isalpha():
            return False

        self._letters.append(letter.upper())
        self.cursor_index += 1
        return True

    def delete_letter(self) -> bool:
        """Removes the last letter of the active row. Returns False when nothing changed."""
        if self.state is not SessionState.FILLING:
            return False
        if self.cursor_index <= 0:
            return False

        self._letters.pop()
        self.cursor_index -= 1
        return True

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def begin_submit(self) -> Optional[str]:
        """
        Moves a complete row into SUBMITTING.

        Returns:
            The guess to validate, or None if the row is incomplete
            (an incomplete row is invalid input, not an error)
        """
        if self.state is not SessionState.FILLING:
            raise InvalidTransitionError("submit", self.state.value)
        if self.cursor_index < self.word_length:
            return None

        self.state = SessionState.SUBMITTING
        return self.current_letters

    def reject_submission(self) -> None:
        """Word check said no (or failed): back to FILLING, nothing consumed."""
        if self.state is not SessionState.SUBMITTING:
            raise InvalidTransitionError("reject a submission", self.state.value)
        self.state = SessionState.FILLING

    def accept_submission(self) -> Tuple[LetterStatus, ...]:
        """Scores the pending guess and records it in the history."""
        if self.state is not SessionState.SUBMITTING:
            raise InvalidTransitionError("accept a submission", self.state.value)

        guess = self.current_letters
        statuses = tuple(score(guess, self._target_word))
        self._history.append((guess, statuses))
        self.state = SessionState.ROW_COMPLETE
        return statuses

    def advance(self) -> SessionState:
        """
        Applies the result of the scored row.

        Returns:
            SessionState: WON, LOST, or FILLING on the next row
        """
        if self.state is not SessionState.ROW_COMPLETE:
            raise InvalidTransitionError("advance", self.state.value)

        guess, _ = self._history[-1]
        if guess == self._target_word:
            self.state = SessionState.WON
        elif self.attempt_index == self.max_attempts - 1:
            self.state = SessionState.LOST
        else:
            self.attempt_index += 1
            self.cursor_index = 0
            self._letters = []
            self.state = SessionState.FILLING
        return self.state

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def settled_history(self) -> Tuple[GuessRecord, ...]:
        """History without a row whose result has not been applied yet."""
        if self.state is SessionState.ROW_COMPLETE:
            return tuple(self._history[:-1])
        return tuple(self._history)

    def board(self, settled: bool = False) -> List[List[Tile]]:
        """
        Renders the board as rows of tiles.

        With settled=True a row that is still being submitted or revealed is
        shown as plain letters, which is what a player sees before the flip.
        """
        history = self.settled_history() if settled else self.history
        rows: List[List[Tile]] = []
        for row in range(self.max_attempts):
            tiles = []
            for col in range(self.word_length):
                content, status_class = "", ""
                if row < len(history):
                    guess, statuses = history[row]
                    content, status_class = guess[col], statuses[col].value
                elif row == self.attempt_index and col < len(self._letters):
                    content = self._letters[col]
                tiles.append(Tile(row, col, content, status_class))
            rows.append(tiles)
        return rows

    def keyboard(self, settled: bool = False) -> Dict[str, LetterStatus]:
        history = self.settled_history() if settled else self.history
        return aggregate_key_status(history)

    def to_dict(self) -> Dict[str, Any]:
        """Client-facing state; the answer is only included once the game is over."""
        return {
            "state": self.state.value,
            "attempt_index": self.attempt_index,
            "cursor_index": self.cursor_index,
            "word_length": self.word_length,
            "max_attempts": self.max_attempts,
            "game_over": self.terminal,
            "won": self.won,
            "guesses": [guess for guess, _ in self._history],
            "board": [[tile.to_dict() for tile in row] for row in self.board()],
            "keyboard": {letter: status.value for letter, status in self.keyboard().items()},
            "answer": self._target_word if self.terminal else None,
        }

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_snapshot(self, timestamp: Optional[float] = None) -> Dict[str, Any]:
        """
        Serializable projection used to resume after an interruption.

        A row that is mid-submission is recorded as it was before ENTER,
        so a resumed session is back in FILLING with that row complete.
        """
        return {
            "timestamp": timestamp if timestamp is not None else time.time(),
            "active": not self.terminal,
            "target_word": self._target_word,
            "attempt_index": self.attempt_index,
            "cursor_index": self.cursor_index,
            "terminal": self.terminal,
            "board_state": [
                tile.to_dict()
                for row in self.board(settled=True)
                for tile in row
            ],
        }

    @classmethod
    def from_snapshot(cls, data: Any,
                      word_length: int = WORD_LENGTH,
                      max_attempts: int = MAX_ATTEMPTS) -> "Session":
        """
        Rebuilds a FILLING session from a snapshot.

        Completed rows are read back from the board and re-scored against the
        target; any disagreement means the snapshot cannot be trusted.

        Raises:
            SnapshotError: If the snapshot is malformed or inconsistent
        """
        if not isinstance(data, dict):
            raise SnapshotError("snapshot is not an object")

        target_word = data.get("target_word")
        if not isinstance(target_word, str):
            raise SnapshotError("missing target word", "target_word")
        try:
            session = cls(target_word, word_length=word_length, max_attempts=max_attempts)
        except ValueError as e:
            raise SnapshotError(str(e), "target_word")

        if data.get("terminal") is not False or data.get("active") is False:
            raise SnapshotError("snapshot is not of an active session", "terminal")

        attempt_index = _bounded_int(data, "attempt_index", max_attempts - 1)
        cursor_index = _bounded_int(data, "cursor_index", word_length)
        grid = _read_board(data.get("board_state"), word_length, max_attempts)

        for row in range(attempt_index):
            guess = "".join(grid[row][col][0] for col in range(word_length))
            if len(guess) != word_length or not guess.isalpha():
                raise SnapshotError(f"row {row} is not a complete guess", "board_state")
            statuses = tuple(score(guess, session.target_word))
            stored = tuple(grid[row][col][1] for col in range(word_length))
            if stored != tuple(status.value for status in statuses):
                raise SnapshotError(f"row {row} statuses do not match its guess", "board_state")
            if guess == session.target_word:
                raise SnapshotError(f"row {row} already solved the puzzle", "board_state")
            session._history.append((guess, statuses))

        letters = []
        for col in range(word_length):
            content, status_class = grid[attempt_index][col]
            if status_class:
                raise SnapshotError("active row has scored tiles", "board_state")
            if col < cursor_index:
                if len(content) != 1 or not content.isalpha():
                    raise SnapshotError(f"active row tile {col} is empty", "board_state")
                letters.append(content.upper())
            elif content:
                raise SnapshotError(f"active row tile {col} is past the cursor", "board_state")

        for row in range(attempt_index + 1, max_attempts):
            if any(content or status_class for content, status_class in grid[row]):
                raise SnapshotError(f"row {row} is ahead of the active row", "board_state")

        session.attempt_index = attempt_index
        session.cursor_index = cursor_index
        session._letters = letters
        return session


def _bounded_int(data: Dict[str, Any], key: str, upper: int) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= upper:
        raise SnapshotError(f"expected an integer in [0, {upper}]", key)
    return value


def _read_board(board_state: Any, word_length: int, max_attempts: int) -> List[List[Tuple[str, str]]]:
    """Turns the flat tile list into a grid of (content, status_class)."""
    if not isinstance(board_state, list):
        raise SnapshotError("board state is not a list", "board_state")

    valid_statuses = {"", *(status.value for status in LetterStatus)}
    grid: List[List[Optional[Tuple[str, str]]]] = [
        [None] * word_length for _ in range(max_attempts)
    ]
    for tile in board_state:
        if not isinstance(tile, dict):
            raise SnapshotError("tile is not an object", "board_state")
        row, col = tile.get("row"), tile.get("col")
        content = tile.get("content", "")
        status_class = tile.get("status_class", "")
        if not (isinstance(row, int) and isinstance(col, int)
                and 0 <= row < max_attempts and 0 <= col < word_length):
            raise SnapshotError(f"tile position ({row}, {col}) is off the board", "board_state")
        if not isinstance(content, str) or len(content) > 1:
            raise SnapshotError(f"tile ({row}, {col}) has invalid content", "board_state")
        if status_class not in valid_statuses:
            raise SnapshotError(f"tile ({row}, {col}) has unknown status {status_class!r}", "board_state")
        if grid[row][col] is not None:
            raise SnapshotError(f"tile ({row}, {col}) appears twice", "board_state")
        grid[row][col] = (content.upper(), status_class)

    if any(cell is None for row in grid for cell in row):
        raise SnapshotError("board state is incomplete", "board_state")
    return grid  # type: ignore[return-value]


def new_session(words: Sequence[str], chooser=None,
                word_length: int = WORD_LENGTH,
                max_attempts: int = MAX_ATTEMPTS) -> Session:
    """Starts a fresh session with a target drawn from words."""
    pick = chooser or random.choice
    return Session(pick(list(words)), word_length=word_length, max_attempts=max_attempts)
