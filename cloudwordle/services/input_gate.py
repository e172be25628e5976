"""
Input Gate

Serializes raw key events against the asynchronous validate-score-reveal
pipeline so that at most one guess is in flight per player.

Two guards decide what gets through:
- game_over: the session is terminal, every key is ignored
- is_validating: a guess is in flight, ENTER and DELETE are ignored

is_validating is set the moment a complete guess goes to the word check and
is cleared exactly once: right away when the word is rejected or the check
fails, or only after the whole reveal has played out when it is accepted.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
from ..config.game_settings import (
    DELETE_KEY, ENTER_KEY, LETTER_REVEAL_DELAY, REVEAL_TOTAL_DURATION,
    MSG_NOT_ENOUGH_LETTERS, MSG_NOT_IN_WORD_LIST, MSG_VALIDATION_ERROR,
)
from ..models.game import LetterStatus, SessionState
from ..utils.game_logger import game_logger
from .collaborators import Renderer
from .scoring import upgrade_key_status
from .session import Session

_DELETE_ALIASES = {DELETE_KEY, "BACKSPACE", "DELETE"}


@dataclass(frozen=True)
class RevealSchedule:
    """Tile i flips at i * letter_delay; the row settles at total_duration."""
    letter_delay: float = LETTER_REVEAL_DELAY
    total_duration: float = REVEAL_TOTAL_DURATION

    def offsets(self, word_length: int) -> List[float]:
        return [i * self.letter_delay for i in range(word_length)]

    def settle_delay(self, word_length: int) -> float:
        last = self.offsets(word_length)[-1] if word_length else 0.0
        return max(self.total_duration - last, 0.0)


def normalize_key(key) -> Optional[str]:
    """Maps client key names to ENTER, DELETE_KEY or an uppercase letter."""
    if not isinstance(key, str) or not key:
        return None
    if key.upper() == ENTER_KEY:
        return ENTER_KEY
    if key in _DELETE_ALIASES or key.upper() in _DELETE_ALIASES:
        return DELETE_KEY
    if len(key) == 1 and key.isascii() and key.isalpha():
        return key.upper()
    return None


def _spawn_thread(target, *args) -> threading.Thread:
    worker = threading.Thread(target=target, args=args, daemon=True)
    worker.start()
    return worker


class InputGate:
    """
    Front door for one player's key events.

    Args:
        session: Session to drive
        renderer: Receives tile, key, message and modal updates
        word_validator: Object with is_valid_word(word); None accepts every complete word
        on_terminal: Called with the session once it is won or lost, after the reveal
        schedule: Reveal timings
        sleep: Used to wait through the reveal
        spawn: Starts the guess pipeline; spawn(fn, *args)
    """

    def __init__(self, session: Session,
                 renderer: Optional[Renderer] = None,
                 word_validator=None,
                 on_terminal: Optional[Callable[[Session], None]] = None,
                 schedule: RevealSchedule = RevealSchedule(),
                 sleep: Callable[[float], None] = time.sleep,
                 spawn: Callable = _spawn_thread):
        self.session = session
        self.renderer = renderer or Renderer()
        self.word_validator = word_validator
        self.on_terminal = on_terminal
        self.schedule = schedule
        self.sleep = sleep
        self.spawn = spawn

        self.game_over = session.terminal
        self.is_validating = False
        self._lock = threading.Lock()
        self._worker = None

    def handle_key(self, key) -> bool:
        """
        Applies one key event.

        Returns:
            bool: True if the key changed something or started a submission
        """
        key = normalize_key(key)
        if key is None:
            return False

        with self._lock:
            if self.game_over:
                return False
            if key == ENTER_KEY:
                if self.is_validating:
                    return False
                guess = self._begin_submit()
                if guess is None:
                    return False
                session = self.session
            elif key == DELETE_KEY:
                if self.is_validating:
                    return False
                return self._delete_letter()
            else:
                if self.is_validating:
                    return False
                return self._add_letter(key)

        try:
            self._worker = self.spawn(self._run_submission, session, guess)
        except Exception as e:
            game_logger.logger.error(f"Could not start guess pipeline: {e}")
            with self._lock:
                if session.state is SessionState.SUBMITTING:
                    session.reject_submission()
                self.is_validating = False
            self.renderer.show_message(MSG_VALIDATION_ERROR)
            return False
        return True

    def reset(self, session: Session) -> bool:
        """Swaps in a fresh session. Refused while a guess is in flight."""
        with self._lock:
            if self.is_validating:
                return False
            self.session = session
            self.game_over = session.terminal
            return True

    def join(self, timeout: Optional[float] = None) -> None:
        """Waits for the most recent guess pipeline to finish."""
        worker = self._worker
        if isinstance(worker, threading.Thread):
            worker.join(timeout)

    # ------------------------------------------------------------------
    # Row editing (caller holds the lock)
    # ------------------------------------------------------------------

    def _add_letter(self, letter: str) -> bool:
        session = self.session
        if session.cursor_index >= session.word_length:
            return False
        col = session.cursor_index
        if not session.add_letter(letter):
            return False
        self.renderer.update_tile(session.attempt_index, col, letter, None)
        return True

    def _delete_letter(self) -> bool:
        session = self.session
        if not session.delete_letter():
            return False
        self.renderer.update_tile(session.attempt_index, session.cursor_index, "", None)
        return True

    def _begin_submit(self) -> Optional[str]:
        session = self.session
        if session.state is not SessionState.FILLING:
            return None
        guess = session.begin_submit()
        if guess is None:
            self.renderer.show_message(MSG_NOT_ENOUGH_LETTERS)
            return None
        self.is_validating = True
        return guess

    # ------------------------------------------------------------------
    # Guess pipeline (runs on the spawned worker)
    # ------------------------------------------------------------------

    def _run_submission(self, session: Session, guess: str) -> None:
        try:
            self._process_submission(session, guess)
        except Exception as e:
            game_logger.logger.error(f"Guess pipeline failed for '{guess}': {e}")
        finally:
            with self._lock:
                if session.state is SessionState.SUBMITTING:
                    session.reject_submission()
                self.is_validating = False

    def _process_submission(self, session: Session, guess: str) -> None:
        try:
            valid = self._is_valid_word(guess)
        except Exception as e:
            game_logger.logger.warning(f"Word validation failed for '{guess}': {e}")
            self._reject(session, MSG_VALIDATION_ERROR)
            return

        if not valid:
            self._reject(session, MSG_NOT_IN_WORD_LIST)
            return

        with self._lock:
            row = session.attempt_index
            keyboard = session.keyboard()
            statuses = session.accept_submission()

        try:
            self._reveal(row, guess, statuses, keyboard)
        finally:
            self._complete_row(session)

    def _is_valid_word(self, guess: str) -> bool:
        if self.word_validator is None:
            return True
        return bool(self.word_validator.is_valid_word(guess))

    def _reject(self, session: Session, message: str) -> None:
        with self._lock:
            session.reject_submission()
        self.renderer.show_message(message)

    def _reveal(self, row: int, guess: str, statuses, keyboard: Dict[str, LetterStatus]) -> None:
        """Flips the tiles in position order, then waits for the row to settle."""
        elapsed = 0.0
        for col, offset in enumerate(self.schedule.offsets(len(guess))):
            if offset > elapsed:
                self.sleep(offset - elapsed)
                elapsed = offset
            letter, status = guess[col], statuses[col]
            self.renderer.update_tile(row, col, letter, status.value)
            keyboard[letter] = upgrade_key_status(keyboard.get(letter), status)
            self.renderer.update_key(letter, keyboard[letter].value)

        settle = self.schedule.settle_delay(len(guess))
        if settle > 0:
            self.sleep(settle)

    def _complete_row(self, session: Session) -> None:
        with self._lock:
            outcome = session.advance()
            if outcome.terminal:
                self.game_over = True

        if outcome.terminal and self.on_terminal is not None:
            try:
                self.on_terminal(session)
            except Exception as e:
                game_logger.logger.error(f"Terminal handler failed: {e}")
