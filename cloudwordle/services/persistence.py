"""
Persistence Bridge

Makes an in-progress session survive page reloads, tab switches and
backgrounding. A snapshot is written on every interruption signal and read
once when the player comes back.
"""

import time
from typing import Callable, Optional
from ..config.game_settings import ACTIVE_GAME_KEY, GAME_STATE_KEY, MAX_ATTEMPTS, WORD_LENGTH
from ..errors import SnapshotError
from ..utils.game_logger import game_logger
from .session import Session


class PersistenceBridge:
    """
    Writes and restores session snapshots in local durable storage.

    The snapshot lives under GAME_STATE_KEY and the resumable-session marker
    under ACTIVE_GAME_KEY; the two are always written and cleared together.
    """

    # Signals the client sends when the page may go away
    SNAPSHOT_TRIGGERS = ("before_unload", "visibility_hidden", "unload", "disconnect")

    def __init__(self, storage, clock: Callable[[], float] = time.time,
                 word_length: int = WORD_LENGTH,
                 max_attempts: int = MAX_ATTEMPTS):
        self.storage = storage
        self.clock = clock
        self.word_length = word_length
        self.max_attempts = max_attempts

    def snapshot(self, session: Session) -> bool:
        """
        Saves the session if it is worth resuming.

        Returns:
            bool: True if a snapshot was written
        """
        if not session.started or session.terminal:
            return False

        try:
            self.storage.set(GAME_STATE_KEY, session.to_snapshot(self.clock()))
            self.storage.set(ACTIVE_GAME_KEY, True)
        except Exception as e:
            game_logger.logger.error(f"Failed to write session snapshot: {e}")
            return False
        return True

    def restore(self) -> Optional[Session]:
        """
        Rebuilds the interrupted session, if there is one.

        Any inconsistency (marker without snapshot, snapshot without marker,
        malformed snapshot) discards both and reports no resumable session.
        """
        try:
            marker = self.storage.get(ACTIVE_GAME_KEY)
            data = self.storage.get(GAME_STATE_KEY)
        except Exception as e:
            game_logger.logger.error(f"Failed to read session snapshot: {e}")
            return None

        if marker is not True or data is None:
            if marker is not None or data is not None:
                game_logger.logger.warning("Discarding incomplete session snapshot")
                self.clear()
            return None

        try:
            session = Session.from_snapshot(
                data, word_length=self.word_length, max_attempts=self.max_attempts
            )
        except SnapshotError as e:
            game_logger.logger.warning(f"Discarding corrupt session snapshot: {e}")
            self.clear()
            return None

        return session

    def clear(self) -> None:
        """Removes snapshot and marker together."""
        for key in (GAME_STATE_KEY, ACTIVE_GAME_KEY):
            try:
                self.storage.remove(key)
            except Exception as e:
                game_logger.logger.error(f"Failed to clear '{key}' from local storage: {e}")
