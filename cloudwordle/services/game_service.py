"""
Game Service

Wires each player's session, input gate, persistence bridge and stats
together, and keeps one running game per player.
"""

import random
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence
from ..config.game_settings import WORD_LIST, MAX_ATTEMPTS, WORD_LENGTH, MSG_SESSION_RESTORED
from ..models.game import SessionState
from ..utils.game_logger import game_logger
from .collaborators import Collaborators, Renderer
from .input_gate import InputGate, RevealSchedule
from .persistence import PersistenceBridge
from .session import Session, new_session
from .stats_service import StatsAggregator
from .storage import JsonFileStorage


class PlayerGame:
    """
    Everything one player needs to play.

    Lifecycle:
    - start(): load stats, resume an interrupted session or begin a new one
    - handle_key(): feed key events through the input gate
    - suspend(): snapshot on interruption signals
    - reset(): throw the current session away and start over
    """

    def __init__(self, player_id: str,
                 storage,
                 collaborators: Optional[Collaborators] = None,
                 renderer: Optional[Renderer] = None,
                 words: Sequence[str] = WORD_LIST,
                 chooser: Callable[[List[str]], str] = random.choice,
                 schedule: RevealSchedule = RevealSchedule(),
                 sleep: Optional[Callable[[float], None]] = None,
                 spawn: Optional[Callable] = None,
                 word_length: int = WORD_LENGTH,
                 max_attempts: int = MAX_ATTEMPTS):
        self.player_id = player_id
        self.collaborators = collaborators or Collaborators()
        self.renderer = renderer or Renderer()
        self.words = list(words)
        self.chooser = chooser
        self.word_length = word_length
        self.max_attempts = max_attempts

        self.stats = StatsAggregator(storage, self.collaborators.stats_store)
        self.bridge = PersistenceBridge(storage, word_length=word_length, max_attempts=max_attempts)

        gate_options = {'schedule': schedule}
        if sleep is not None:
            gate_options['sleep'] = sleep
        if spawn is not None:
            gate_options['spawn'] = spawn
        self.gate = InputGate(
            self._new_session(),
            renderer=self.renderer,
            word_validator=self.collaborators.word_validator,
            on_terminal=self._on_terminal,
            **gate_options
        )
        self.restored = False
        self.profile = None

    @property
    def session(self) -> Session:
        return self.gate.session

    def _new_session(self) -> Session:
        return new_session(self.words, self.chooser,
                           word_length=self.word_length, max_attempts=self.max_attempts)

    def start(self) -> bool:
        """
        Loads stats and picks up where the player left off.

        Returns:
            bool: True if an interrupted session was restored
        """
        self.stats.load()
        self.profile = self._load_profile()

        session = self.bridge.restore()
        self.restored = session is not None
        if session is None:
            session = self._new_session()
        self.gate.reset(session)

        self.renderer.render_board(session.board(), session.keyboard())
        if self.restored:
            self.renderer.show_message(MSG_SESSION_RESTORED)
            game_logger.log_game_event(
                self.player_id, 'session_restored',
                attempt_index=session.attempt_index, cursor_index=session.cursor_index
            )
        return self.restored

    def _load_profile(self):
        store = self.collaborators.profile_store
        if store is None:
            return None
        try:
            return store.get_profile()
        except Exception as e:
            game_logger.logger.warning(f"Could not load profile for {self.player_id}: {e}")
            return None

    def handle_key(self, key) -> bool:
        return self.gate.handle_key(key)

    def suspend(self, reason: str = "unload") -> bool:
        """Snapshots the session on an interruption signal."""
        saved = self.bridge.snapshot(self.session)
        if saved:
            game_logger.log_game_event(self.player_id, 'session_snapshot', reason=reason)
        return saved

    def reset(self) -> bool:
        """
        Starts a brand-new session (new target, empty board).

        Returns:
            bool: False if a guess is still in flight
        """
        session = self._new_session()
        if not self.gate.reset(session):
            return False
        self.bridge.clear()
        self.renderer.render_board(session.board(), session.keyboard())
        game_logger.log_game_event(self.player_id, 'game_reset')
        return True

    def state(self) -> Dict:
        return {
            **self.session.to_dict(),
            'is_validating': self.gate.is_validating,
            'stats': {**self.stats.stats.to_dict(), 'win_rate': self.stats.stats.win_rate},
            'profile': {
                'display_name': self.profile.display_name,
                'avatar_url': self.profile.avatar_url,
            } if self.profile else None,
        }

    def _on_terminal(self, session: Session) -> None:
        """Stats, snapshot cleanup and the end-of-game modal, in that order."""
        attempts = session.attempts_used
        if session.state is SessionState.WON:
            self.stats.record_win(session.target_word, attempts)
            title, message = "You Won!", f"Great job! The word was {session.target_word}"
            event = 'game_won'
        else:
            self.stats.record_loss(session.target_word, attempts)
            title, message = "Game Over", f"The word was {session.target_word}"
            event = 'game_lost'

        self.bridge.clear()
        game_logger.log_game_event(
            self.player_id, event,
            target_word=session.target_word, attempts=attempts,
            current_streak=self.stats.stats.current_streak
        )
        self.renderer.show_modal(title, message)


class GameService:
    """
    Registry of running games, one per player.

    Each player gets local storage from storage_factory(player_id) and a
    renderer from renderer_factory(player_id).
    """

    def __init__(self,
                 storage_factory: Callable,
                 collaborators_factory: Optional[Callable[[str], Collaborators]] = None,
                 renderer_factory: Optional[Callable[[str], Renderer]] = None,
                 **game_options):
        self.storage_factory = storage_factory
        self.collaborators_factory = collaborators_factory or (lambda player_id: Collaborators())
        self.renderer_factory = renderer_factory or (lambda player_id: Renderer())
        self.game_options = game_options
        self.games: Dict[str, PlayerGame] = {}
        self._lock = threading.Lock()

    def get_game(self, player_id: str) -> Optional[PlayerGame]:
        return self.games.get(player_id)

    def start_game(self, player_id: str) -> PlayerGame:
        """
        Returns the player's running game, starting one if needed.

        A player coming back after the server dropped their game resumes from
        the snapshot in local storage. The game is only registered once
        start() has finished, so no key can reach it before its session is
        restored.
        """
        with self._lock:
            game = self.games.get(player_id)
            if game is not None:
                return game
            game = PlayerGame(
                player_id,
                self.storage_factory(player_id),
                collaborators=self.collaborators_factory(player_id),
                renderer=self.renderer_factory(player_id),
                **self.game_options
            )
            game.start()
            self.games[player_id] = game
            return game

    def suspend_game(self, player_id: str, reason: str = "unload") -> bool:
        game = self.games.get(player_id)
        if game is None:
            return False
        return game.suspend(reason)

    def drop_game(self, player_id: str) -> bool:
        """Snapshots and forgets a player's game (final unload)."""
        with self._lock:
            game = self.games.pop(player_id, None)
        if game is None:
            return False
        game.suspend("disconnect")
        return True


def json_file_storage_factory(storage_dir: str) -> Callable:
    """Storage factory writing one JSON document per player under storage_dir."""
    root = Path(storage_dir)

    def factory(player_id: str):
        return JsonFileStorage(root / f"{player_id}.json")

    return factory


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(storage_factory: Callable, **kwargs) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(storage_factory, **kwargs)
    return _game_service
