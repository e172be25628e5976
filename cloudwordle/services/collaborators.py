"""
Collaborator Interfaces

The game core calls out to these; each one is optional and injected at
construction, so a missing collaborator is configuration rather than an
error.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class Collaborators:
    """
    Optional services a player's game talks to.

    - word_validator: is_valid_word(word) -> bool, may raise
    - stats_store: load_stats() -> Stats | dict | None,
      save_stats(stats, target_word=None, won=None, attempts=None)
    - profile_store: get_profile(), create_profile(display_name, email, avatar_url),
      delete_profile()
    """
    word_validator: Optional[Any] = None
    stats_store: Optional[Any] = None
    profile_store: Optional[Any] = None


class Renderer:
    """
    One-way projection of the game onto the client.

    The base class draws nothing; SocketRenderer pushes events to the browser.
    """

    def update_tile(self, row: int, col: int, letter: str, status: Optional[str] = None) -> None:
        pass

    def update_key(self, letter: str, status: str) -> None:
        pass

    def show_message(self, text: str) -> None:
        pass

    def show_modal(self, title: str, message: str) -> None:
        pass

    def render_board(self, board, keyboard) -> None:
        pass
