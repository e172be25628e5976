"""
Socket Renderer

Projects game updates onto the player's browser as Socket.IO events.
Every event goes to the player's room, so all of the player's open
connections stay in sync.
"""

from typing import Optional
from ..services.collaborators import Renderer


def player_room(player_id: str) -> str:
    return f"player_{player_id}"


class SocketRenderer(Renderer):
    """Emits renderer events to one player's room."""

    def __init__(self, socketio, player_id: str):
        self.socketio = socketio
        self.room = player_room(player_id)

    def _emit(self, event: str, payload: dict) -> None:
        self.socketio.emit(event, payload, to=self.room)

    def update_tile(self, row: int, col: int, letter: str, status: Optional[str] = None) -> None:
        self._emit('tile_update', {'row': row, 'col': col, 'letter': letter, 'status': status})

    def update_key(self, letter: str, status: str) -> None:
        self._emit('key_update', {'letter': letter, 'status': status})

    def show_message(self, text: str) -> None:
        self._emit('game_message', {'text': text})

    def show_modal(self, title: str, message: str) -> None:
        self._emit('modal', {'title': title, 'message': message})

    def render_board(self, board, keyboard) -> None:
        self._emit('board_state', {
            'board': [[tile.to_dict() for tile in row] for row in board],
            'keyboard': {letter: status.value for letter, status in keyboard.items()},
        })
