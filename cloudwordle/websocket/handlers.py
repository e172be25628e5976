"""
WebSocket Event Handlers

Key events and page-lifecycle signals arrive here; the game's renderer
answers through the player's room.
"""

from flask import request
from flask_socketio import emit, join_room, leave_room
from ..services.game_service import get_game_service
from ..utils.decorators import websocket_player_required
from ..utils.game_logger import game_logger
from .renderer import player_room

# socket id -> player id, so a dropped connection can be snapshotted
connected_players = {}


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Final unload: snapshot the game once the player's last connection goes."""
        player_id = connected_players.pop(request.sid, None)
        if player_id is None:
            return
        if player_id in connected_players.values():
            return

        game_service = get_game_service()
        if game_service:
            try:
                game_service.drop_game(player_id)
            except Exception as e:
                game_logger.logger.error(f"Error saving game on disconnect for {player_id}: {e}")

    @socketio.on('join_game')
    @websocket_player_required
    def handle_join_game(data, player_id=None):
        """Join the player's room and send the current game."""
        try:
            game_service = get_game_service()
            if not game_service:
                emit('error', {'error': 'Game service unavailable'})
                return

            join_room(player_room(player_id))
            connected_players[request.sid] = player_id

            already_running = game_service.get_game(player_id) is not None
            game = game_service.start_game(player_id)
            emit('game_state', {
                'success': True,
                'restored': game.restored and not already_running,
                'state': game.state()
            })

        except Exception as e:
            game_logger.logger.error(f"Error joining game for {player_id}: {e}")
            emit('error', {'error': str(e)})

    @socketio.on('leave_game')
    @websocket_player_required
    def handle_leave_game(data, player_id=None):
        leave_room(player_room(player_id))
        connected_players.pop(request.sid, None)

    @socketio.on('key')
    @websocket_player_required
    def handle_key(data, player_id=None):
        """One key press from the on-screen or physical keyboard."""
        game_service = get_game_service()
        game = game_service.get_game(player_id) if game_service else None
        if game is None:
            emit('error', {'error': 'No active game, join first'})
            return

        try:
            game.handle_key(data.get('key'))
        except Exception as e:
            game_logger.logger.error(f"Error handling key for {player_id}: {e}")
            emit('error', {'error': str(e)})

    @socketio.on('visibility_change')
    @websocket_player_required
    def handle_visibility_change(data, player_id=None):
        """Tab hidden or app backgrounded."""
        if not data.get('hidden'):
            return
        game_service = get_game_service()
        if game_service:
            game_service.suspend_game(player_id, 'visibility_hidden')

    @socketio.on('before_unload')
    @websocket_player_required
    def handle_before_unload(data, player_id=None):
        game_service = get_game_service()
        if game_service:
            game_service.suspend_game(player_id, 'before_unload')

    @socketio.on('reset_game')
    @websocket_player_required
    def handle_reset_game(data, player_id=None):
        game_service = get_game_service()
        game = game_service.get_game(player_id) if game_service else None
        if game is None:
            emit('error', {'error': 'No active game, join first'})
            return

        if not game.reset():
            emit('error', {'error': 'A guess is still being processed'})
            return
        emit('game_state', {'success': True, 'restored': False, 'state': game.state()})
