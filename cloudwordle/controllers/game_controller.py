"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..errors import TokenError
from ..services.auth_service import get_auth_service
from ..services.cloud_service import get_cloud_store
from ..services.game_service import get_game_service
from ..services.persistence import PersistenceBridge
from ..utils.decorators import require_player
from ..utils.game_logger import game_logger
from ..utils.helpers import bearer_token

game_bp = Blueprint('game', __name__)


def _service_unavailable(name):
    return jsonify({
        'success': False,
        'error': f'{name} service unavailable'
    }), 503


@game_bp.route('/session', methods=['POST'])
def start_session():
    """Start or resume the player's game; anonymous callers get a new player token."""
    try:
        game_service = get_game_service()
        auth_service = get_auth_service()
        if not game_service or not auth_service:
            return _service_unavailable('Game')

        token = bearer_token(request.headers.get('Authorization'))
        if token:
            try:
                player_id = auth_service.verify_token(token)
            except TokenError as e:
                error_response = {'success': False, 'error': str(e)}
                game_logger.log_server_response(request, 'start_session', False, error_response)
                return jsonify(error_response), 401
            issued = {'player_id': player_id, 'token': token}
        else:
            issued = auth_service.issue_token()
            player_id = issued['player_id']

        game_logger.log_user_action(request, 'start_session', player_id, new_player=not token)

        already_running = game_service.get_game(player_id) is not None
        game = game_service.start_game(player_id)

        response_data = {
            'success': True,
            'player_id': player_id,
            'token': issued['token'],
            'restored': game.restored and not already_running,
            'state': game.state()
        }
        game_logger.log_server_response(request, 'start_session', True, response_data, player_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'start_session')
        error_response = {'success': False, 'error': str(e)}
        game_logger.log_server_response(request, 'start_session', False, error_response)
        return jsonify(error_response), 500


@game_bp.route('/session/state', methods=['GET'])
@require_player
def get_state():
    """Get the current game state."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('Game')

        player_id = request.player_id
        game = game_service.get_game(player_id)
        if game is None:
            error_response = {'success': False, 'error': 'No active game, start a session first'}
            game_logger.log_server_response(request, 'get_state', False, error_response, player_id)
            return jsonify(error_response), 404

        response_data = {'success': True, 'state': game.state()}
        game_logger.log_server_response(request, 'get_state', True, response_data, player_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_state', getattr(request, 'player_id', None))
        return jsonify({'success': False, 'error': str(e)}), 500


@game_bp.route('/session/key', methods=['POST'])
@require_player
def press_key():
    """Feed one key event (letter, ENTER or ⌫) to the player's game."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('Game')

        player_id = request.player_id
        data = request.get_json(silent=True) or {}
        if 'key' not in data:
            error_response = {'success': False, 'error': 'Key is required'}
            game_logger.log_server_response(request, 'key', False, error_response, player_id)
            return jsonify(error_response), 400

        game = game_service.get_game(player_id)
        if game is None:
            error_response = {'success': False, 'error': 'No active game, start a session first'}
            game_logger.log_server_response(request, 'key', False, error_response, player_id)
            return jsonify(error_response), 404

        game_logger.log_user_action(request, 'key', player_id, key=data['key'])
        accepted = game.handle_key(data['key'])

        response_data = {'success': True, 'accepted': accepted, 'state': game.state()}
        game_logger.log_server_response(request, 'key', True, response_data, player_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'key', getattr(request, 'player_id', None))
        return jsonify({'success': False, 'error': str(e)}), 500


@game_bp.route('/session/suspend', methods=['POST'])
@require_player
def suspend_session():
    """
    Interruption beacon (visibility loss, before unload, unload).

    'unload' is the final signal: the game is snapshotted and released.
    """
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('Game')

        player_id = request.player_id
        data = request.get_json(silent=True) or {}
        reason = data.get('reason', 'before_unload')
        if reason not in PersistenceBridge.SNAPSHOT_TRIGGERS:
            error_response = {
                'success': False,
                'error': f"Reason must be one of {', '.join(PersistenceBridge.SNAPSHOT_TRIGGERS)}"
            }
            return jsonify(error_response), 400

        game_logger.log_user_action(request, 'suspend', player_id, reason=reason)
        if reason in ('unload', 'disconnect'):
            saved = game_service.drop_game(player_id)
        else:
            saved = game_service.suspend_game(player_id, reason)

        return jsonify({'success': True, 'saved': saved})

    except Exception as e:
        game_logger.log_error(request, e, 'suspend', getattr(request, 'player_id', None))
        return jsonify({'success': False, 'error': str(e)}), 500


@game_bp.route('/session/reset', methods=['POST'])
@require_player
def reset_session():
    """Throw away the current game and start a new one."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('Game')

        player_id = request.player_id
        game_logger.log_user_action(request, 'reset', player_id)

        game = game_service.start_game(player_id)
        if not game.reset():
            error_response = {'success': False, 'error': 'A guess is still being processed'}
            game_logger.log_server_response(request, 'reset', False, error_response, player_id)
            return jsonify(error_response), 409

        response_data = {'success': True, 'state': game.state()}
        game_logger.log_server_response(request, 'reset', True, response_data, player_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'reset', getattr(request, 'player_id', None))
        return jsonify({'success': False, 'error': str(e)}), 500


@game_bp.route('/stats', methods=['GET'])
@require_player
def get_stats():
    """Get the player's statistics."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('Game')

        player_id = request.player_id
        game = game_service.start_game(player_id)
        stats = game.stats.stats

        return jsonify({
            'success': True,
            'stats': {**stats.to_dict(), 'win_rate': stats.win_rate}
        })

    except Exception as e:
        game_logger.log_error(request, e, 'get_stats', getattr(request, 'player_id', None))
        return jsonify({'success': False, 'error': str(e)}), 500


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    game_service = get_game_service()

    response_data = {
        'status': 'healthy',
        'active_games': len(game_service.games) if game_service else 0,
        'auth_available': get_auth_service() is not None,
        'cloud_available': get_cloud_store() is not None,
        'log_stats': game_logger.get_log_stats(),
    }
    return jsonify(response_data)
