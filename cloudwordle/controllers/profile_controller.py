"""
Profile Controller

Handles public profile and leaderboard HTTP endpoints.
"""

from dataclasses import asdict
from flask import Blueprint, request, jsonify
from ..services.cloud_service import LEADERBOARD_SORTS, PlayerProfileStore, get_cloud_store
from ..utils.decorators import require_player
from ..utils.game_logger import game_logger

profile_bp = Blueprint('profile', __name__)


def _cloud_unavailable():
    return jsonify({
        'success': False,
        'error': 'Profile service not available'
    }), 503


def _profile_json(profile):
    data = asdict(profile)
    if data.get('created_at') is not None:
        data['created_at'] = data['created_at'].isoformat()
    return data


@profile_bp.route('/profile', methods=['GET'])
@require_player
def get_profile():
    """Get the player's claimed profile."""
    try:
        cloud_store = get_cloud_store()
        if not cloud_store:
            return _cloud_unavailable()

        profile = PlayerProfileStore(cloud_store, request.player_id).get_profile()
        if profile is None:
            return jsonify({'success': False, 'error': 'No profile yet'}), 404

        return jsonify({'success': True, 'profile': _profile_json(profile)})

    except Exception as e:
        game_logger.log_error(request, e, 'get_profile', request.player_id)
        return jsonify({'success': False, 'error': str(e)}), 500


@profile_bp.route('/profile', methods=['POST'])
@require_player
def create_profile():
    """Claim a public profile (display name, email, avatar)."""
    try:
        cloud_store = get_cloud_store()
        if not cloud_store:
            return _cloud_unavailable()

        player_id = request.player_id
        data = request.get_json(silent=True) or {}

        game_logger.log_user_action(request, 'create_profile', player_id)
        result = PlayerProfileStore(cloud_store, player_id).create_profile(
            data.get('display_name', ''),
            data.get('email', ''),
            data.get('avatar_url')
        )

        if not result['success']:
            game_logger.log_server_response(request, 'create_profile', False, result, player_id)
            status = 409 if result['error'] == 'Profile already exists' else 400
            return jsonify(result), status

        response_data = {'success': True, 'profile': _profile_json(result['profile'])}
        game_logger.log_server_response(request, 'create_profile', True, response_data, player_id)
        return jsonify(response_data), 201

    except Exception as e:
        game_logger.log_error(request, e, 'create_profile', request.player_id)
        return jsonify({'success': False, 'error': str(e)}), 500


@profile_bp.route('/profile', methods=['DELETE'])
@require_player
def delete_profile():
    """Return to anonymous mode; stats are kept but leave the leaderboard."""
    try:
        cloud_store = get_cloud_store()
        if not cloud_store:
            return _cloud_unavailable()

        player_id = request.player_id
        game_logger.log_user_action(request, 'delete_profile', player_id)

        if not PlayerProfileStore(cloud_store, player_id).delete_profile():
            return jsonify({'success': False, 'error': 'No profile to delete'}), 404

        return jsonify({'success': True})

    except Exception as e:
        game_logger.log_error(request, e, 'delete_profile', request.player_id)
        return jsonify({'success': False, 'error': str(e)}), 500


@profile_bp.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    """Global leaderboard, sorted by max streak or win rate."""
    try:
        cloud_store = get_cloud_store()
        if not cloud_store:
            return _cloud_unavailable()

        sort_by = request.args.get('sort', 'streak')
        if sort_by not in LEADERBOARD_SORTS:
            return jsonify({
                'success': False,
                'error': 'Invalid sort. Must be "streak" or "win_rate"'
            }), 400

        try:
            limit = min(max(int(request.args.get('limit', 100)), 1), 100)
        except ValueError:
            return jsonify({'success': False, 'error': 'Limit must be a number'}), 400

        entries = cloud_store.leaderboard(limit=limit, sort_by=sort_by)
        leaders = [
            {'rank': rank, **asdict(entry)}
            for rank, entry in enumerate(entries, start=1)
        ]
        return jsonify({'success': True, 'sort': sort_by, 'leaders': leaders})

    except Exception as e:
        game_logger.log_error(request, e, 'leaderboard')
        return jsonify({'success': False, 'error': str(e)}), 500
