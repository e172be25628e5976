"""
Authentication Decorators

Contains decorators that resolve the player id for HTTP and WebSocket handlers.
"""

from functools import wraps
from flask import request, jsonify
from flask_socketio import emit
from ..errors import TokenError
from .helpers import bearer_token


def require_player(f):
    """
    Decorator to require a player token on HTTP endpoints.

    Sets request.player_id for the wrapped view.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.auth_service import get_auth_service

        auth_service = get_auth_service()
        if not auth_service:
            return jsonify({
                'success': False,
                'error': 'Authentication service unavailable'
            }), 503

        token = bearer_token(request.headers.get('Authorization'))
        if not token:
            return jsonify({
                'success': False,
                'error': 'Authorization token required'
            }), 401

        try:
            request.player_id = auth_service.verify_token(token)
        except TokenError as e:
            return jsonify({
                'success': False,
                'error': str(e)
            }), 401

        return f(*args, **kwargs)

    return decorated_function


def websocket_player_required(f):
    """Decorator for WebSocket events; passes player_id to the handler."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.auth_service import get_auth_service

        auth_service = get_auth_service()
        data = args[0] if args else None
        if not auth_service or not isinstance(data, dict) or 'token' not in data:
            emit('error', {'error': 'Authentication required'})
            return

        try:
            kwargs['player_id'] = auth_service.verify_token(data['token'])
        except TokenError as e:
            emit('error', {'error': str(e)})
            return

        return f(*args, **kwargs)

    return decorated_function
