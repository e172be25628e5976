"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Dict, Optional


def get_user_identity(request_obj=None, player_id: Optional[str] = None) -> Dict[str, Optional[str]]:
    """Extract player identity information from a request (or a background task)."""
    if request_obj is None:
        return {'user_ip': 'system', 'player_id': player_id}

    user_ip = getattr(request_obj, 'remote_addr', None) or 'unknown'

    return {
        'user_ip': user_ip,
        'player_id': player_id,
    }


def bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """Pull the token out of an 'Authorization: Bearer <token>' header."""
    if not auth_header or not auth_header.startswith('Bearer '):
        return None
    token = auth_header.split(' ', 1)[1].strip()
    return token or None
