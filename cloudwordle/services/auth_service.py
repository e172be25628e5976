"""
Player Token Service

Anonymous players are identified by a generated player id; the browser
keeps it as a signed JWT so it survives reloads.
"""

import datetime
import re
import uuid
from typing import Any, Dict, Optional
import jwt
from ..errors import TokenError

_PLAYER_ID_PATTERN = re.compile(r'^[0-9a-f]{32}$')


class AuthService:
    """
    Issues and verifies player tokens.
    """

    def __init__(self, jwt_secret: str, expiration_days: int = 365):
        """
        Args:
            jwt_secret: Secret key for HS256 signing
            expiration_days: Token lifetime
        """
        if not jwt_secret:
            raise ValueError("JWT secret is required")
        self.jwt_secret = jwt_secret
        self.expiration_days = expiration_days

    @staticmethod
    def new_player_id() -> str:
        return uuid.uuid4().hex

    @staticmethod
    def is_valid_player_id(player_id: Any) -> bool:
        return isinstance(player_id, str) and bool(_PLAYER_ID_PATTERN.match(player_id))

    def issue_token(self, player_id: Optional[str] = None) -> Dict[str, str]:
        """
        Creates a token for a player, generating a new player id if needed.

        Returns:
            Dictionary with player_id and token
        """
        player_id = player_id or self.new_player_id()
        if not self.is_valid_player_id(player_id):
            raise TokenError("Invalid player id")

        now = datetime.datetime.now(datetime.timezone.utc)
        token_payload = {
            "player_id": player_id,
            "iat": now,
            "exp": now + datetime.timedelta(days=self.expiration_days),
        }
        token = jwt.encode(token_payload, self.jwt_secret, algorithm="HS256")
        return {"player_id": player_id, "token": token}

    def verify_token(self, token: Optional[str]) -> str:
        """
        Decodes a player token.

        Returns:
            The player id

        Raises:
            TokenError: If the token is missing, expired or tampered with
        """
        if not token:
            raise TokenError("Token is required")

        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            raise TokenError("Token has expired")
        except jwt.InvalidTokenError:
            raise TokenError("Invalid token")

        player_id = payload.get("player_id")
        if not self.is_valid_player_id(player_id):
            raise TokenError("Invalid token payload")
        return player_id


# Global service instance
_auth_service = None


def get_auth_service() -> Optional[AuthService]:
    """Get the global auth service instance."""
    return _auth_service


def initialize_auth_service(jwt_secret: str, expiration_days: int = 365) -> AuthService:
    """Initialize the global auth service instance."""
    global _auth_service
    _auth_service = AuthService(jwt_secret, expiration_days)
    return _auth_service
