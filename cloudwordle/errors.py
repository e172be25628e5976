"""
Custom exception classes for the game core.
"""

from typing import Optional


class CloudWordleError(Exception):
    """Base exception for all cloudwordle errors."""
    pass


class InvalidTransitionError(CloudWordleError):
    """Raised when a session transition is requested from the wrong state."""

    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while session is {state}")


class SnapshotError(CloudWordleError):
    """Raised when a persisted session snapshot is malformed or inconsistent."""

    def __init__(self, reason: str, field: Optional[str] = None):
        self.reason = reason
        self.field = field
        message = f"Invalid snapshot: {reason}"
        if field:
            message = f"Invalid snapshot field '{field}': {reason}"
        super().__init__(message)


class TokenError(CloudWordleError):
    """Raised when a player token is missing, expired or invalid."""
    pass
