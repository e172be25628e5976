"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import LetterStatus, SessionState, Tile
from .stats import Stats
from .profile import Profile, LeaderboardEntry

__all__ = ['LetterStatus', 'SessionState', 'Tile', 'Stats', 'Profile', 'LeaderboardEntry']
