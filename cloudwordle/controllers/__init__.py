"""
Controllers Package

HTTP blueprints for the game session, stats, profiles and leaderboard.
"""

from .game_controller import game_bp
from .profile_controller import profile_bp

__all__ = ['game_bp', 'profile_bp']
