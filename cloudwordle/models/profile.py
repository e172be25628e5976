"""
Player Profile Models

Contains the public profile shown on the leaderboard.
"""

from dataclasses import dataclass
from typing import Optional
from datetime import datetime


DEFAULT_AVATAR = "🎮"


@dataclass
class Profile:
    """Claimed player profile."""
    player_id: str
    display_name: str
    email: str
    avatar_url: str = DEFAULT_AVATAR
    is_claimed: bool = True
    created_at: Optional[datetime] = None


@dataclass
class LeaderboardEntry:
    """One leaderboard row."""
    player_id: str
    display_name: str
    avatar_url: str
    games_played: int
    win_rate: int
    current_streak: int
    max_streak: int
