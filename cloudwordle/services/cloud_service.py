"""
Cloud Store

MongoDB-backed persistence for player stats, game history, public profiles
and the global leaderboard.
"""

import datetime
import re
from typing import Any, Dict, List, Optional
from pymongo import DESCENDING
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi
from ..models.profile import DEFAULT_AVATAR, LeaderboardEntry, Profile
from ..models.stats import Stats
from ..utils.game_logger import game_logger

_EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

LEADERBOARD_SORTS = {
    "streak": "max_streak",
    "win_rate": "win_rate",
}


class CloudStore:
    """
    Cloud persistence shared by all players.

    Collections:
    - players: profile documents keyed by player_id
    - stats: one stats document per player
    - game_history: one document per finished game
    """

    def __init__(self, mongo_uri: Optional[str] = None, db_name: str = "cloud_wordle", client=None):
        """
        Initialize the store with a MongoDB connection.

        Args:
            mongo_uri: MongoDB connection string
            db_name: Database to use
            client: Ready-made client (takes precedence over mongo_uri)
        """
        if client is None:
            if not mongo_uri:
                raise ValueError("MongoDB URI is required")
            client = MongoClient(mongo_uri, server_api=ServerApi('1'))

            # Test connection
            try:
                client.admin.command('ping')
                game_logger.logger.info("Successfully connected to MongoDB")
            except Exception as e:
                game_logger.logger.error(f"MongoDB connection error: {e}")
                raise

        self.client = client
        self.db = client[db_name]
        self.players_collection = self.db.players
        self.stats_collection = self.db.stats
        self.history_collection = self.db.game_history

        self.players_collection.create_index("player_id", unique=True)
        self.stats_collection.create_index("player_id", unique=True)
        self.stats_collection.create_index([("max_streak", DESCENDING)])
        self.history_collection.create_index("player_id")

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def load_stats(self, player_id: str) -> Optional[Stats]:
        document = self.stats_collection.find_one({"player_id": player_id})
        if not document:
            return None
        return Stats.from_dict(document)

    def save_stats(self, player_id: str, stats: Stats,
                   target_word: Optional[str] = None,
                   won: Optional[bool] = None,
                   attempts: Optional[int] = None) -> bool:
        """
        Upserts a player's stats and, when game details are given, appends
        the finished game to the history.
        """
        now = datetime.datetime.now(datetime.timezone.utc)
        self.stats_collection.update_one(
            {"player_id": player_id},
            {"$set": {
                **stats.to_dict(),
                "win_rate": stats.win_rate,
                "updated_at": now,
            }},
            upsert=True
        )

        if target_word is not None and won is not None:
            self.history_collection.insert_one({
                "player_id": player_id,
                "target_word": target_word,
                "won": won,
                "attempts": attempts,
                "played_at": now,
            })
        return True

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def create_profile(self, player_id: str, display_name: str, email: str,
                       avatar_url: Optional[str] = None) -> Dict[str, Any]:
        """
        Claims a public profile for a player.

        Returns:
            Dictionary with success status and profile or error
        """
        display_name = (display_name or "").strip()
        email = (email or "").strip().lower()
        avatar_url = (avatar_url or "").strip() or DEFAULT_AVATAR

        if not display_name or not email:
            return {"success": False, "error": "Display name and email are required"}
        if len(display_name) > 40:
            return {"success": False, "error": "Display name must be at most 40 characters"}
        if not _EMAIL_PATTERN.match(email):
            return {"success": False, "error": "Email address is not valid"}

        existing = self.players_collection.find_one({"player_id": player_id})
        if existing and existing.get("is_claimed"):
            return {"success": False, "error": "Profile already exists"}

        now = datetime.datetime.now(datetime.timezone.utc)
        self.players_collection.update_one(
            {"player_id": player_id},
            {"$set": {
                "display_name": display_name,
                "email": email,
                "avatar_url": avatar_url,
                "is_claimed": True,
                "created_at": now,
            }},
            upsert=True
        )
        profile = Profile(player_id, display_name, email, avatar_url, True, now)
        return {"success": True, "profile": profile}

    def get_profile(self, player_id: str) -> Optional[Profile]:
        document = self.players_collection.find_one({"player_id": player_id})
        if not document or not document.get("is_claimed"):
            return None
        return Profile(
            player_id=player_id,
            display_name=document.get("display_name", ""),
            email=document.get("email", ""),
            avatar_url=document.get("avatar_url") or DEFAULT_AVATAR,
            is_claimed=True,
            created_at=document.get("created_at"),
        )

    def delete_profile(self, player_id: str) -> bool:
        """Returns the player to anonymous mode; their stats are kept."""
        result = self.players_collection.update_one(
            {"player_id": player_id, "is_claimed": True},
            {"$set": {"is_claimed": False},
             "$unset": {"display_name": "", "email": "", "avatar_url": ""}}
        )
        return result.modified_count > 0

    # ------------------------------------------------------------------
    # Leaderboard
    # ------------------------------------------------------------------

    def leaderboard(self, limit: int = 100, sort_by: str = "streak") -> List[LeaderboardEntry]:
        """
        Ranks players with a claimed profile.

        Args:
            limit: Maximum number of rows
            sort_by: 'streak' (max streak) or 'win_rate'
        """
        if sort_by not in LEADERBOARD_SORTS:
            raise ValueError(f"Unknown leaderboard sort '{sort_by}'")

        profiles = {
            document["player_id"]: document
            for document in self.players_collection.find({"is_claimed": True})
        }
        if not profiles:
            return []

        entries = []
        for document in self.stats_collection.find({"player_id": {"$in": list(profiles)}}):
            stats = Stats.from_dict(document)
            if stats is None or stats.games_played == 0:
                continue
            profile = profiles[document["player_id"]]
            entries.append(LeaderboardEntry(
                player_id=document["player_id"],
                display_name=profile.get("display_name", ""),
                avatar_url=profile.get("avatar_url") or DEFAULT_AVATAR,
                games_played=stats.games_played,
                win_rate=stats.win_rate,
                current_streak=stats.current_streak,
                max_streak=stats.max_streak,
            ))

        key = LEADERBOARD_SORTS[sort_by]
        entries.sort(key=lambda entry: (getattr(entry, key), entry.games_played), reverse=True)
        return entries[:max(limit, 0)]


class PlayerStatsStore:
    """Binds a player id to the cloud store's stats operations."""

    def __init__(self, cloud_store: CloudStore, player_id: str):
        self.cloud_store = cloud_store
        self.player_id = player_id

    def load_stats(self) -> Optional[Stats]:
        return self.cloud_store.load_stats(self.player_id)

    def save_stats(self, stats: Stats, target_word=None, won=None, attempts=None) -> bool:
        return self.cloud_store.save_stats(self.player_id, stats, target_word, won, attempts)


class PlayerProfileStore:
    """Binds a player id to the cloud store's profile operations."""

    def __init__(self, cloud_store: CloudStore, player_id: str):
        self.cloud_store = cloud_store
        self.player_id = player_id

    def get_profile(self) -> Optional[Profile]:
        return self.cloud_store.get_profile(self.player_id)

    def create_profile(self, display_name: str, email: str, avatar_url: Optional[str] = None) -> Dict[str, Any]:
        return self.cloud_store.create_profile(self.player_id, display_name, email, avatar_url)

    def delete_profile(self) -> bool:
        return self.cloud_store.delete_profile(self.player_id)


# Global service instance
_cloud_store = None


def get_cloud_store() -> Optional[CloudStore]:
    """Get the global cloud store instance (None when no database is configured)."""
    return _cloud_store


def initialize_cloud_store(mongo_uri: Optional[str], db_name: str = "cloud_wordle", client=None) -> Optional[CloudStore]:
    """
    Initialize the global cloud store.

    Gameplay works without a database, so a failed connection leaves the
    store unset instead of stopping the server.
    """
    global _cloud_store
    try:
        _cloud_store = CloudStore(mongo_uri, db_name, client=client)
    except Exception as e:
        game_logger.logger.error(f"Cloud store unavailable, running local-only: {e}")
        _cloud_store = None
    return _cloud_store
