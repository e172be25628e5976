"""
Stats Aggregator

Derives cumulative play statistics from completed sessions and keeps the
local snapshot and the cloud copy up to date.
"""

from typing import Optional
from ..config.game_settings import STATS_KEY
from ..models.stats import Stats
from ..utils.game_logger import game_logger


class StatsAggregator:
    """
    Owns one player's Stats.

    The local write always happens first; the remote write is best-effort
    and its failure never undoes the local one.
    """

    def __init__(self, storage, stats_store=None):
        self.storage = storage
        self.stats_store = stats_store
        self.stats = Stats()

    def load(self) -> Stats:
        """
        Loads stats from the best available source.

        Order: cloud store, local snapshot, defaults.
        """
        if self.stats_store is not None:
            try:
                remote = self.stats_store.load_stats()
            except Exception as e:
                game_logger.logger.warning(f"Cloud stats unavailable, using local stats: {e}")
                remote = None
            if isinstance(remote, dict):
                remote = Stats.from_dict(remote)
            if isinstance(remote, Stats):
                self.stats = remote
                return self.stats

        try:
            local = Stats.from_dict(self.storage.get(STATS_KEY))
        except Exception as e:
            game_logger.logger.error(f"Failed to read local stats: {e}")
            local = None
        self.stats = local or Stats()
        return self.stats

    def record_win(self, target_word: Optional[str] = None, attempts: Optional[int] = None) -> Stats:
        self.stats.games_played += 1
        self.stats.games_won += 1
        self.stats.current_streak += 1
        self.stats.max_streak = max(self.stats.max_streak, self.stats.current_streak)
        self._persist(target_word, True, attempts)
        return self.stats

    def record_loss(self, target_word: Optional[str] = None, attempts: Optional[int] = None) -> Stats:
        self.stats.games_played += 1
        self.stats.current_streak = 0
        self._persist(target_word, False, attempts)
        return self.stats

    def _persist(self, target_word: Optional[str], won: bool, attempts: Optional[int]) -> None:
        try:
            self.storage.set(STATS_KEY, self.stats.to_dict())
        except Exception as e:
            game_logger.logger.error(f"Failed to save stats locally: {e}")

        if self.stats_store is None:
            return
        try:
            self.stats_store.save_stats(self.stats, target_word=target_word, won=won, attempts=attempts)
        except Exception as e:
            game_logger.logger.warning(f"Failed to save stats to the cloud: {e}")
