"""
Player Statistics Model
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional


@dataclass
class Stats:
    """Cumulative play statistics; win rate is always derived from the counts."""
    games_played: int = 0
    games_won: int = 0
    current_streak: int = 0
    max_streak: int = 0

    @property
    def win_rate(self) -> int:
        if self.games_played <= 0:
            return 0
        # Halves round up
        return int(100 * self.games_won / self.games_played + 0.5)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Stats"]:
        """
        Build stats from a stored document, ignoring unknown keys.

        Returns None when the document is missing or any counter is not a
        non-negative integer.
        """
        if not isinstance(data, dict):
            return None

        values = {}
        for field in fields(cls):
            value = data.get(field.name, 0)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                return None
            values[field.name] = value
        return cls(**values)
