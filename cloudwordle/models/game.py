"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass
from enum import Enum


class LetterStatus(Enum):
    """Per-letter evaluation of a guess; values double as tile CSS classes."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"


class SessionState(Enum):
    """States of the game-session state machine."""
    FILLING = "filling"
    SUBMITTING = "submitting"
    ROW_COMPLETE = "row_complete"
    WON = "won"
    LOST = "lost"

    @property
    def terminal(self) -> bool:
        return self in (SessionState.WON, SessionState.LOST)


@dataclass(frozen=True)
class Tile:
    """One board cell as the renderer sees it."""
    row: int
    col: int
    content: str = ""
    status_class: str = ""

    def to_dict(self) -> dict:
        return {
            "row": self.row,
            "col": self.col,
            "content": self.content,
            "status_class": self.status_class,
        }
