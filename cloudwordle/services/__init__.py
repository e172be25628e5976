"""
Services Package

Contains the game core (scoring, session, input gate, persistence, stats)
and the adapters it talks to.
"""

from .auth_service import AuthService, get_auth_service
from .cloud_service import CloudStore, get_cloud_store
from .collaborators import Collaborators, Renderer
from .game_service import GameService, PlayerGame, get_game_service
from .input_gate import InputGate, RevealSchedule
from .persistence import PersistenceBridge
from .scoring import score
from .session import Session
from .stats_service import StatsAggregator

__all__ = [
    'AuthService', 'get_auth_service',
    'CloudStore', 'get_cloud_store',
    'Collaborators', 'Renderer',
    'GameService', 'PlayerGame', 'get_game_service',
    'InputGate', 'RevealSchedule',
    'PersistenceBridge',
    'score',
    'Session',
    'StatsAggregator',
]
