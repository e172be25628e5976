"""
WebSocket Package

Socket.IO event handlers and the renderer that pushes board updates.
"""

from .handlers import register_websocket_handlers
from .renderer import SocketRenderer, player_room

__all__ = ['register_websocket_handlers', 'SocketRenderer', 'player_room']
