"""
Handlers Module for the lobby session engine.

Contains all web layer handlers (Socket.IO and API) with no lobby logic.
Handlers coordinate between the transport and the lobby module.
"""

from .socket_handlers import register_socket_handlers
from .api_handlers import register_api_handlers
from .gateway import BroadcastGateway

__all__ = [
    'register_socket_handlers',
    'register_api_handlers',
    'BroadcastGateway'
]
