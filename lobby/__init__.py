"""
Lobby Module.

Contains the lobby session engine: the vote-ordered video queue,
membership and host authority, per-lobby sessions, the registry that
owns them, and the playback sync relay.
"""

from .models import Member, VideoEntry
from .results import ErrorCode, LobbyError, LobbyResult, Notification
from .video_queue import VideoQueue
from .membership import Membership
from .session import LobbySession
from .manager import LobbyRegistry
from .playback import PlaybackSyncCoordinator

__all__ = [
    # Data models
    'Member',
    'VideoEntry',
    'ErrorCode',
    'LobbyError',
    'LobbyResult',
    'Notification',
    
    # Core
    'VideoQueue',
    'Membership',
    'LobbySession',
    'LobbyRegistry',
    'PlaybackSyncCoordinator'
]
