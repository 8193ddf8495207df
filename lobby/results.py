"""
Operation results for lobby sessions.

Every session operation returns a LobbyResult: the outcome for the
requester plus the notifications the dispatcher must hand to the
broadcast gateway. Errors are only ever reported to the requester.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

class ErrorCode(Enum):
    """Error taxonomy with the default user-facing message."""
    LOBBY_NOT_FOUND = "Lobby not found"
    BANNED = "You are banned from this lobby"
    UNAUTHORIZED = "Only the host can do that"
    INVALID_TARGET = "Invalid target user"
    INVALID_INDEX = "Invalid queue position"
    INVALID_URL = "Invalid YouTube URL"
    DUPLICATE_VIDEO = "Video already in queue"
    EMPTY_QUEUE = "Queue is empty"
    EMPTY_MESSAGE = "Message cannot be empty"

@dataclass
class LobbyError:
    """An error kind plus the message shown to the requester."""
    code: ErrorCode
    message: str
    
    @classmethod
    def of(cls, code: ErrorCode, message: Optional[str] = None) -> 'LobbyError':
        return cls(code=code, message=message or code.value)

@dataclass
class Notification:
    """
    One outbound event.
    
    Room notifications go to every connection in the lobby room except
    skip_sid; addressed notifications go to the single connection `to`.
    A payload of None means the event carries no arguments.
    """
    event: str
    payload: Optional[Any] = None
    room: Optional[str] = None
    to: Optional[str] = None
    skip_sid: Optional[str] = None
    
    @property
    def is_addressed(self) -> bool:
        return self.to is not None

def to_room(lobby_id: str, event: str, payload: Optional[Any] = None,
            skip_sid: Optional[str] = None) -> Notification:
    return Notification(event=event, payload=payload, room=lobby_id, skip_sid=skip_sid)

def to_connection(connection_id: str, event: str, payload: Optional[Any] = None) -> Notification:
    return Notification(event=event, payload=payload, to=connection_id)

@dataclass
class LobbyResult:
    """Outcome of a session operation."""
    success: bool
    data: Optional[Any] = None
    error: Optional[LobbyError] = None
    noop: bool = False
    reason: Optional[ErrorCode] = None
    notifications: List[Notification] = field(default_factory=list)
    removed_connections: List[str] = field(default_factory=list)
    
    @classmethod
    def ok(cls, data: Any = None, notifications: Optional[List[Notification]] = None,
           removed_connections: Optional[List[str]] = None) -> 'LobbyResult':
        return cls(
            success=True,
            data=data,
            notifications=notifications or [],
            removed_connections=removed_connections or []
        )
    
    @classmethod
    def fail(cls, code: ErrorCode, message: Optional[str] = None) -> 'LobbyResult':
        return cls(success=False, error=LobbyError.of(code, message))
    
    @classmethod
    def nothing(cls, reason: Optional[ErrorCode] = None) -> 'LobbyResult':
        """Benign no-op: no state change, no reply, no broadcast."""
        return cls(success=False, noop=True, reason=reason)
    
    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None
    
    def to_reply(self) -> Optional[Dict[str, Any]]:
        """
        Map the result to the acknowledgement sent to the requester.
        
        Returns:
            {'error': message} on failure, data (or {'success': True}) on
            success, None for a benign no-op
        """
        if self.noop:
            return None
        if self.error:
            return {'error': self.error.message}
        if isinstance(self.data, dict):
            return self.data
        return {'success': True}
