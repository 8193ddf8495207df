"""
Broadcast gateway over Flask-SocketIO.

Turns the notifications produced by lobby sessions into Socket.IO
emits, and keeps transport rooms in step with lobby membership.
Contains no lobby logic.
"""

import logging
from typing import Iterable
from flask_socketio import join_room, leave_room
from lobby.results import Notification

logger = logging.getLogger(__name__)

class BroadcastGateway:
    """Delivers lobby notifications through a SocketIO instance."""
    
    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace
    
    def deliver(self, notifications: Iterable[Notification]) -> None:
        """
        Emit notifications in order.
        
        Addressed notifications to a connection that has gone away are
        dropped by the transport without error.
        """
        for notification in notifications:
            target = notification.to if notification.is_addressed else notification.room
            args = () if notification.payload is None else (notification.payload,)
            self.socketio.emit(
                notification.event,
                *args,
                to=target,
                skip_sid=notification.skip_sid,
                namespace=self.namespace
            )
            logger.debug(f"Emitted {notification.event} to {target}")
    
    def enter(self, lobby_id: str, connection_id: str) -> None:
        """Put a connection in a lobby's transport room."""
        join_room(lobby_id, sid=connection_id, namespace=self.namespace)
    
    def evict(self, lobby_id: str, connection_ids: Iterable[str]) -> None:
        """Take connections out of a lobby's transport room."""
        for connection_id in connection_ids:
            leave_room(lobby_id, sid=connection_id, namespace=self.namespace)
