"""
Lobby session: one lobby's queue, membership and authority state.

Exposes the atomic operations the dispatcher performs. Each call
mutates state and returns a LobbyResult carrying the reply for the
requester and the notifications to broadcast. Callers must hold
`lock` (see LobbyRegistry.session_scope) for the whole call and its
delivery.
"""

import logging
import threading
from typing import Any, Dict, Optional
from .membership import Membership
from .video_queue import VideoQueue
from .results import LobbyResult, ErrorCode, to_room
from utils.constants import OUTBOUND_EVENTS, VOTE_DIRECTIONS
from utils.helpers import sanitize_message, utc_timestamp

logger = logging.getLogger(__name__)

class LobbySession:
    """Authoritative state of a single lobby."""

    def __init__(self, lobby_id: str, host_id: str, host_name: str, lock=None):
        """
        Args:
            lobby_id: Lobby (and transport room) identifier
            host_id: Connection id of the creator
            host_name: Display name of the creator
            lock: Lock guarding this session; must suit the server's
                concurrency model (a thread RLock by default)
        """
        self.lobby_id = lobby_id
        self.membership = Membership(lobby_id, host_id, host_name)
        self.queue = VideoQueue()
        self.lock = lock if lock is not None else threading.RLock()
        self.closed = False

    @property
    def host(self) -> Optional[str]:
        return self.membership.host

    @property
    def host_name(self) -> Optional[str]:
        return self.membership.host_name

    @property
    def members(self):
        return self.membership.members

    @property
    def banned_connection_ids(self):
        return self.membership.banned

    @property
    def is_empty(self) -> bool:
        return len(self.membership) == 0

    def is_member(self, connection_id: str) -> bool:
        return connection_id in self.membership

    def snapshot(self) -> Dict[str, Any]:
        """Full state sent to a connection that just joined."""
        names = self.membership.names_by_connection()
        head = self.queue.head
        return {
            'lobbyId': self.lobby_id,
            'hostName': self.host_name,
            'users': self.membership.user_list(),
            'queue': self.queue.to_list(names),
            'currentVideo': head.to_dict(names) if head else None
        }

    # Membership

    def join(self, connection_id: str, display_name: str) -> LobbyResult:
        result = self.membership.join(connection_id, display_name)
        if result.success:
            result.data = self.snapshot()
        return result

    def leave(self, connection_id: str) -> LobbyResult:
        return self.membership.leave(connection_id)

    def kick(self, requester_id: str, target_id: str) -> LobbyResult:
        return self.membership.kick(requester_id, target_id)

    def ban(self, requester_id: str, target_id: str) -> LobbyResult:
        return self.membership.ban(requester_id, target_id)

    def transfer_host(self, requester_id: str, new_host_id: str) -> LobbyResult:
        return self.membership.transfer_host(requester_id, new_host_id)

    # Chat

    def send_message(self, connection_id: str, message: Any, max_length: int = 500) -> LobbyResult:
        """Relay a chat message from a member to the whole room."""
        member = self.membership.get(connection_id)
        if not member:
            return LobbyResult.nothing()

        text = sanitize_message(message, max_length)
        if not text:
            return LobbyResult.fail(ErrorCode.EMPTY_MESSAGE)

        chat_message = {
            'user': member.display_name,
            'message': text,
            'timestamp': utc_timestamp()
        }
        return LobbyResult.ok(notifications=[
            to_room(self.lobby_id, OUTBOUND_EVENTS['RECEIVE_MESSAGE'], chat_message)
        ])

    # Queue

    def add_video(self, connection_id: str, url: Any) -> LobbyResult:
        """
        Append a video submitted by a member.

        Args:
            connection_id: Submitting connection
            url: Submitted link

        Returns:
            LobbyResult, INVALID_URL / DUPLICATE_VIDEO, or a no-op for non-members
        """
        member = self.membership.get(connection_id)
        if not member:
            return LobbyResult.nothing()

        result = self.queue.add(url, member.display_name)
        if not result.success:
            return result

        logger.info(f"{member.display_name} added video to lobby {self.lobby_id}")
        result.data = None
        result.notifications.append(self._queue_notification())
        return result

    def skip_video(self, requester_id: str) -> LobbyResult:
        """Host moves the now playing video to the back of the queue."""
        denied = self.membership.require_host(requester_id, 'skip')
        if denied:
            return denied

        result = self.queue.skip()
        if not result.success:
            return result

        names = self.membership.names_by_connection()
        skipped = result.data
        result.data = None
        result.notifications.extend([
            self._queue_notification(),
            to_room(self.lobby_id, OUTBOUND_EVENTS['VIDEO_SKIPPED'], skipped.to_dict(names))
        ])
        logger.info(f"Host skipped video in lobby {self.lobby_id}")
        return result

    def delete_video(self, requester_id: str, index: Any) -> LobbyResult:
        """Host removes the video at a queue position."""
        denied = self.membership.require_host(requester_id, 'delete')
        if denied:
            return denied

        result = self.queue.remove_at(index)
        if not result.success:
            return result

        result.data = None
        result.notifications.append(self._queue_notification())
        logger.info(f"Host deleted video from queue in lobby {self.lobby_id}")
        return result

    def like_video(self, connection_id: str, undo: bool = False) -> LobbyResult:
        return self._vote(connection_id, VOTE_DIRECTIONS['LIKE'], undo)

    def dislike_video(self, connection_id: str, undo: bool = False) -> LobbyResult:
        return self._vote(connection_id, VOTE_DIRECTIONS['DISLIKE'], undo)

    def _vote(self, connection_id: str, direction: str, undo: bool) -> LobbyResult:
        if not self.is_member(connection_id):
            return LobbyResult.nothing()

        result = self.queue.vote(connection_id, direction, undo=bool(undo))
        if not result.success:
            return result

        self.queue.reorder(self.membership.display_names())
        result.data = None
        result.notifications.append(self._queue_notification())
        return result

    def _queue_notification(self):
        names = self.membership.names_by_connection()
        return to_room(self.lobby_id, OUTBOUND_EVENTS['QUEUE_UPDATED'], self.queue.to_list(names))
