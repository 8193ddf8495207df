"""
Playback sync coordination.

The host's player is the single source of truth for position and
play state. The coordinator keeps no clock of its own: it relays host
play/pause/end intents to everyone else, and answers catch-up requests
by asking the host and forwarding the reply to the requester.
"""

import logging
from typing import Any
from .session import LobbySession
from .results import LobbyResult, to_room, to_connection
from utils.constants import OUTBOUND_EVENTS
from utils.helpers import parse_playback_time

logger = logging.getLogger(__name__)

class PlaybackSyncCoordinator:
    """
    Relays playback events between the host and other members.

    Every intent is checked against the live host role; anything sent
    by a non-host, or that can no longer be delivered, is dropped as a
    benign no-op.
    """

    def on_host_play(self, session: LobbySession, sender_id: str, time: Any) -> LobbyResult:
        return self._relay_state(session, sender_id, OUTBOUND_EVENTS['SYNC_PLAY'], time)

    def on_host_paused(self, session: LobbySession, sender_id: str, time: Any) -> LobbyResult:
        return self._relay_state(session, sender_id, OUTBOUND_EVENTS['SYNC_PAUSE'], time)

    def on_host_ended(self, session: LobbySession, sender_id: str) -> LobbyResult:
        if not session.membership.is_host(sender_id):
            logger.debug(f"Ignored sync_end from non-host {sender_id} in lobby {session.lobby_id}")
            return LobbyResult.nothing()

        return LobbyResult.ok(notifications=[
            to_room(session.lobby_id, OUTBOUND_EVENTS['SYNC_END'], skip_sid=sender_id)
        ])

    def on_request_sync(self, session: LobbySession, requester_id: str) -> LobbyResult:
        """
        Ask the host for its live position on behalf of a member.

        The request is fire-and-forget: if the host never answers,
        nothing else happens.
        """
        if not session.is_member(requester_id) or not session.host:
            return LobbyResult.nothing()
        if session.membership.is_host(requester_id):
            return LobbyResult.nothing()

        logger.debug(f"Forwarding sync request from {requester_id} to host of lobby {session.lobby_id}")
        return LobbyResult.ok(notifications=[
            to_connection(session.host, OUTBOUND_EVENTS['REQUEST_HOST_SYNC'], {'requester': requester_id})
        ])

    def on_host_sync_response(self, session: LobbySession, sender_id: str, requester_id: Any,
                              time: Any, state: Any) -> LobbyResult:
        """
        Forward the host's live position to the member that asked for it.

        Args:
            session: Lobby the exchange belongs to
            sender_id: Connection answering; must be the current host
            requester_id: Connection that asked; must still be a member
            time: Host playback position in seconds
            state: Host player state, passed through untouched

        Returns:
            LobbyResult with one addressed host_sync notification, or a no-op
        """
        if not session.membership.is_host(sender_id):
            return LobbyResult.nothing()
        if not isinstance(requester_id, str) or not session.is_member(requester_id):
            return LobbyResult.nothing()

        seconds = parse_playback_time(time)
        if seconds is None:
            return LobbyResult.nothing()

        return LobbyResult.ok(notifications=[
            to_connection(requester_id, OUTBOUND_EVENTS['HOST_SYNC'], {'time': seconds, 'state': state})
        ])

    def _relay_state(self, session: LobbySession, sender_id: str, event: str, time: Any) -> LobbyResult:
        if not session.membership.is_host(sender_id):
            logger.debug(f"Ignored {event} from non-host {sender_id} in lobby {session.lobby_id}")
            return LobbyResult.nothing()

        seconds = parse_playback_time(time)
        if seconds is None:
            return LobbyResult.nothing()

        return LobbyResult.ok(notifications=[
            to_room(session.lobby_id, event, {'time': seconds}, skip_sid=sender_id)
        ])
