"""
Membership and authority management for a lobby.

Tracks who is in the lobby, who is host and who is banned, and
enforces the host check on every privileged action. Authority is
always read from live state, never from what a client claims.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple
from .models import Member
from .results import LobbyResult, ErrorCode, Notification, to_room, to_connection
from utils.constants import OUTBOUND_EVENTS

logger = logging.getLogger(__name__)

# Messages returned to a requester who fails the host check
UNAUTHORIZED_MESSAGES = {
    'skip': "Only the host can skip videos",
    'delete': "Only the host can delete videos",
    'kick': "Only the host can kick users",
    'ban': "Only the host can ban users",
    'transfer': "Only the host can transfer host role"
}

INVALID_TARGET_MESSAGES = {
    'kick': "Invalid user to kick",
    'ban': "Invalid user to ban",
    'transfer': "Invalid user to transfer host role"
}

class Membership:
    """
    Members, host role and ban list of one lobby.

    Members are kept in join order; when the host leaves, the earliest
    joined remaining member takes over.
    """

    def __init__(self, lobby_id: str, host_id: str, host_name: str):
        """
        Initialize membership with the creating connection as host.

        Args:
            lobby_id: Lobby (and transport room) identifier
            host_id: Connection id of the creator
            host_name: Display name of the creator
        """
        self.lobby_id = lobby_id
        self.members: Dict[str, Member] = {
            host_id: Member(connection_id=host_id, display_name=host_name, is_host=True)
        }
        self.host: Optional[str] = host_id
        self.banned: Set[str] = set()

    def __len__(self) -> int:
        return len(self.members)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self.members

    @property
    def host_name(self) -> Optional[str]:
        member = self.members.get(self.host) if self.host else None
        return member.display_name if member else None

    def get(self, connection_id: str) -> Optional[Member]:
        return self.members.get(connection_id)

    def is_host(self, connection_id: str) -> bool:
        return connection_id is not None and connection_id == self.host

    def is_banned(self, connection_id: str) -> bool:
        return connection_id in self.banned

    def names_by_connection(self) -> Dict[str, str]:
        """connection_id -> display name for every current member."""
        return {cid: m.display_name for cid, m in self.members.items()}

    def display_names(self) -> List[str]:
        return [m.display_name for m in self.members.values()]

    def user_list(self) -> List[Dict]:
        """Serialized member list in join order."""
        return [m.to_dict() for m in self.members.values()]

    def require_host(self, requester_id: str, action: str) -> Optional[LobbyResult]:
        """
        Check that requester_id currently holds the host role.

        Returns:
            None when allowed, otherwise an UNAUTHORIZED result
        """
        if self.is_host(requester_id):
            return None
        logger.warning(f"Denied {action} by non-host {requester_id} in lobby {self.lobby_id}")
        return LobbyResult.fail(ErrorCode.UNAUTHORIZED, UNAUTHORIZED_MESSAGES.get(action))

    def join(self, connection_id: str, display_name: str) -> LobbyResult:
        """
        Add a connection to the lobby.

        A connection that is already a member keeps its place and role;
        only its display name is refreshed.

        Args:
            connection_id: Joining connection
            display_name: Name shown to other members

        Returns:
            LobbyResult with the Member, or BANNED
        """
        if self.is_banned(connection_id):
            logger.info(f"Banned connection {connection_id} refused from lobby {self.lobby_id}")
            return LobbyResult.fail(ErrorCode.BANNED)

        member = self.members.get(connection_id)
        if member:
            member.display_name = display_name
        else:
            member = Member(connection_id=connection_id, display_name=display_name)
            self.members[connection_id] = member

        logger.info(f"{display_name} joined lobby {self.lobby_id}")
        return LobbyResult.ok(data=member, notifications=[
            to_room(self.lobby_id, OUTBOUND_EVENTS['USER_JOINED'], {'name': display_name},
                    skip_sid=connection_id),
            self._user_list_notification()
        ])

    def leave(self, connection_id: str) -> LobbyResult:
        """
        Remove a connection, promoting a new host if the host left.

        Returns:
            LobbyResult with the removed Member, or a no-op if the
            connection wasn't a member
        """
        if connection_id not in self.members:
            return LobbyResult.nothing()

        member, new_host = self._remove(connection_id)
        notifications = [
            to_room(self.lobby_id, OUTBOUND_EVENTS['USER_LEFT'], {'name': member.display_name},
                    skip_sid=connection_id),
        ]
        if self.members:
            notifications.append(self._user_list_notification())
        if new_host:
            notifications.append(self._host_changed_notification())

        logger.info(f"{member.display_name} left lobby {self.lobby_id}")
        return LobbyResult.ok(data=member, notifications=notifications,
                              removed_connections=[connection_id])

    def kick(self, requester_id: str, target_id: str) -> LobbyResult:
        """Remove another member. Host only."""
        return self._eject(requester_id, target_id, action='kick')

    def ban(self, requester_id: str, target_id: str) -> LobbyResult:
        """Remove another member and refuse that connection from now on. Host only."""
        return self._eject(requester_id, target_id, action='ban')

    def transfer_host(self, requester_id: str, new_host_id: str) -> LobbyResult:
        """
        Hand the host role to another member.

        Args:
            requester_id: Must be the current host
            new_host_id: Another current member

        Returns:
            LobbyResult, or UNAUTHORIZED / INVALID_TARGET
        """
        denied = self.require_host(requester_id, 'transfer')
        if denied:
            return denied
        if new_host_id not in self.members or new_host_id == requester_id:
            return LobbyResult.fail(ErrorCode.INVALID_TARGET, INVALID_TARGET_MESSAGES['transfer'])

        self._set_host(new_host_id)
        logger.info(f"Host role transferred to {self.host_name} in lobby {self.lobby_id}")
        return LobbyResult.ok(notifications=[
            self._host_changed_notification(),
            self._user_list_notification()
        ])

    def _eject(self, requester_id: str, target_id: str, action: str) -> LobbyResult:
        denied = self.require_host(requester_id, action)
        if denied:
            return denied
        if target_id not in self.members or target_id == requester_id:
            return LobbyResult.fail(ErrorCode.INVALID_TARGET, INVALID_TARGET_MESSAGES[action])

        if action == 'ban':
            self.banned.add(target_id)
        member, _ = self._remove(target_id)

        addressed_event = OUTBOUND_EVENTS['BANNED'] if action == 'ban' else OUTBOUND_EVENTS['KICKED']
        logger.info(f"Host {addressed_event} {member.display_name} from lobby {self.lobby_id}")
        return LobbyResult.ok(data=member, notifications=[
            to_connection(target_id, addressed_event, {'lobbyId': self.lobby_id}),
            to_room(self.lobby_id, OUTBOUND_EVENTS['USER_LEFT'], {'name': member.display_name},
                    skip_sid=target_id),
            self._user_list_notification()
        ], removed_connections=[target_id])

    def _remove(self, connection_id: str) -> Tuple[Member, Optional[Member]]:
        """Drop a member; returns (removed, promoted host or None)."""
        member = self.members.pop(connection_id)
        member.is_host = False

        promoted = None
        if connection_id == self.host:
            self.host = None
            if self.members:
                # Dicts keep insertion order, so this is the earliest joiner
                next_host = next(iter(self.members))
                self._set_host(next_host)
                promoted = self.members[next_host]
                logger.info(f"Host left. New host for lobby {self.lobby_id}: {promoted.display_name}")
        return member, promoted

    def _set_host(self, connection_id: str) -> None:
        for cid, member in self.members.items():
            member.is_host = cid == connection_id
        self.host = connection_id

    def _user_list_notification(self) -> Notification:
        return to_room(self.lobby_id, OUTBOUND_EVENTS['USER_LIST'], self.user_list())

    def _host_changed_notification(self) -> Notification:
        return to_room(self.lobby_id, OUTBOUND_EVENTS['HOST_CHANGED'], {'newHost': self.host_name})
