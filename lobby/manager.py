"""
Lobby registry.

Owns every active lobby session: creates them, looks them up, and
garbage-collects them once their last member is gone. Also keeps the
connection -> lobby index used to clean up after a disconnect.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Optional, List, Dict, Set, Iterator
from .session import LobbySession
from utils.helpers import generate_lobby_id

logger = logging.getLogger(__name__)

class LobbyRegistry:
    """
    Process-wide collection of lobby sessions.

    The registry lock only guards the two maps. Session state is guarded
    by each session's own lock; code holding a session lock may take the
    registry lock, never the other way round.
    """

    def __init__(self, lock_factory: Callable[[], Any] = threading.RLock):
        """
        Args:
            lock_factory: Builds the per-lobby lock. Must block other
                workers of the running server (threads or greenlets)
        """
        self.lock_factory = lock_factory
        self.active_lobbies: Dict[str, LobbySession] = {}
        self.connection_lobbies: Dict[str, Set[str]] = {}  # connection_id -> lobby ids
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self.active_lobbies)

    def create_lobby(self, connection_id: str, host_name: str) -> LobbySession:
        """
        Create a lobby with the requesting connection as sole member and host.

        Args:
            connection_id: Creating connection
            host_name: Display name of the creator

        Returns:
            The new LobbySession
        """
        with self._lock:
            lobby_id = generate_lobby_id()
            while lobby_id in self.active_lobbies:
                lobby_id = generate_lobby_id()

            session = LobbySession(lobby_id, connection_id, host_name, lock=self.lock_factory())
            self.active_lobbies[lobby_id] = session
            self.connection_lobbies.setdefault(connection_id, set()).add(lobby_id)

        logger.info(f"Lobby created: {lobby_id} by host {host_name}")
        return session

    def get_lobby(self, lobby_id: str) -> Optional[LobbySession]:
        """
        Get a lobby session by id.

        Returns:
            LobbySession or None if not found
        """
        if not isinstance(lobby_id, str):
            return None
        with self._lock:
            return self.active_lobbies.get(lobby_id)

    @contextmanager
    def session_scope(self, lobby_id: str) -> Iterator[Optional[LobbySession]]:
        """
        Hold a lobby's lock for the duration of one inbound event.

        Yields the session, or None if it doesn't exist or was destroyed
        while waiting for the lock.
        """
        session = self.get_lobby(lobby_id)
        if session is None:
            yield None
            return

        with session.lock:
            yield None if session.closed else session

    def destroy_if_empty(self, lobby_id: str) -> bool:
        """
        Remove a lobby whose member set is empty.

        This is the only way a lobby is ever deleted. Callers must hold
        the session lock.

        Returns:
            True if the lobby was removed
        """
        with self._lock:
            session = self.active_lobbies.get(lobby_id)
            if session is None or not session.is_empty:
                return False

            session.closed = True
            del self.active_lobbies[lobby_id]

            for connection_id in [c for c, ids in self.connection_lobbies.items() if lobby_id in ids]:
                self._untrack(connection_id, lobby_id)

        logger.info(f"Lobby {lobby_id} deleted (no users left)")
        return True

    def track_connection(self, connection_id: str, lobby_id: str) -> None:
        with self._lock:
            self.connection_lobbies.setdefault(connection_id, set()).add(lobby_id)

    def untrack_connection(self, connection_id: str, lobby_id: str) -> None:
        with self._lock:
            self._untrack(connection_id, lobby_id)

    def lobbies_for_connection(self, connection_id: str) -> List[str]:
        """Ids of the lobbies a connection is currently a member of."""
        with self._lock:
            return sorted(self.connection_lobbies.get(connection_id, ()))

    def get_stats(self) -> Dict[str, int]:
        """Lobby and member counts."""
        with self._lock:
            sessions = list(self.active_lobbies.values())
        return {
            'lobbies': len(sessions),
            'members': sum(len(s.membership) for s in sessions)
        }

    def _untrack(self, connection_id: str, lobby_id: str) -> None:
        lobby_ids = self.connection_lobbies.get(connection_id)
        if not lobby_ids:
            return
        lobby_ids.discard(lobby_id)
        if not lobby_ids:
            del self.connection_lobbies[connection_id]
