"""Tests for the lobby registry."""

import threading
import uuid

import eventlet

from app import lobby_lock_factory
from lobby import LobbyRegistry


class TestLifecycle:
    """Tests for creating, finding and destroying lobbies."""

    def test_create_lobby(self, registry):
        session = registry.create_lobby('alice', 'Alice')

        assert uuid.UUID(session.lobby_id)
        assert registry.get_lobby(session.lobby_id) is session
        assert session.host == 'alice'
        assert session.host_name == 'Alice'
        assert len(session.members) == 1
        assert registry.lobbies_for_connection('alice') == [session.lobby_id]

    def test_lobby_ids_are_unique(self, registry):
        ids = {registry.create_lobby('alice', 'Alice').lobby_id for _ in range(50)}
        assert len(ids) == 50
        assert len(registry) == 50

    def test_get_unknown_lobby(self, registry):
        assert registry.get_lobby('nope') is None
        assert registry.get_lobby(None) is None
        assert registry.get_lobby({'not': 'hashable'}) is None

    def test_destroy_if_empty_keeps_non_empty_lobby(self, registry):
        session = registry.create_lobby('alice', 'Alice')
        assert registry.destroy_if_empty(session.lobby_id) is False
        assert registry.get_lobby(session.lobby_id) is session

    def test_destroy_if_empty_removes_empty_lobby(self, registry):
        session = registry.create_lobby('alice', 'Alice')
        session.join('bob', 'Bob')
        registry.track_connection('bob', session.lobby_id)

        session.leave('alice')
        assert registry.destroy_if_empty(session.lobby_id) is False
        session.leave('bob')
        assert registry.destroy_if_empty(session.lobby_id) is True

        assert registry.get_lobby(session.lobby_id) is None
        assert session.closed
        assert registry.lobbies_for_connection('alice') == []
        assert registry.lobbies_for_connection('bob') == []

    def test_registries_are_independent(self):
        first, second = LobbyRegistry(), LobbyRegistry()
        session = first.create_lobby('alice', 'Alice')
        assert second.get_lobby(session.lobby_id) is None

    def test_stats(self, registry):
        one = registry.create_lobby('alice', 'Alice')
        one.join('bob', 'Bob')
        registry.create_lobby('carol', 'Carol')

        assert registry.get_stats() == {'lobbies': 2, 'members': 3}


class TestConnectionIndex:
    """Tests for the connection -> lobby index."""

    def test_track_and_untrack(self, registry):
        registry.track_connection('bob', 'l1')
        registry.track_connection('bob', 'l2')
        assert registry.lobbies_for_connection('bob') == ['l1', 'l2']

        registry.untrack_connection('bob', 'l1')
        assert registry.lobbies_for_connection('bob') == ['l2']
        registry.untrack_connection('bob', 'l2')
        registry.untrack_connection('bob', 'l2')
        assert registry.lobbies_for_connection('bob') == []


class TestSessionScope:
    """Tests for per-lobby serialization."""

    def test_scope_yields_session_with_lock_held(self, registry):
        session = registry.create_lobby('alice', 'Alice')

        with registry.session_scope(session.lobby_id) as scoped:
            assert scoped is session
            acquired = []
            worker = threading.Thread(target=lambda: acquired.append(session.lock.acquire(timeout=0.05)))
            worker.start()
            worker.join()
            assert acquired == [False]

    def test_scope_blocks_other_greenlets_under_eventlet(self):
        registry = LobbyRegistry(lock_factory=lobby_lock_factory('eventlet'))
        session = registry.create_lobby('alice', 'Alice')
        order = []

        def worker(name):
            with registry.session_scope(session.lobby_id):
                order.append(f'{name} in')
                eventlet.sleep(0)
                order.append(f'{name} out')

        workers = [eventlet.spawn(worker, name) for name in ('a', 'b')]
        for green_thread in workers:
            green_thread.wait()

        assert order == ['a in', 'a out', 'b in', 'b out']

    def test_threaded_modes_use_thread_locks(self):
        assert lobby_lock_factory('threading') is threading.RLock
        registry = LobbyRegistry(lock_factory=lobby_lock_factory('threading'))
        session = registry.create_lobby('alice', 'Alice')
        assert isinstance(session.lock, type(threading.RLock()))

    def test_scope_for_missing_lobby_yields_none(self, registry):
        with registry.session_scope('missing') as scoped:
            assert scoped is None

    def test_scope_for_destroyed_lobby_yields_none(self, registry):
        session = registry.create_lobby('alice', 'Alice')
        lobby_id = session.lobby_id
        with registry.session_scope(lobby_id) as scoped:
            scoped.leave('alice')
            registry.destroy_if_empty(lobby_id)

        with registry.session_scope(lobby_id) as scoped:
            assert scoped is None

    def test_concurrent_votes_keep_invariants(self, registry):
        session = registry.create_lobby('host', 'Host')
        voters = [f'user{i}' for i in range(20)]
        for voter in voters:
            session.join(voter, voter)
        session.add_video('host', 'https://youtu.be/abc12345678')

        def vote(voter):
            for i in range(50):
                with registry.session_scope(session.lobby_id) as scoped:
                    if i % 2:
                        scoped.dislike_video(voter)
                    else:
                        scoped.like_video(voter)

        threads = [threading.Thread(target=vote, args=(v,)) for v in voters]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        head = session.queue.head
        # Every voter's last action was a dislike
        assert sorted(head.disliked_by) == sorted(voters)
        assert head.liked_by == []
        assert head.dislikes == len(voters)
