"""Shared fixtures for the lobby session engine tests."""

import pytest

from app import create_app
from lobby import LobbyRegistry, LobbySession

TEST_CONFIG = {
    'TESTING': True,
    'SOCKETIO_ASYNC_MODE': 'threading',
}


@pytest.fixture
def registry():
    return LobbyRegistry()


@pytest.fixture
def session():
    """A lobby hosted by Alice with Bob and Carol joined."""
    lobby = LobbySession('lobby-1', 'alice', 'Alice')
    lobby.join('bob', 'Bob')
    lobby.join('carol', 'Carol')
    return lobby


@pytest.fixture
def server():
    app, socketio = create_app(TEST_CONFIG)
    return app, socketio


@pytest.fixture
def connect(server):
    """Factory for connected Socket.IO test clients."""
    app, socketio = server
    clients = []

    def _connect():
        client = socketio.test_client(app)
        clients.append(client)
        return client

    yield _connect

    for client in clients:
        if client.is_connected():
            client.disconnect()
