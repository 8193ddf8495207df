"""Helpers for reading what Socket.IO test clients received."""


def received(client, event):
    """
    Payloads of every `event` the client received since the last read.

    Reading drains the client's whole inbox, not just `event`.
    """
    return [m['args'][0] if m['args'] else None
            for m in client.get_received() if m['name'] == event]


def event_names(client):
    """Names of everything the client received since the last read."""
    return [m['name'] for m in client.get_received()]


def sid_of(users, name):
    """Connection id of the member called `name` in a user list."""
    return next(u['socketId'] for u in users if u['name'] == name)
