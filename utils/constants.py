"""
Constants for the lobby session engine.

This module contains all constant values used throughout the server,
including the recognized video link shapes, display-name defaults and
the Socket.IO event names exchanged with clients.
"""

import re

# Recognized video-hosting link shape (host-portion check only)
VIDEO_URL_PATTERN = re.compile(
    r'^(https?://)?(www\.|m\.|music\.)?(youtube\.com|youtube-nocookie\.com|youtu\.?be)/.+',
    re.IGNORECASE
)

# YouTube video ids are 11 characters from the URL-safe base64 alphabet
VIDEO_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{11}$')

# Path prefixes that carry the video id as their next segment
VIDEO_ID_PATH_PREFIXES = ('embed', 'shorts', 'live', 'v')

# Leading scheme only; query strings may carry their own URLs
URL_SCHEME_PATTERN = re.compile(r'^[a-z][a-z0-9+.-]*://', re.IGNORECASE)

# Display names
DEFAULT_DISPLAY_NAME = 'Anonymous'

# Vote directions
VOTE_DIRECTIONS = {
    'LIKE': 'like',
    'DISLIKE': 'dislike'
}

# Client -> server events
INBOUND_EVENTS = {
    'CREATE_LOBBY': 'create_lobby',
    'JOIN_LOBBY': 'join_lobby',
    'LEAVE_LOBBY': 'leave_lobby',
    'SEND_MESSAGE': 'send_message',
    'ADD_VIDEO': 'add_video',
    'SKIP_VIDEO': 'skip_video',
    'DELETE_VIDEO': 'delete_video',
    'LIKE_VIDEO': 'like_video',
    'DISLIKE_VIDEO': 'dislike_video',
    'KICK_USER': 'kick_user',
    'BAN_USER': 'ban_user',
    'TRANSFER_HOST': 'transfer_host',
    'REQUEST_SYNC': 'request_sync',
    'HOST_SYNC': 'host_sync',
    'SYNC_PLAY': 'sync_play',
    'SYNC_PAUSE': 'sync_pause',
    'SYNC_END': 'sync_end'
}

# Server -> client events
OUTBOUND_EVENTS = {
    'USER_LIST': 'user_list',
    'USER_JOINED': 'user_joined',
    'USER_LEFT': 'user_left',
    'RECEIVE_MESSAGE': 'receive_message',
    'QUEUE_UPDATED': 'queue_updated',
    'VIDEO_SKIPPED': 'video_skipped',
    'KICKED': 'kicked',
    'BANNED': 'banned',
    'HOST_CHANGED': 'host_changed',
    'REQUEST_HOST_SYNC': 'request_host_sync',
    'HOST_SYNC': 'host_sync',
    'SYNC_PLAY': 'sync_play',
    'SYNC_PAUSE': 'sync_pause',
    'SYNC_END': 'sync_end'
}
