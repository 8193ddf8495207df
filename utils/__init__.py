"""
Utilities module for the lobby session engine.

This module contains constants and helper functions used throughout
the application.
"""

from .constants import (
    DEFAULT_DISPLAY_NAME, VOTE_DIRECTIONS, INBOUND_EVENTS, OUTBOUND_EVENTS
)
from .helpers import (
    generate_lobby_id, utc_timestamp, is_valid_video_url, extract_video_id,
    normalize_video_url, normalize_display_name, sanitize_message, parse_playback_time
)

__all__ = [
    'DEFAULT_DISPLAY_NAME',
    'VOTE_DIRECTIONS',
    'INBOUND_EVENTS',
    'OUTBOUND_EVENTS',
    'generate_lobby_id',
    'utc_timestamp',
    'is_valid_video_url',
    'extract_video_id',
    'normalize_video_url',
    'normalize_display_name',
    'sanitize_message',
    'parse_playback_time'
]
