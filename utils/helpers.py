"""
Helper utilities for the lobby session engine.

This module contains utility functions used throughout the application
for validation, generation, and data normalization.
"""

import math
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import urlsplit, parse_qs
from .constants import (
    VIDEO_URL_PATTERN, VIDEO_ID_PATTERN, VIDEO_ID_PATH_PREFIXES, URL_SCHEME_PATTERN,
    DEFAULT_DISPLAY_NAME
)

def generate_lobby_id() -> str:
    """Generate a fresh, collision-resistant lobby identifier."""
    return str(uuid.uuid4())

def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()

def is_valid_video_url(url: Any) -> bool:
    """Check that url looks like a link to a recognized video host."""
    if not isinstance(url, str):
        return False
    return bool(VIDEO_URL_PATTERN.match(url.strip()))

def extract_video_id(url: str) -> Optional[str]:
    """
    Pull the video id out of a YouTube link.
    
    Handles youtu.be/<id>, watch?v=<id> and the /embed, /shorts, /live
    and /v path forms.
    
    Args:
        url: A link already accepted by is_valid_video_url
        
    Returns:
        The 11 character video id, or None if the link doesn't carry one
    """
    parts = _split(url)
    host = parts.hostname or ''
    segments = [s for s in parts.path.split('/') if s]
    
    candidate = None
    if host.endswith('youtu.be'):
        candidate = segments[0] if segments else None
    elif segments and segments[0] == 'watch':
        candidate = parse_qs(parts.query).get('v', [None])[0]
    elif len(segments) >= 2 and segments[0] in VIDEO_ID_PATH_PREFIXES:
        candidate = segments[1]
    
    if candidate and VIDEO_ID_PATTERN.match(candidate):
        return candidate
    return None

def normalize_video_url(url: str) -> str:
    """
    Build the key used to detect duplicate submissions.
    
    Two links to the same video produce the same key regardless of
    scheme, "www." prefix, short-link form or extra query parameters.
    
    Args:
        url: A link already accepted by is_valid_video_url
        
    Returns:
        Normalized key string
    """
    video_id = extract_video_id(url)
    if video_id:
        return f"youtube:{video_id}"
    
    parts = _split(url)
    host = (parts.hostname or '').lower()
    for prefix in ('www.', 'm.', 'music.'):
        if host.startswith(prefix):
            host = host[len(prefix):]
            break
    key = f"{host}{parts.path.rstrip('/')}"
    if parts.query:
        key = f"{key}?{parts.query}"
    return key

def normalize_display_name(name: Any, max_length: int = 32) -> str:
    """
    Clean up a display name.
    
    Names are never rejected: whitespace is collapsed, the result is
    capped at max_length, and an empty name falls back to the default.
    """
    if not isinstance(name, str):
        name = '' if name is None else str(name)
    name = re.sub(r'\s+', ' ', name.strip())[:max_length].strip()
    return name or DEFAULT_DISPLAY_NAME

def sanitize_message(message: Any, max_length: int = 500) -> str:
    """
    Sanitize a chat message.
    
    Args:
        message: Raw message content
        max_length: Longest message kept
        
    Returns:
        Sanitized message content (possibly empty)
    """
    if not isinstance(message, str):
        return ''
    
    # Remove excessive whitespace
    message = re.sub(r'\s+', ' ', message.strip())
    
    # Limit length
    if len(message) > max_length:
        message = message[:max_length]
    
    return message

def parse_playback_time(value: Any) -> Optional[float]:
    """Coerce a client-reported playback position to a non-negative float."""
    if isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(seconds):
        return None
    return max(seconds, 0.0)

def _split(url: str):
    url = url.strip()
    if not URL_SCHEME_PATTERN.match(url):
        url = f"https://{url}"
    return urlsplit(url)
