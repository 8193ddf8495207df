"""
Data models for lobby sessions.

These are pure data structures shared by the queue, membership and
session modules. Serialization uses the camelCase keys clients expect.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Mapping

@dataclass
class Member:
    """Represents a connection that is in a lobby."""
    connection_id: str
    display_name: str
    is_host: bool = False
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'socketId': self.connection_id,
            'name': self.display_name,
            'isHost': self.is_host
        }

@dataclass
class VideoEntry:
    """
    A queued video and the votes cast on it.
    
    Vote counts are derived from the voter lists so that
    likes == len(liked_by) always holds.
    """
    url: str
    added_by: str
    key: str = ''
    liked_by: List[str] = field(default_factory=list)
    disliked_by: List[str] = field(default_factory=list)
    played: bool = False
    
    @property
    def likes(self) -> int:
        return len(self.liked_by)
    
    @property
    def dislikes(self) -> int:
        return len(self.disliked_by)
    
    def stance_of(self, connection_id: str) -> Optional[str]:
        """Return 'like', 'dislike' or None for a connection."""
        if connection_id in self.liked_by:
            return 'like'
        if connection_id in self.disliked_by:
            return 'dislike'
        return None
    
    def to_dict(self, member_names: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.
        
        Args:
            member_names: connection_id -> display name for current members;
                voters who are no longer members are left out of the name lists
        """
        names = member_names or {}
        return {
            'url': self.url,
            'addedBy': self.added_by,
            'likes': self.likes,
            'dislikes': self.dislikes,
            'likedBy': list(self.liked_by),
            'dislikedBy': list(self.disliked_by),
            'played': self.played,
            'likedByNames': [names[c] for c in self.liked_by if c in names],
            'dislikedByNames': [names[c] for c in self.disliked_by if c in names]
        }
