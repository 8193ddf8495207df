"""
Video queue and voting model.

Pure data and ordering logic for one lobby's queue. Contains no
membership, authority or I/O: callers decide who may do what and
what gets broadcast afterwards.
"""

from typing import Iterable, List, Mapping, Optional, Any, Dict
from .models import VideoEntry
from .results import LobbyResult, ErrorCode
from utils.constants import VOTE_DIRECTIONS
from utils.helpers import is_valid_video_url, normalize_video_url

class VideoQueue:
    """
    Ordered, url-unique list of videos. Position 0 is now playing.
    """

    def __init__(self, entries: Optional[Iterable[VideoEntry]] = None):
        self.entries: List[VideoEntry] = list(entries or [])

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, index: int) -> VideoEntry:
        return self.entries[index]

    @property
    def head(self) -> Optional[VideoEntry]:
        """The now playing entry, or None when the queue is empty."""
        return self.entries[0] if self.entries else None

    def add(self, url: Any, added_by: str) -> LobbyResult:
        """
        Append a new zero-vote entry at the tail.

        Args:
            url: Submitted link
            added_by: Display name of the submitter

        Returns:
            LobbyResult with the new VideoEntry, or INVALID_URL / DUPLICATE_VIDEO
        """
        if not is_valid_video_url(url):
            return LobbyResult.fail(ErrorCode.INVALID_URL)

        url = url.strip()
        key = normalize_video_url(url)
        if any(entry.key == key for entry in self.entries):
            return LobbyResult.fail(ErrorCode.DUPLICATE_VIDEO)

        entry = VideoEntry(url=url, added_by=added_by, key=key)
        self.entries.append(entry)
        return LobbyResult.ok(data=entry)

    def remove_at(self, index: Any) -> LobbyResult:
        """
        Remove and return the entry at index.

        Args:
            index: Queue position, valid for 0 <= index < len(queue)

        Returns:
            LobbyResult with the removed VideoEntry, or INVALID_INDEX
        """
        if isinstance(index, bool) or not isinstance(index, int):
            return LobbyResult.fail(ErrorCode.INVALID_INDEX)
        if index < 0 or index >= len(self.entries):
            return LobbyResult.fail(ErrorCode.INVALID_INDEX)

        return LobbyResult.ok(data=self.entries.pop(index))

    def skip(self) -> LobbyResult:
        """
        Move the head to the tail and mark it played.

        Played videos stay in the queue so they come round again once the
        rest of the queue has cycled.
        """
        if not self.entries:
            return LobbyResult.nothing(ErrorCode.EMPTY_QUEUE)

        entry = self.entries.pop(0)
        entry.played = True
        self.entries.append(entry)
        return LobbyResult.ok(data=entry)

    def vote(self, connection_id: str, direction: str, undo: bool = False) -> LobbyResult:
        """
        Apply or undo a vote on the head entry.

        A connection holds at most one stance: applying a vote first drops
        the opposite one. Undo only removes a vote in the same direction.
        Repeating a call once its target state is reached changes nothing.

        Args:
            connection_id: Voter
            direction: 'like' or 'dislike'
            undo: Remove the vote instead of casting it

        Returns:
            LobbyResult with the head entry when something changed, a no-op
            result otherwise (EMPTY_QUEUE when there is nothing to vote on)
        """
        if direction not in VOTE_DIRECTIONS.values():
            raise ValueError(f"Unknown vote direction: {direction}")

        entry = self.head
        if entry is None:
            return LobbyResult.nothing(ErrorCode.EMPTY_QUEUE)

        same, opposite = (
            (entry.liked_by, entry.disliked_by) if direction == VOTE_DIRECTIONS['LIKE']
            else (entry.disliked_by, entry.liked_by)
        )

        if undo:
            if connection_id not in same:
                return LobbyResult.nothing()
            same.remove(connection_id)
            return LobbyResult.ok(data=entry)

        if connection_id in same:
            return LobbyResult.nothing()
        if connection_id in opposite:
            opposite.remove(connection_id)
        same.append(connection_id)
        return LobbyResult.ok(data=entry)

    def reorder(self, active_display_names: Iterable[str]) -> List[VideoEntry]:
        """
        Re-sort every entry after the head.

        Ordering, strongest rule first:
          1. disliked entries trail all undisliked ones and keep their
             current relative order among themselves
          2. entries added by someone still in the lobby come first
          3. more likes come first
        The sort is stable, so anything the rules don't separate keeps
        its current position relative to the rest.

        Args:
            active_display_names: Display names of current members

        Returns:
            The reordered entry list
        """
        if len(self.entries) < 3:
            return self.entries

        active = set(active_display_names)

        def sort_key(entry: VideoEntry):
            if entry.dislikes > 0:
                return (1, 0, 0)
            return (0, 0 if entry.added_by in active else 1, -entry.likes)

        head, rest = self.entries[0], self.entries[1:]
        self.entries = [head] + sorted(rest, key=sort_key)
        return self.entries

    def to_list(self, member_names: Optional[Mapping[str, str]] = None) -> List[Dict[str, Any]]:
        """Serialize every entry for a queue_updated broadcast."""
        return [entry.to_dict(member_names) for entry in self.entries]
