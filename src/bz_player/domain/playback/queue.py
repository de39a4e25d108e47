"""
Playback queue: ordered tracks plus a position cursor.

Positions given by the user are 1-based; the cursor is a 0-based index, or
None while the queue has never been started. The queue only holds state;
loading streams into the sink is the engine's job.
"""

from typing import Iterable, List, Optional

from bz_player.domain.library.models import Track

from .exceptions import IndexOutOfBounds


class PlaybackQueue:
    """Ordered list of tracks with a current-position cursor."""

    def __init__(self) -> None:
        self.entries: List[Track] = []
        self.cursor: Optional[int] = None

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def append(self, track: Track) -> int:
        """Add a track at the end and return the new length."""
        self.entries.append(track)
        return len(self.entries)

    def extend(self, tracks: Iterable[Track]) -> int:
        self.entries.extend(tracks)
        return len(self.entries)

    def index(self, position: int) -> int:
        """Convert a 1-based position to an index, validating bounds."""
        if not 1 <= position <= len(self.entries):
            raise IndexOutOfBounds(
                f"Given Song Index is Invalid: {position} (queue has {len(self.entries)})"
            )
        return position - 1

    def current(self) -> Optional[Track]:
        if self.cursor is None:
            return None
        return self.entries[self.cursor]

    @property
    def position(self) -> Optional[int]:
        """1-based position of the cursor, None before the first play."""
        return None if self.cursor is None else self.cursor + 1

    def is_last(self) -> bool:
        """True when there is no entry after the cursor."""
        start = -1 if self.cursor is None else self.cursor
        return start + 1 >= len(self.entries)

    def next_index(self) -> int:
        """Index of the entry after the cursor, without moving it.

        Raises:
            IndexOutOfBounds: If the cursor is already at the last entry
        """
        if self.is_last():
            raise IndexOutOfBounds("No track after the current one")
        return 0 if self.cursor is None else self.cursor + 1

    def prev_index(self) -> int:
        """Index of the entry before the cursor, without moving it.

        Raises:
            IndexOutOfBounds: If the cursor is at the first entry or unset
        """
        if not self.cursor:
            raise IndexOutOfBounds("No track before the current one")
        return self.cursor - 1

    def advance(self) -> Track:
        """Move the cursor to the next entry."""
        self.cursor = self.next_index()
        return self.entries[self.cursor]

    def retreat(self) -> Track:
        """Move the cursor to the previous entry."""
        self.cursor = self.prev_index()
        return self.entries[self.cursor]

    def jump(self, position: int) -> Track:
        """Point the cursor at a 1-based position.

        Raises:
            IndexOutOfBounds: If position is outside [1, len]
        """
        self.cursor = self.index(position)
        return self.entries[self.cursor]

    def get(self, position: int) -> Track:
        """Return the track at a 1-based position."""
        return self.entries[self.index(position)]

    def remove(self, position: int) -> tuple[Track, bool]:
        """Remove the entry at a 1-based position.

        An entry removed before the cursor shifts the cursor back so it keeps
        pointing at the same track. When the current entry is removed, the
        following entry takes its place; if there is none, the cursor moves to
        the new last entry (or None once the queue is empty).

        Returns:
            (removed track, whether it was the current entry)

        Raises:
            IndexOutOfBounds: If position is outside [1, len]
        """
        index = self.index(position)
        removed = self.entries.pop(index)
        was_current = index == self.cursor

        if self.cursor is not None:
            if not self.entries:
                self.cursor = None
            elif index < self.cursor:
                self.cursor -= 1
            elif was_current and self.cursor >= len(self.entries):
                self.cursor = len(self.entries) - 1

        return removed, was_current

    def clear(self) -> None:
        self.entries.clear()
        self.cursor = None

    def names(self) -> List[str]:
        return [track.name for track in self.entries]

    def ids(self) -> List[Optional[int]]:
        return [track.id for track in self.entries]
