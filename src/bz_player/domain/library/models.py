"""
Music library domain models.

Contains data structures for representing tracks and playlists.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .exceptions import InvalidSongFormat, InvalidSongPath

SUPPORTED_FORMATS = ("mp3", "ogg", "wav")


def song_extension(path: Union[str, Path]) -> str:
    """Lowercase extension without the dot ('' when absent)."""
    return Path(path).suffix.lower().lstrip(".")


def is_valid_song_path(path: Union[str, Path], formats=SUPPORTED_FORMATS) -> bool:
    """Check that path is an existing file with a playable extension."""
    path = Path(path)
    return song_extension(path) in formats and path.is_file()


@dataclass(frozen=True)
class Track:
    """A validated reference to one playable file.

    Construction fails with InvalidSongPath when the file is missing and with
    InvalidSongFormat when its extension is not playable. The id is None for
    tracks not yet stored in the catalog.
    """

    name: str
    path: str
    id: Optional[int] = None

    def __post_init__(self) -> None:
        path = Path(self.path)
        if not path.exists():
            raise InvalidSongPath(f"Song Path Cannot be Found: {self.path}")
        if song_extension(path) not in SUPPORTED_FORMATS:
            raise InvalidSongFormat()

    def get_path(self) -> Path:
        return Path(self.path)


@dataclass
class Playlist:
    """A named, ordered collection of catalog tracks."""

    id: int
    name: str
    songs: List[Track] = field(default_factory=list)

    def add_song(self, track: Track) -> None:
        self.songs.append(track)

    def __len__(self) -> int:
        return len(self.songs)
