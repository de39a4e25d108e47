"""Library domain - tracks, catalog storage and directory scanning.

This domain handles:
- Track and playlist data models
- Opening audio streams and probing metadata
- The SQLite song catalog
- Background directory scanning
"""

# Models
from .models import Playlist, Track, SUPPORTED_FORMATS, is_valid_song_path

# Errors
from .exceptions import (
    SongError,
    InvalidSongPath,
    InvalidSongFormat,
    SongAccessError,
    CatalogError,
    EntryNotFound,
    AccessFailed,
    InvalidPath,
    NameAlreadyExists,
    DatabaseError,
)

# Audio streams
from .metadata import DecodedStream, open_stream, probe_audio, format_duration

# Catalog and scanning
from .catalog import CatalogStore
from .scanner import DirectoryScanner

__all__ = [
    # Models
    "Playlist",
    "Track",
    "SUPPORTED_FORMATS",
    "is_valid_song_path",
    # Errors
    "SongError",
    "InvalidSongPath",
    "InvalidSongFormat",
    "SongAccessError",
    "CatalogError",
    "EntryNotFound",
    "AccessFailed",
    "InvalidPath",
    "NameAlreadyExists",
    "DatabaseError",
    # Audio streams
    "DecodedStream",
    "open_stream",
    "probe_audio",
    "format_duration",
    # Catalog and scanning
    "CatalogStore",
    "DirectoryScanner",
]
