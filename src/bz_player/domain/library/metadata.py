"""
Audio stream opening and metadata probing.

Uses Mutagen to read duration and codec information before a track is
handed to the audio sink.
"""

from typing import NamedTuple, Optional

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError

from .exceptions import SongAccessError
from .models import Track

# Bytes read to prove the file is readable
HEADER_PROBE_BYTES = 4096


class DecodedStream(NamedTuple):
    """A track opened for playback."""

    path: str
    name: str
    duration: Optional[float] = None  # in seconds, None when unknown
    codec: Optional[str] = None


def probe_audio(path: str) -> tuple[Optional[float], Optional[str]]:
    """Read (duration, codec) with Mutagen; (None, None) when unrecognized."""
    try:
        audio = MutagenFile(path)
    except MutagenError as e:
        logger.warning(f"Could not read audio info from {path}: {e}")
        return None, None

    if audio is None or audio.info is None:
        return None, None

    duration = getattr(audio.info, "length", None)
    codec = type(audio).__name__.lower()
    return (float(duration) if duration else None), codec


def open_stream(track: Track) -> DecodedStream:
    """Open the track's file for playback.

    The file existed when the Track was built, but it may have been removed or
    made unreadable since.

    Raises:
        SongAccessError: If the file cannot be opened
    """
    try:
        with open(track.path, "rb") as f:
            f.read(HEADER_PROBE_BYTES)
    except OSError as e:
        logger.error(f"Cannot open {track.path}: {e}")
        raise SongAccessError(f"No Access to Song File: {track.name}") from e

    duration, codec = probe_audio(track.path)
    return DecodedStream(
        path=track.path, name=track.name, duration=duration, codec=codec
    )


def format_duration(seconds: Optional[float]) -> str:
    """Format a duration in seconds as MM:SS ('--:--' when unknown)."""
    if seconds is None or seconds < 0:
        return "--:--"

    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"
