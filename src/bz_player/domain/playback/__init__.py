"""Playback domain - queue, audio sink and completion detection.

This domain handles:
- The playback queue and its cursor
- MPV integration via JSON IPC behind a locked sink handle
- The play/pause/skip/jump state machine
- Background detection of finished tracks
"""

# Errors
from .exceptions import PlayerError, EmptyQueue, IndexOutOfBounds, LastSong

# Queue
from .queue import PlaybackQueue

# Player integration
from .player import (
    AudioSink,
    Backend,
    MpvBackend,
    SinkState,
    check_mpv_available,
    start_mpv,
)

# Engine
from .engine import PlaybackEngine, RemoveOutcome
from .watcher import CompletionWatcher

__all__ = [
    # Errors
    "PlayerError",
    "EmptyQueue",
    "IndexOutOfBounds",
    "LastSong",
    # Queue
    "PlaybackQueue",
    # Player integration
    "AudioSink",
    "Backend",
    "MpvBackend",
    "SinkState",
    "check_mpv_available",
    "start_mpv",
    # Engine
    "PlaybackEngine",
    "RemoveOutcome",
    "CompletionWatcher",
]
