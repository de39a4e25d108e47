"""
Playback engine: the queue, the audio sink and the completion watcher.

All queue mutation happens on the control loop's thread through this class.
The watcher only reports that the sink emptied; the control loop passes that
report back in through handle_track_finished().

Every stream load (and every deliberate stop) bumps a generation counter. A
TRACK_FINISHED notification from an older generation describes a stream the
user already replaced and is ignored.
"""

from typing import List, NamedTuple, Optional

from loguru import logger

from bz_player import notifications
from bz_player.domain.library.exceptions import SongAccessError
from bz_player.domain.library.metadata import open_stream
from bz_player.domain.library.models import Playlist, Track
from bz_player.notifications import NotificationChannel

from .exceptions import EmptyQueue, LastSong
from .player import AudioSink, SinkState
from .queue import PlaybackQueue
from .watcher import DEFAULT_POLL_INTERVAL, CompletionWatcher


class RemoveOutcome(NamedTuple):
    """Result of removing a queue entry."""

    removed: Track
    queue_empty: bool
    now_playing: Optional[Track] = None  # Track loaded because of the removal


class PlaybackEngine:
    """State machine driving one audio sink from a playback queue."""

    def __init__(
        self,
        sink: AudioSink,
        channel: Optional[NotificationChannel] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.sink = sink
        self.channel = channel if channel is not None else NotificationChannel()
        self.queue = PlaybackQueue()
        self.generation = 0
        self.watcher = CompletionWatcher(sink, self.channel, poll_interval)
        self.watcher.start()

    # ------------------------------------------------------------------
    # Sink control
    # ------------------------------------------------------------------

    def _load(self, index: int) -> Track:
        """Force-load the queue entry at index and wake the watcher.

        The cursor only moves to index once the sink has accepted the stream,
        so a failed load leaves the queue pointing at what was playing.

        Raises:
            SongAccessError: If the file can no longer be opened, or the
                audio output refuses it (playback is stopped)
        """
        track = self.queue.entries[index]
        stream = open_stream(track)
        self.generation += 1
        if not self.sink.replace(stream):
            self.sink.clear()
            logger.error(f"Audio output refused {track.path}")
            raise SongAccessError(f"Could not Play Song: {track.name}")

        self.queue.cursor = index
        self.watcher.track_loaded(self.generation)
        logger.info(
            f"Loaded {track.name} (position {self.queue.position}, generation {self.generation})"
        )
        self.channel.send(notifications.PLAYER, f"Playing {track.name}")
        return track

    def _stop(self) -> None:
        self.generation += 1
        self.sink.clear()
        logger.info("Playback stopped")

    def state(self) -> SinkState:
        return self.sink.state()

    def is_empty(self) -> bool:
        return self.sink.is_empty()

    # ------------------------------------------------------------------
    # Queue building
    # ------------------------------------------------------------------

    def add_track(self, track: Track) -> int:
        """Queue a track; start it right away if nothing is loaded.

        Returns:
            New queue length
        """
        length = self.queue.append(track)
        if self.sink.is_empty():
            self._load(length - 1)
        return length

    def add_playlist(self, playlist: Playlist) -> int:
        """Queue every member of playlist; start the first if nothing is loaded."""
        if not playlist.songs:
            return len(self.queue)

        first_new = len(self.queue) + 1
        was_empty = self.sink.is_empty()
        length = self.queue.extend(playlist.songs)
        logger.info(f"Queued playlist {playlist.name} ({len(playlist)} songs)")
        if was_empty:
            self._load(first_new - 1)
        return length

    def clear_tracks(self) -> None:
        """Empty the queue and stop playback."""
        self.queue.clear()
        self._stop()

    def remove_track(self, position: int) -> RemoveOutcome:
        """Remove the entry at a 1-based position.

        Removing the current track loads the one that slides into its place.
        If the current track was also the last one, playback stops with the
        cursor on the new last entry. Removing the only entry empties the
        queue and stops playback.

        Raises:
            IndexOutOfBounds: If position is outside [1, len]
        """
        was_last = position == len(self.queue)
        removed, was_current = self.queue.remove(position)

        if not self.queue:
            self._stop()
            return RemoveOutcome(removed, True)

        if not was_current:
            return RemoveOutcome(removed, False)

        if was_last:
            self._stop()
            return RemoveOutcome(removed, False)

        return RemoveOutcome(removed, False, self._load(self.queue.cursor))

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def play(self, forced: bool = False) -> Optional[Track]:
        """Start or resume playback.

        forced reloads the track under the cursor (the first one if the queue
        never started); otherwise a paused stream simply resumes.

        Raises:
            EmptyQueue: If nothing is queued
            SongAccessError: If a forced reload cannot open the file
        """
        if not self.queue:
            raise EmptyQueue()

        if forced:
            index = 0 if self.queue.cursor is None else self.queue.cursor
            return self._load(index)

        self.sink.play()
        return self.queue.current()

    def pause(self) -> None:
        if self.sink.state() is SinkState.PLAYING:
            self.sink.pause()

    def toggle(self) -> SinkState:
        """Pause when playing, resume when paused, start when nothing is loaded."""
        state = self.sink.state()
        if state is SinkState.PLAYING:
            self.sink.pause()
            return SinkState.PAUSED
        if state is SinkState.PAUSED:
            self.sink.play()
        else:
            self.play(forced=True)
        return SinkState.PLAYING

    def next_track(self) -> Track:
        """Advance to and load the next entry.

        Raises:
            IndexOutOfBounds: If the cursor is on the last entry (cursor unchanged)
            SongAccessError: If the next file cannot be played (cursor unchanged)
        """
        return self._load(self.queue.next_index())

    def prev_track(self) -> Track:
        """Step back to and load the previous entry.

        Raises:
            IndexOutOfBounds: If the cursor is on the first entry
        """
        return self._load(self.queue.prev_index())

    def jump_track(self, position: int) -> Track:
        """Load the entry at a 1-based position.

        Raises:
            IndexOutOfBounds: If position is outside [1, len]
        """
        return self._load(self.queue.index(position))

    def handle_track_finished(self, generation: int) -> Optional[Track]:
        """React to a TRACK_FINISHED notification from the watcher.

        Returns:
            The next track now playing, or None for a stale notification

        Raises:
            LastSong: If the finished track was the last one queued
        """
        if generation != self.generation:
            logger.debug(
                f"Ignoring stale finish (generation {generation}, current {self.generation})"
            )
            return None

        if self.queue.is_last():
            logger.info("Reached the end of the queue")
            raise LastSong()

        return self.next_track()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def queue_names(self) -> List[str]:
        return self.queue.names()

    def queue_ids(self) -> List[Optional[int]]:
        return self.queue.ids()

    def current_position(self) -> Optional[int]:
        """1-based position of the current track, None before the first play."""
        return self.queue.position

    def current_track(self) -> Optional[Track]:
        return self.queue.current()

    def is_last(self) -> bool:
        return self.queue.is_last()

    def song_detail(self, position: int) -> Track:
        """Return the queued track at a 1-based position.

        Raises:
            IndexOutOfBounds: If position is outside [1, len]
        """
        return self.queue.get(position)

    def shutdown(self) -> None:
        """Stop the watcher and release the audio output."""
        self.watcher.stop()
        self.sink.close()
        logger.info("Playback engine shut down")
