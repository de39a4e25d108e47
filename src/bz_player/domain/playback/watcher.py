"""
Completion watcher: detects the natural end of a track.

The watcher thread parks until the engine reports a newly loaded track, then
polls the sink until it is empty and sends exactly one TRACK_FINISHED
notification tagged with the load's generation. It never touches the queue;
the control loop decides what plays next.
"""

import threading
from typing import Optional

from loguru import logger

from bz_player import notifications
from bz_player.notifications import NotificationChannel

from .player import AudioSink

DEFAULT_POLL_INTERVAL = 0.5


class CompletionWatcher:
    """Background detector of sink emptiness."""

    def __init__(
        self,
        sink: AudioSink,
        channel: NotificationChannel,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.sink = sink
        self.channel = channel
        self.poll_interval = poll_interval
        self._loaded = threading.Event()
        self._stopped = threading.Event()
        self._lock = threading.Lock()
        self._generation = 0
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run, name="CompletionWatcher", daemon=True
        )
        self._thread.start()

    def track_loaded(self, generation: int) -> None:
        """Wake the watcher for the stream loaded under generation."""
        with self._lock:
            self._generation = generation
        self._loaded.set()

    def stop(self, timeout: Optional[float] = 2.0) -> None:
        self._stopped.set()
        self._loaded.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        logger.debug("Completion watcher started")
        while True:
            self._loaded.wait()
            if self._stopped.is_set():
                break
            self._loaded.clear()
            with self._lock:
                generation = self._generation
            self._watch(generation)
        logger.debug("Completion watcher stopped")

    def _watch(self, generation: int) -> None:
        """Poll until the sink empties, a newer track loads, or stop()."""
        while not self._stopped.is_set():
            if self.sink.is_empty():
                logger.debug(f"Track finished (generation {generation})")
                self.channel.send(
                    notifications.WATCHER,
                    "Track finished",
                    notifications.TRACK_FINISHED,
                    generation,
                )
                return
            # Returns early when another track is loaded
            if self._loaded.wait(self.poll_interval):
                return
