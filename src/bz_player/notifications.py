"""Notification channel between background producers and the control loop.

Scanner threads, the catalog, and the completion watcher all send
human-readable messages here; the control loop is the only consumer and
drains the channel once per tick. Ordering is FIFO per producer.
"""

import queue
from typing import NamedTuple, Optional

from loguru import logger

# Sources
SCAN = "scan"
CATALOG = "catalog"
PLAYER = "player"
WATCHER = "watcher"

# Kinds
INFO = "info"
WARNING = "warning"
ERROR = "error"
TRACK_FINISHED = "track_finished"


class Notification(NamedTuple):
    """One message for the control loop."""

    source: str
    message: str
    kind: str = INFO
    generation: Optional[int] = None  # Set on TRACK_FINISHED only

    def __str__(self) -> str:
        return f"[{self.source}] {self.message}"


class NotificationChannel:
    """Multi-producer, single-consumer queue of Notification values."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Notification]" = queue.Queue()

    def send(
        self,
        source: str,
        message: str,
        kind: str = INFO,
        generation: Optional[int] = None,
    ) -> None:
        """Enqueue a notification. Never blocks."""
        logger.debug(f"notify {source}/{kind}: {message}")
        self._queue.put(Notification(source, message, kind, generation))

    def get(self, timeout: Optional[float] = None) -> Optional[Notification]:
        """Wait up to timeout seconds for the next notification."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[Notification]:
        """Return every pending notification without blocking."""
        pending = []
        while True:
            try:
                pending.append(self._queue.get_nowait())
            except queue.Empty:
                return pending
