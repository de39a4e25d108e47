"""Playback exceptions for error handling."""


class PlayerError(Exception):
    """Base exception for queue and engine operations."""

    default_message = "Player error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)


class EmptyQueue(PlayerError):
    """Raised when playback is requested with nothing queued."""

    default_message = "Queue is Empty"


class IndexOutOfBounds(PlayerError):
    """Raised when a queue position or skip target does not exist."""

    default_message = "Given Song Index is Invalid"


class LastSong(PlayerError):
    """Raised when the queue has no track after the current one."""

    default_message = "No More Song in the Queue"
