"""BZ Player - terminal music player with a SQLite song catalog."""

__version__ = "0.1.0"
