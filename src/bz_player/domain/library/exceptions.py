"""Track and catalog exceptions for error handling."""


class SongError(Exception):
    """Base exception for track validation and access."""

    default_message = "Song error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)


class InvalidSongPath(SongError):
    """Raised when the track's file does not exist."""

    default_message = "Song Path Cannot be Found"


class InvalidSongFormat(SongError):
    """Raised when the file extension is missing or not playable."""

    default_message = "Only ogg, wav, mp3 are supported"


class SongAccessError(SongError):
    """Raised when the track's file cannot be opened for decoding."""

    default_message = "No Access to Song File"


class CatalogError(Exception):
    """Base exception for catalog operations."""

    default_message = "Catalog error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)


class EntryNotFound(CatalogError):
    """Raised when no song or playlist matches the lookup."""

    default_message = "Entry Not Found"


class AccessFailed(CatalogError):
    """Raised when the database or a folder cannot be opened."""

    default_message = "Cannot Access the Database"


class InvalidPath(CatalogError):
    """Raised when a directory to scan does not exist."""

    default_message = "The given path does not exist"


class NameAlreadyExists(CatalogError):
    """Raised when a playlist name is already taken."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Playlist '{name}' already exists")


class DatabaseError(CatalogError):
    """Raised for any other storage failure; carries the engine's diagnostic."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Database error: {detail}")
