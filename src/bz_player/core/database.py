"""
SQLite database operations for BZ Player
"""

import sqlite3
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import Config, get_data_dir

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS songs (
        song_id INTEGER PRIMARY KEY AUTOINCREMENT,
        song_name TEXT UNIQUE NOT NULL,
        song_path TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS playlists (
        playlist_id INTEGER PRIMARY KEY AUTOINCREMENT,
        playlist_name TEXT UNIQUE NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS playlist_song_link (
        playlist_id INTEGER NOT NULL,
        song_id INTEGER NOT NULL,
        PRIMARY KEY (playlist_id, song_id),
        FOREIGN KEY (playlist_id) REFERENCES playlists (playlist_id) ON DELETE CASCADE,
        FOREIGN KEY (song_id) REFERENCES songs (song_id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_playlist_song_link_song_id ON playlist_song_link (song_id)",
)


def get_database_path(config: Optional[Config] = None) -> Path:
    """Get the path to the SQLite catalog file."""
    if config is not None and config.database.path:
        return Path(config.database.path)
    return get_data_dir() / "song.db"


def connect(db_path: Path) -> sqlite3.Connection:
    """Open a catalog connection that may be shared between threads.

    The caller is responsible for serializing access (one statement at a time).
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    # Timeout covers a scan thread holding a write transaction
    conn = sqlite3.connect(db_path, timeout=30.0, check_same_thread=False)
    conn.row_factory = sqlite3.Row  # Enable dict-like access

    # Link rows rely on ON DELETE CASCADE
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_database(conn: sqlite3.Connection) -> None:
    """Create the catalog tables. Safe to run on every startup."""
    for statement in SCHEMA:
        conn.execute(statement)
    conn.commit()
    logger.debug("Catalog schema ensured")
