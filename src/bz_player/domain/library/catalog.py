"""
Song catalog: songs, playlists, and playlist membership in SQLite.

One connection is shared between the control loop and scanner threads.
Each statement runs under the store's lock; multi-statement operations hold
it for their whole duration. sqlite3 errors never leave this module: they
are converted to CatalogError subclasses.
"""

import sqlite3
import threading
from pathlib import Path
from typing import Iterable, Optional, Union

from loguru import logger

from bz_player import notifications
from bz_player.core.database import connect, init_database
from bz_player.notifications import NotificationChannel

from .exceptions import (
    AccessFailed,
    CatalogError,
    DatabaseError,
    EntryNotFound,
    InvalidSongFormat,
    InvalidSongPath,
    NameAlreadyExists,
)
from .models import Playlist, Track, is_valid_song_path

INSERT_SONG_QUERY = "INSERT INTO songs (song_name, song_path) VALUES (?, ?)"
RETRIEVE_ID_QUERY = "SELECT song_id FROM songs WHERE song_name = ? AND song_path = ?"


def _like_pattern(text: str) -> str:
    """Substring LIKE pattern with the wildcard characters escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CatalogStore:
    """Persistent catalog of tracks and playlists."""

    def __init__(
        self,
        db_path: Union[str, Path],
        channel: Optional[NotificationChannel] = None,
    ):
        """Open (and create if needed) the catalog at db_path.

        Raises:
            AccessFailed: If the database file cannot be opened
            DatabaseError: If the schema cannot be created
        """
        self.db_path = Path(db_path)
        self.channel = channel if channel is not None else NotificationChannel()
        self._lock = threading.RLock()

        try:
            self._conn = connect(self.db_path)
        except (sqlite3.OperationalError, OSError) as e:
            logger.error(f"Cannot open catalog {self.db_path}: {e}")
            raise AccessFailed(f"Cannot Access the Database: {self.db_path}") from e

        try:
            init_database(self._conn)
        except sqlite3.Error as e:
            self._conn.close()
            raise DatabaseError(str(e)) from e

        logger.info(f"Catalog opened: {self.db_path}")

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _notify(self, message: str, kind: str = notifications.INFO,
                source: str = notifications.CATALOG) -> None:
        self.channel.send(source, message, kind)

    # ------------------------------------------------------------------
    # Songs
    # ------------------------------------------------------------------

    def _row_to_track(self, row: sqlite3.Row) -> Track:
        """Build a Track from a songs row, pruning it if the file is gone.

        Caller must hold the lock.
        """
        song_id = row["song_id"]
        try:
            return Track(row["song_name"], row["song_path"], song_id)
        except InvalidSongPath as e:
            logger.warning(
                f"Pruning song #{song_id}: file missing at {row['song_path']}"
            )
            self._conn.execute("DELETE FROM songs WHERE song_id = ?", (song_id,))
            self._conn.commit()
            self._notify(
                f"Removed missing song {row['song_name']} from catalog",
                notifications.WARNING,
            )
            raise EntryNotFound(f"Song '{row['song_name']}' no longer exists") from e
        except InvalidSongFormat as e:
            raise DatabaseError(f"song #{song_id} has an unplayable path") from e

    def find_song_by_name(self, pattern: str) -> Track:
        """Find the best catalog match for a case-insensitive substring.

        An exact (case-insensitive) name match wins; otherwise the lowest
        song_id among the substring matches is returned. Matches whose file
        has disappeared are pruned and the next match is tried.

        Raises:
            EntryNotFound: If no song matches
            DatabaseError: On storage failure
        """
        with self._lock:
            while True:
                try:
                    row = self._conn.execute(
                        """
                        SELECT song_id, song_name, song_path FROM songs
                        WHERE song_name LIKE ? ESCAPE '\\'
                        ORDER BY lower(song_name) = lower(?) DESC, song_id ASC
                        LIMIT 1
                        """,
                        (_like_pattern(pattern), pattern),
                    ).fetchone()
                except sqlite3.Error as e:
                    raise DatabaseError(str(e)) from e

                if row is None:
                    raise EntryNotFound(f"404 Song Not Found: {pattern}")

                try:
                    return self._row_to_track(row)
                except EntryNotFound:
                    continue
                except sqlite3.Error as e:
                    raise DatabaseError(str(e)) from e

    def find_song_by_id(self, song_id: int) -> Track:
        """Load one song; a row whose file is gone is deleted (self-healing read).

        Raises:
            EntryNotFound: If the id is unknown or its file no longer exists
            DatabaseError: On storage failure
        """
        with self._lock:
            try:
                row = self._conn.execute(
                    "SELECT song_id, song_name, song_path FROM songs WHERE song_id = ?",
                    (song_id,),
                ).fetchone()
                if row is None:
                    raise EntryNotFound(f"Song #{song_id} not found")
                return self._row_to_track(row)
            except sqlite3.Error as e:
                raise DatabaseError(str(e)) from e

    def filter_song(self, pattern: str) -> list[tuple[str, int]]:
        """Return every (name, id) whose name contains pattern. May be empty."""
        with self._lock:
            try:
                cursor = self._conn.execute(
                    """
                    SELECT song_name, song_id FROM songs
                    WHERE song_name LIKE ? ESCAPE '\\'
                    ORDER BY song_id
                    """,
                    (_like_pattern(pattern),),
                )
                return [(row["song_name"], row["song_id"]) for row in cursor.fetchall()]
            except sqlite3.Error as e:
                raise DatabaseError(str(e)) from e

    def _insert_song(self, name: str, path: str, source: str) -> tuple[int, bool]:
        """Insert-or-fetch one song without committing. Caller holds the lock.

        Returns:
            (song_id, created)
        """
        try:
            cursor = self._conn.execute(INSERT_SONG_QUERY, (name, path))
        except sqlite3.IntegrityError:
            row = self._conn.execute(RETRIEVE_ID_QUERY, (name, path)).fetchone()
            if row is None:
                raise DatabaseError(
                    f"'{name}' is already registered under a different path"
                )
            logger.debug(f"Duplicate song skipped: {path}")
            self._notify(f"Skipped duplicate {name}", source=source)
            return row["song_id"], False

        logger.debug(f"Song added: {path}")
        self._notify(f"Added {name}", source=source)
        return cursor.lastrowid, True

    def register_song(self, name: str, path: str,
                      source: str = notifications.CATALOG) -> tuple[int, bool]:
        """Insert-or-fetch a song.

        Registering the same (name, path) again returns the existing id, so
        rescanning a tree never duplicates rows.

        Returns:
            (song_id, created) where created is False for a duplicate

        Raises:
            DatabaseError: On storage failure, or if name is taken by another path
        """
        with self._lock:
            try:
                result = self._insert_song(name, path, source)
                self._conn.commit()
                return result
            except sqlite3.Error as e:
                self._conn.rollback()
                raise DatabaseError(str(e)) from e
            except CatalogError:
                self._conn.rollback()
                raise

    def create_song(self, name: str, path: str,
                    source: str = notifications.CATALOG) -> int:
        """Register a song and return its id (existing id for a duplicate)."""
        return self.register_song(name, path, source)[0]

    def delete_song(self, song_id: int) -> bool:
        """Delete a song and its playlist memberships. False if unknown."""
        with self._lock:
            try:
                cursor = self._conn.execute(
                    "DELETE FROM songs WHERE song_id = ?", (song_id,)
                )
                self._conn.commit()
                return cursor.rowcount > 0
            except sqlite3.Error as e:
                self._conn.rollback()
                raise DatabaseError(str(e)) from e

    # ------------------------------------------------------------------
    # Playlists
    # ------------------------------------------------------------------

    def _insert_playlist(self, name: str) -> int:
        """Insert a playlist row without committing. Caller holds the lock."""
        try:
            cursor = self._conn.execute(
                "INSERT INTO playlists (playlist_name) VALUES (?)", (name,)
            )
        except sqlite3.IntegrityError as e:
            raise NameAlreadyExists(name) from e
        return cursor.lastrowid

    def create_playlist(self, name: str) -> int:
        """Create an empty playlist and return its id.

        Raises:
            NameAlreadyExists: If the name is taken
            DatabaseError: On storage failure
        """
        with self._lock:
            try:
                playlist_id = self._insert_playlist(name)
                self._conn.commit()
            except sqlite3.Error as e:
                self._conn.rollback()
                raise DatabaseError(str(e)) from e
            except CatalogError:
                self._conn.rollback()
                raise

        logger.info(f"Playlist created: {name} (#{playlist_id})")
        return playlist_id

    def _playlist_exists(self, playlist_id: int) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM playlists WHERE playlist_id = ?", (playlist_id,)
        ).fetchone()
        return row is not None

    def _link_songs(self, playlist_id: int, song_ids: Iterable[int]) -> int:
        """Insert link rows, skipping constraint violations. Caller holds the lock."""
        added = 0
        for song_id in song_ids:
            try:
                self._conn.execute(
                    "INSERT INTO playlist_song_link (playlist_id, song_id) VALUES (?, ?)",
                    (playlist_id, song_id),
                )
                added += 1
            except sqlite3.IntegrityError:
                logger.debug(f"Song #{song_id} not linked to playlist #{playlist_id}")
                continue
        return added

    def add_playlist_song(self, playlist_id: int, song_ids: Iterable[int]) -> int:
        """Add songs to a playlist; ids already present are skipped.

        Returns:
            Number of songs newly linked

        Raises:
            EntryNotFound: If the playlist does not exist
            DatabaseError: On storage failure
        """
        with self._lock:
            try:
                if not self._playlist_exists(playlist_id):
                    raise EntryNotFound(f"Playlist #{playlist_id} not found")
                added = self._link_songs(playlist_id, song_ids)
                self._conn.commit()
            except sqlite3.Error as e:
                self._conn.rollback()
                raise DatabaseError(str(e)) from e

        logger.info(f"Linked {added} songs to playlist #{playlist_id}")
        return added

    def create_playlist_from_path(
        self, name: Optional[str], folder: Union[str, Path]
    ) -> int:
        """Create a playlist from the playable files directly inside folder.

        Files are registered as songs (insert-or-fetch) and linked in name
        order. An empty name falls back to the folder's own name. A file that
        cannot be registered is reported and skipped.

        Returns:
            New playlist id

        Raises:
            AccessFailed: If the folder cannot be listed
            NameAlreadyExists: If the playlist name is taken
            DatabaseError: On storage failure
        """
        folder = Path(folder)
        try:
            entries = sorted(folder.iterdir())
        except OSError as e:
            raise AccessFailed(f"Cannot read folder {folder}") from e

        name = name or folder.name

        with self._lock:
            try:
                playlist_id = self._insert_playlist(name)
                song_ids = []
                for entry in entries:
                    if not is_valid_song_path(entry):
                        continue
                    try:
                        song_id, _ = self._insert_song(
                            entry.name, str(entry), notifications.CATALOG
                        )
                        song_ids.append(song_id)
                    except DatabaseError as e:
                        self._notify(f"{entry.name}: {e}", notifications.ERROR)
                linked = self._link_songs(playlist_id, song_ids)
                self._conn.commit()
            except sqlite3.Error as e:
                self._conn.rollback()
                raise DatabaseError(str(e)) from e
            except CatalogError:
                self._conn.rollback()
                raise

        logger.info(f"Playlist {name} (#{playlist_id}) created from {folder}")
        self._notify(f"Created playlist {name} with {linked} songs")
        return playlist_id

    def get_playlist(self, playlist_id: int) -> Playlist:
        """Load a playlist with its member tracks in insertion order.

        Members whose files have disappeared are removed from the catalog and
        left out of the result instead of failing the load.

        Raises:
            EntryNotFound: If the playlist does not exist
            DatabaseError: On storage failure
        """
        with self._lock:
            try:
                row = self._conn.execute(
                    "SELECT playlist_name FROM playlists WHERE playlist_id = ?",
                    (playlist_id,),
                ).fetchone()
                if row is None:
                    raise EntryNotFound(f"Playlist #{playlist_id} not found")

                song_ids = [
                    link["song_id"]
                    for link in self._conn.execute(
                        """
                        SELECT song_id FROM playlist_song_link
                        WHERE playlist_id = ?
                        ORDER BY rowid
                        """,
                        (playlist_id,),
                    ).fetchall()
                ]
            except sqlite3.Error as e:
                raise DatabaseError(str(e)) from e

            playlist = Playlist(id=playlist_id, name=row["playlist_name"])
            for song_id in song_ids:
                try:
                    playlist.add_song(self.find_song_by_id(song_id))
                except EntryNotFound:
                    continue

        self._notify(playlist.name)
        return playlist

    def list_playlists(self) -> list[tuple[int, str]]:
        """Return (id, name) for every playlist, oldest first."""
        with self._lock:
            try:
                cursor = self._conn.execute(
                    "SELECT playlist_id, playlist_name FROM playlists ORDER BY playlist_id"
                )
                return [
                    (row["playlist_id"], row["playlist_name"])
                    for row in cursor.fetchall()
                ]
            except sqlite3.Error as e:
                raise DatabaseError(str(e)) from e

    def delete_playlist(self, playlist_id: int) -> bool:
        """Delete a playlist and its membership rows. False if unknown."""
        with self._lock:
            try:
                cursor = self._conn.execute(
                    "DELETE FROM playlists WHERE playlist_id = ?", (playlist_id,)
                )
                self._conn.commit()
                return cursor.rowcount > 0
            except sqlite3.Error as e:
                self._conn.rollback()
                raise DatabaseError(str(e)) from e
