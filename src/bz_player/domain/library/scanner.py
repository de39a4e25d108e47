"""
Directory scanner: recursive filesystem walk that fills the song catalog.

scan() validates the root and returns at once; the walk itself runs on a
background thread and reports every outcome over the catalog's notification
channel.
"""

import threading
from pathlib import Path
from typing import Iterable, List, Optional, Union

from loguru import logger

from bz_player import notifications
from bz_player.core.output import mark_thread_silent

from .catalog import CatalogStore
from .exceptions import DatabaseError, InvalidPath
from .models import is_valid_song_path

DEFAULT_EXCLUDED_DIRS = ("node_modules", "target")


class DirectoryScanner:
    """Walks directory trees and registers playable files in a catalog."""

    def __init__(
        self,
        catalog: CatalogStore,
        default_dir: Union[str, Path],
        excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
    ):
        self.catalog = catalog
        self.default_dir = Path(default_dir).expanduser()
        self.excluded_dirs = frozenset(excluded_dirs)
        self.threads: List[threading.Thread] = []

    def _notify(self, message: str, kind: str = notifications.INFO) -> None:
        self.catalog.channel.send(notifications.SCAN, message, kind)

    def resolve(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Resolve a scan root, defaulting to the configured audio directory.

        Raises:
            InvalidPath: If the resolved path does not exist
        """
        root = Path(path).expanduser() if path else self.default_dir
        if not root.exists():
            raise InvalidPath(f"The given path does not exist: {root}")
        return root.resolve()

    def scan(self, path: Optional[Union[str, Path]] = None) -> str:
        """Start a background scan and return an acknowledgement.

        Raises:
            InvalidPath: If the resolved path does not exist
        """
        root = self.resolve(path)

        thread = threading.Thread(
            target=self._run, args=(root,), name="ScanThread", daemon=True
        )
        self.threads = [t for t in self.threads if t.is_alive()]
        self.threads.append(thread)
        thread.start()

        logger.info(f"Scan started: {root}")
        return f"Searching {root}"

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight scans to finish."""
        for thread in list(self.threads):
            thread.join(timeout)

    def _run(self, root: Path) -> None:
        # Console stays with the control loop; progress goes over the channel
        mark_thread_silent()
        try:
            added = self.fetch_songs(root)
        except Exception:
            logger.exception(f"Scan of {root} aborted")
            self._notify(f"Scan of {root} aborted", notifications.ERROR)
            return
        self._notify(f"Scan of {root} finished: {added} added")
        logger.info(f"Scan finished: {root} ({added} added)")

    def is_excluded(self, directory: Path) -> bool:
        """True when the directory's name matches any excluded name."""
        return directory.name in self.excluded_dirs

    def fetch_songs(self, root: Path) -> int:
        """Walk root recursively, registering every playable file.

        Per-item failures are reported and skipped; the walk always continues.

        Returns:
            Number of newly added songs
        """
        added = 0
        try:
            entries = sorted(root.iterdir())
        except OSError as e:
            logger.warning(f"Can't read dir {root}: {e}")
            self._notify(f"Can't read dir: {root}", notifications.WARNING)
            return 0

        for entry in entries:
            if entry.is_dir():
                # Linked directories can loop back into the tree
                if entry.is_symlink():
                    logger.debug(f"Skipping linked dir: {entry}")
                    continue
                if self.is_excluded(entry):
                    logger.debug(f"Skipping excluded dir: {entry}")
                    continue
                added += self.fetch_songs(entry)
                continue

            if not is_valid_song_path(entry):
                continue

            try:
                _, created = self.catalog.register_song(
                    entry.name, str(entry), source=notifications.SCAN
                )
            except DatabaseError as e:
                logger.warning(f"Could not register {entry}: {e.detail}")
                self._notify(f"Database error: {e.detail}", notifications.ERROR)
                continue

            if created:
                added += 1

        return added
