"""Application context for explicit state passing.

Bundles the long-lived services the command handlers work with, so handlers
receive everything through one argument instead of reaching for globals.
"""

from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console

from bz_player.core.config import Config
from bz_player.core.console import get_console
from bz_player.domain.library.catalog import CatalogStore
from bz_player.domain.library.scanner import DirectoryScanner
from bz_player.domain.playback.engine import PlaybackEngine
from bz_player.notifications import NotificationChannel


@dataclass
class AppContext:
    """Services shared by the control loop and command handlers.

    Attributes:
        config: Application configuration
        channel: Notification channel drained by the control loop
        catalog: Song catalog
        scanner: Background directory scanner writing into catalog
        engine: Playback engine (queue, sink, completion watcher)
        console: Rich Console for formatted output
    """

    config: Config
    channel: NotificationChannel
    catalog: CatalogStore
    scanner: DirectoryScanner
    engine: PlaybackEngine
    console: Console = field(default_factory=get_console)

    @classmethod
    def create(
        cls,
        config: Config,
        catalog: CatalogStore,
        engine: PlaybackEngine,
        console: Optional[Console] = None,
    ) -> "AppContext":
        """Wire the scanner to the catalog; catalog and engine share one channel."""
        scanner = DirectoryScanner(
            catalog,
            default_dir=config.music.default_audio_dir,
            excluded_dirs=config.music.excluded_dirs,
        )
        return cls(
            config=config,
            channel=catalog.channel,
            catalog=catalog,
            scanner=scanner,
            engine=engine,
            console=console or get_console(),
        )

    def close(self) -> None:
        """Release the audio output and the catalog connection."""
        self.engine.shutdown()
        self.scanner.join(timeout=1.0)
        self.catalog.close()
