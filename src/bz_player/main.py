"""
BZ Player - Main entry point and interactive loop
"""

import queue
import sys
import threading
from pathlib import Path
from typing import Optional

from loguru import logger

from bz_player import notifications, router
from bz_player.context import AppContext
from bz_player.core import config
from bz_player.core.console import get_console
from bz_player.core.database import get_database_path
from bz_player.core.output import log, setup_loguru
from bz_player.domain.library import CatalogError, CatalogStore, SongError
from bz_player.domain.playback import (
    AudioSink,
    LastSong,
    PlaybackEngine,
    check_mpv_available,
    start_mpv,
)
from bz_player.notifications import Notification, NotificationChannel
from bz_player.utils import parsers

# Seconds the control loop waits for input before servicing notifications
TICK_INTERVAL = 0.1

PROMPT = "bz-player> "

KIND_LEVELS = {
    notifications.INFO: "info",
    notifications.WARNING: "warning",
    notifications.ERROR: "error",
}


def setup(cfg: config.Config) -> None:
    """Prepare directories and logging."""
    config.ensure_directories()
    log_file = (
        Path(cfg.logging.log_file).expanduser()
        if cfg.logging.log_file
        else config.get_data_dir() / "bz-player.log"
    )
    setup_loguru(log_file, cfg.logging.level)


def open_catalog(cfg: config.Config, channel: NotificationChannel) -> CatalogStore:
    """Open the song catalog configured in cfg."""
    return CatalogStore(get_database_path(cfg), channel)


def _read_input(lines: "queue.Queue[Optional[str]]") -> None:
    """Feed stdin lines to the control loop; None marks end of input."""
    while True:
        try:
            lines.put(input(PROMPT))
        except (EOFError, KeyboardInterrupt):
            lines.put(None)
            return


def handle_notification(ctx: AppContext, notification: Notification) -> None:
    """Render one notification; a finished track advances the queue."""
    if notification.kind != notifications.TRACK_FINISHED:
        log(str(notification), KIND_LEVELS.get(notification.kind, "info"))
        return

    try:
        track = ctx.engine.handle_track_finished(notification.generation)
    except LastSong as e:
        log(str(e))
        return
    except SongError as e:
        log(str(e), "error")
        return

    if track is not None:
        log(f"Now Playing: {track.name}")


def run_loop(ctx: AppContext, lines: "queue.Queue[Optional[str]]") -> None:
    """Tick loop: at most one command per tick, then drain notifications."""
    should_continue = True
    while should_continue:
        try:
            line = lines.get(timeout=TICK_INTERVAL)
        except queue.Empty:
            pass
        else:
            if line is None:
                log("See Ya! Have a Great Time")
                break
            command = parsers.parse_action(line)
            ctx, should_continue = router.handle_command(ctx, command)

        for notification in ctx.channel.drain():
            handle_notification(ctx, notification)


def interactive_mode() -> None:
    """Run the interactive command loop."""
    cfg = config.load_config()
    setup(cfg)
    console = get_console()

    if not check_mpv_available():
        console.print("mpv not found. Install mpv to play music.", style="red")
        sys.exit(1)

    channel = NotificationChannel()
    try:
        catalog = open_catalog(cfg, channel)
    except CatalogError as e:
        console.print(str(e), style="red")
        sys.exit(1)

    backend = start_mpv(cfg)
    if backend is None:
        console.print("Failed to start mpv", style="red")
        catalog.close()
        sys.exit(1)

    engine = PlaybackEngine(AudioSink(backend), channel, cfg.player.poll_interval)
    ctx = AppContext.create(cfg, catalog, engine, console)

    console.print("Welcome to BZ Player!", style="bold green")
    console.print("Type 'help' for available commands, or 'exit' to quit.")

    lines: "queue.Queue[Optional[str]]" = queue.Queue()
    reader = threading.Thread(
        target=_read_input, args=(lines,), name="InputReader", daemon=True
    )
    reader.start()

    try:
        run_loop(ctx, lines)
    except KeyboardInterrupt:
        console.print("\nInterrupted by user. Cleaning up...", style="yellow")
    finally:
        ctx.close()
        logger.info("BZ Player exited")
