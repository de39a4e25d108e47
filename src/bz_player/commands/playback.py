"""
Playback command handlers for BZ Player.

Handles: add, play, pause, toggle, next, prev, jump, remove, clear, queue
"""

from typing import Tuple

from rich.table import Table

from bz_player.context import AppContext
from bz_player.core.output import log
from bz_player.domain.library import CatalogError, SongError
from bz_player.domain.playback import PlayerError, SinkState
from bz_player.domain.library.metadata import format_duration, probe_audio
from bz_player.utils.parsers import Add, AddPlaylist, AddSongs, Jump, Remove


def handle_add_command(ctx: AppContext, command: Add) -> Tuple[AppContext, bool]:
    """Find a song by name and queue it."""
    if not command.name:
        log("Specify Song Name", "warning")
        return ctx, True

    try:
        track = ctx.catalog.find_song_by_name(command.name)
        index = ctx.engine.add_track(track)
    except (CatalogError, SongError, PlayerError) as e:
        log(str(e), "error")
        return ctx, True

    log(f"Added {track.name} to queue @ {index}", "success")
    return ctx, True


def handle_add_songs_command(ctx: AppContext, command: AddSongs) -> Tuple[AppContext, bool]:
    """Queue catalog songs by id (ids as listed by search)."""
    if not command.song_ids:
        log("Specify song ids, e.g. 'add -s 3 7'", "warning")
        return ctx, True

    for song_id in command.song_ids:
        try:
            track = ctx.catalog.find_song_by_id(song_id)
            index = ctx.engine.add_track(track)
        except (CatalogError, SongError, PlayerError) as e:
            log(f"#{song_id}: {e}", "error")
            continue
        log(f"Added {track.name} to queue @ {index}", "success")

    return ctx, True


def handle_add_playlist_command(
    ctx: AppContext, command: AddPlaylist
) -> Tuple[AppContext, bool]:
    """Queue every song of a stored playlist."""
    if command.playlist_id is None:
        log("Please Mention the playlist id, use 'help' for more info", "warning")
        return ctx, True

    try:
        playlist = ctx.catalog.get_playlist(command.playlist_id)
        index = ctx.engine.add_playlist(playlist)
    except (CatalogError, SongError, PlayerError) as e:
        log(str(e), "error")
        return ctx, True

    log(f"Added Playlist {playlist.name} @ {index}", "success")
    return ctx, True


def handle_play_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    """Resume playback, or start the queue when nothing is loaded."""
    try:
        track = ctx.engine.play(forced=ctx.engine.is_empty())
    except (PlayerError, SongError) as e:
        log(str(e), "warning")
        return ctx, True

    log(f"Track Resumed: {track.name}" if track else "Track Resumed")
    return ctx, True


def handle_pause_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    ctx.engine.pause()
    log("Paused.")
    return ctx, True


def handle_toggle_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    try:
        state = ctx.engine.toggle()
    except (PlayerError, SongError) as e:
        log(str(e), "warning")
        return ctx, True

    log("Paused." if state is SinkState.PAUSED else "Track Resumed")
    return ctx, True


def handle_next_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    try:
        track = ctx.engine.next_track()
    except (PlayerError, SongError) as e:
        log(str(e), "warning")
        return ctx, True

    log(f"Skipped Track, Now Playing: {track.name}")
    return ctx, True


def handle_prev_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    try:
        track = ctx.engine.prev_track()
    except (PlayerError, SongError) as e:
        log(str(e), "warning")
        return ctx, True

    log(f"Back to: {track.name}")
    return ctx, True


def handle_jump_command(ctx: AppContext, command: Jump) -> Tuple[AppContext, bool]:
    if command.position is None:
        log("Enter a valid index", "warning")
        return ctx, True

    try:
        track = ctx.engine.jump_track(command.position)
    except (PlayerError, SongError) as e:
        log(str(e), "warning")
        return ctx, True

    log(f"Playing {track.name}")
    return ctx, True


def handle_remove_command(ctx: AppContext, command: Remove) -> Tuple[AppContext, bool]:
    if command.position is None:
        log("Enter a valid index", "warning")
        return ctx, True

    try:
        outcome = ctx.engine.remove_track(command.position)
    except (PlayerError, SongError) as e:
        log(str(e), "warning")
        return ctx, True

    log(f"Removed {outcome.removed.name}")
    if outcome.queue_empty:
        log("Queue is now empty")
    elif outcome.now_playing is not None:
        log(f"Playing {outcome.now_playing.name}")
    return ctx, True


def handle_clear_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    ctx.engine.clear_tracks()
    log("Queue cleared")
    return ctx, True


def handle_queue_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    """Show the queue with the current track highlighted."""
    names = ctx.engine.queue_names()
    if not names:
        log("Queue is Empty")
        return ctx, True

    current = ctx.engine.current_position()
    table = Table(title="Queue", show_lines=False)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Song")
    table.add_column("Length", justify="right")

    for position, name in enumerate(names, start=1):
        duration, _ = probe_audio(ctx.engine.song_detail(position).path)
        style = "bold green" if position == current else None
        table.add_row(str(position), name, format_duration(duration), style=style)

    ctx.console.print(table)
    return ctx, True
