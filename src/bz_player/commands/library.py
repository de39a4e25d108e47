"""
Library command handlers for BZ Player.

Handles: scan, search, playlist show/create/view/add/delete
"""

from pathlib import Path
from typing import Tuple

from rich.table import Table

from bz_player.context import AppContext
from bz_player.core.output import log
from bz_player.domain.library import CatalogError, EntryNotFound
from bz_player.utils.parsers import (
    PlaylistAdd,
    PlaylistAddQueue,
    PlaylistCreate,
    PlaylistDelete,
    PlaylistView,
    Scan,
    Search,
)


def handle_scan_command(ctx: AppContext, command: Scan) -> Tuple[AppContext, bool]:
    """Start a background scan; progress arrives as notifications."""
    try:
        message = ctx.scanner.scan(command.path)
    except CatalogError as e:
        log(str(e), "error")
        return ctx, True

    log(message)
    return ctx, True


def handle_search_command(ctx: AppContext, command: Search) -> Tuple[AppContext, bool]:
    try:
        matches = ctx.catalog.filter_song(command.pattern)
    except CatalogError as e:
        log(str(e), "error")
        return ctx, True

    if not matches:
        log(f"No songs match '{command.pattern}'")
        return ctx, True

    table = Table(title=f"Search: {command.pattern or '*'}")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Song")
    for name, song_id in matches:
        table.add_row(str(song_id), name)

    ctx.console.print(table)
    log("Use 'add -s <id> ...' to queue results", "debug")
    return ctx, True


def handle_playlist_show_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    try:
        playlists = ctx.catalog.list_playlists()
    except CatalogError as e:
        log(str(e), "error")
        return ctx, True

    if not playlists:
        log("No playlists yet. Create one with 'playlist create <name>'")
        return ctx, True

    table = Table(title="Playlists")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name")
    for playlist_id, name in playlists:
        table.add_row(str(playlist_id), name)

    ctx.console.print(table)
    return ctx, True


def handle_playlist_create_command(
    ctx: AppContext, command: PlaylistCreate
) -> Tuple[AppContext, bool]:
    """Create an empty playlist, or one filled from a folder with -f."""
    try:
        if command.folder:
            folder = Path(command.folder).expanduser()
            playlist_id = ctx.catalog.create_playlist_from_path(command.name, folder)
        elif command.name:
            playlist_id = ctx.catalog.create_playlist(command.name)
        else:
            log("Specify the playlist name to create, try 'help'", "warning")
            return ctx, True
    except CatalogError as e:
        log(str(e), "error")
        return ctx, True

    log(f"Created playlist #{playlist_id}", "success")
    return ctx, True


def handle_playlist_view_command(
    ctx: AppContext, command: PlaylistView
) -> Tuple[AppContext, bool]:
    if command.playlist_id is None:
        log("Please mention the playlist id to view", "warning")
        return ctx, True

    try:
        playlist = ctx.catalog.get_playlist(command.playlist_id)
    except CatalogError as e:
        log(str(e), "error")
        return ctx, True

    table = Table(title=f"{playlist.name} ({len(playlist)} songs)")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Song")
    for position, track in enumerate(playlist.songs, start=1):
        table.add_row(str(position), track.name)

    ctx.console.print(table)
    return ctx, True


def handle_playlist_add_command(
    ctx: AppContext, command: PlaylistAdd
) -> Tuple[AppContext, bool]:
    """Add songs, looked up by name, to a playlist."""
    if command.playlist_id is None or not command.names:
        log("Usage: playlist add <id> <song>, <song> ... | *", "warning")
        return ctx, True

    song_ids = []
    for name in command.names:
        try:
            song_ids.append(ctx.catalog.find_song_by_name(name).id)
        except EntryNotFound as e:
            log(str(e), "warning")
        except CatalogError as e:
            log(str(e), "error")
            return ctx, True

    return _add_to_playlist(ctx, command.playlist_id, song_ids)


def handle_playlist_add_queue_command(
    ctx: AppContext, command: PlaylistAddQueue
) -> Tuple[AppContext, bool]:
    """Add every queued song to a playlist."""
    if command.playlist_id is None:
        log("Please mention playlist id to add to, try 'help'", "warning")
        return ctx, True

    song_ids = [song_id for song_id in ctx.engine.queue_ids() if song_id is not None]
    return _add_to_playlist(ctx, command.playlist_id, song_ids)


def _add_to_playlist(ctx: AppContext, playlist_id: int, song_ids) -> Tuple[AppContext, bool]:
    try:
        added = ctx.catalog.add_playlist_song(playlist_id, song_ids)
    except CatalogError as e:
        log(str(e), "error")
        return ctx, True

    log(f"Added {added} songs to playlist #{playlist_id}", "success")
    return ctx, True


def handle_playlist_delete_command(
    ctx: AppContext, command: PlaylistDelete
) -> Tuple[AppContext, bool]:
    if command.playlist_id is None:
        log("Please mention the playlist id to delete", "warning")
        return ctx, True

    try:
        deleted = ctx.catalog.delete_playlist(command.playlist_id)
    except CatalogError as e:
        log(str(e), "error")
        return ctx, True

    if deleted:
        log(f"Deleted playlist #{command.playlist_id}")
    else:
        log(f"Playlist #{command.playlist_id} not found", "warning")
    return ctx, True
