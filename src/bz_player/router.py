"""
Command routing for BZ Player.

Routes parsed commands to the matching handler function.
"""

from typing import Tuple

from bz_player.commands import library, playback
from bz_player.context import AppContext
from bz_player.core.output import log
from bz_player.utils import parsers


def print_help() -> None:
    """Display help information for available commands."""
    help_text = """
BZ Player - terminal music player

Playback:
  add <song name>             Queue the best catalog match (alias: push)
  add -p <playlist id>        Queue a whole playlist
  add -s <id> [<id> ...]      Queue songs by id (ids from 'search')
  play                        Resume, or start the queue (alias: p)
  pause                       Pause playback (alias: wait)
  toggle                      Pause/resume (alias: t)
  next                        Skip to the next song (alias: skip)
  prev                        Back to the previous song (aliases: back, rollback)
  jump <n>                    Play queue position n (1-based)
  remove <n>                  Remove queue position n (alias: rm)
  clear                       Empty the queue and stop
  queue                       Show the queue (alias: q)

Library:
  scan [path]                 Scan a folder (default: music dir) in the background (alias: fetch)
  search [pattern]            List catalog songs matching pattern ('*' for all)

Playlists:
  playlist show               List playlists
  playlist create <name>      Create an empty playlist
  playlist create [name] -f <folder>
                              Create a playlist from a folder's songs
  playlist view <id>          Show a playlist's songs
  playlist add <id> <song>, <song>
                              Add catalog songs by name
  playlist add <id> *         Add every queued song
  playlist delete <id>        Delete a playlist

  help                        Show this help message (aliases: h, ?)
  exit                        Exit the program (aliases: quit, out)
"""
    print(help_text.strip())


def handle_command(ctx: AppContext, command: parsers.Command) -> Tuple[AppContext, bool]:
    """
    Handle a single parsed command.

    Args:
        ctx: Application context
        command: Parsed command value

    Returns:
        (updated_context, should_continue) - Updated context and whether to continue
    """
    if isinstance(command, parsers.Exit):
        log("See Ya! Have a Great Time")
        return ctx, False

    elif isinstance(command, parsers.Help):
        print_help()
        return ctx, True

    elif isinstance(command, parsers.Add):
        return playback.handle_add_command(ctx, command)

    elif isinstance(command, parsers.AddSongs):
        return playback.handle_add_songs_command(ctx, command)

    elif isinstance(command, parsers.AddPlaylist):
        return playback.handle_add_playlist_command(ctx, command)

    elif isinstance(command, parsers.Play):
        return playback.handle_play_command(ctx)

    elif isinstance(command, parsers.Pause):
        return playback.handle_pause_command(ctx)

    elif isinstance(command, parsers.Toggle):
        return playback.handle_toggle_command(ctx)

    elif isinstance(command, parsers.Next):
        return playback.handle_next_command(ctx)

    elif isinstance(command, parsers.Prev):
        return playback.handle_prev_command(ctx)

    elif isinstance(command, parsers.Jump):
        return playback.handle_jump_command(ctx, command)

    elif isinstance(command, parsers.Remove):
        return playback.handle_remove_command(ctx, command)

    elif isinstance(command, parsers.Clear):
        return playback.handle_clear_command(ctx)

    elif isinstance(command, parsers.Queue):
        return playback.handle_queue_command(ctx)

    elif isinstance(command, parsers.Scan):
        return library.handle_scan_command(ctx, command)

    elif isinstance(command, parsers.Search):
        return library.handle_search_command(ctx, command)

    elif isinstance(command, parsers.PlaylistShow):
        return library.handle_playlist_show_command(ctx)

    elif isinstance(command, parsers.PlaylistCreate):
        return library.handle_playlist_create_command(ctx, command)

    elif isinstance(command, parsers.PlaylistView):
        return library.handle_playlist_view_command(ctx, command)

    elif isinstance(command, parsers.PlaylistAdd):
        return library.handle_playlist_add_command(ctx, command)

    elif isinstance(command, parsers.PlaylistAddQueue):
        return library.handle_playlist_add_queue_command(ctx, command)

    elif isinstance(command, parsers.PlaylistDelete):
        return library.handle_playlist_delete_command(ctx, command)

    elif isinstance(command, parsers.Empty):
        log("Please Enter a Command ;)")
        return ctx, True

    else:
        log(f"Unknown command: '{command.text}'. Type 'help' for available commands.", "warning")
        return ctx, True
