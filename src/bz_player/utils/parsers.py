"""
Command parsing utilities.

Turns one line of user input into a Command value. Parsing is pure: nothing
here touches the catalog or the player.
"""

from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass(frozen=True)
class Add:
    name: str


@dataclass(frozen=True)
class AddPlaylist:
    playlist_id: Optional[int]


@dataclass(frozen=True)
class AddSongs:
    song_ids: List[int]


@dataclass(frozen=True)
class Play:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Toggle:
    pass


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Prev:
    pass


@dataclass(frozen=True)
class Jump:
    position: Optional[int]


@dataclass(frozen=True)
class Remove:
    position: Optional[int]


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class Scan:
    path: Optional[str] = None


@dataclass(frozen=True)
class Search:
    pattern: str = ""


@dataclass(frozen=True)
class PlaylistShow:
    pass


@dataclass(frozen=True)
class PlaylistCreate:
    name: Optional[str]
    folder: Optional[str] = None


@dataclass(frozen=True)
class PlaylistView:
    playlist_id: Optional[int]


@dataclass(frozen=True)
class PlaylistAdd:
    """Add catalog songs (by name) to a playlist."""

    playlist_id: Optional[int]
    names: List[str]


@dataclass(frozen=True)
class PlaylistAddQueue:
    """Add every queued song to a playlist."""

    playlist_id: Optional[int]


@dataclass(frozen=True)
class PlaylistDelete:
    playlist_id: Optional[int]


@dataclass(frozen=True)
class Queue:
    pass


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Exit:
    pass


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Invalid:
    text: str


Command = Union[
    Add, AddPlaylist, AddSongs, Play, Pause, Toggle, Next, Prev, Jump, Remove,
    Clear, Scan, Search, PlaylistShow, PlaylistCreate, PlaylistView, PlaylistAdd,
    PlaylistAddQueue, PlaylistDelete, Queue, Help, Exit, Empty, Invalid,
]


def parse_quoted_args(args: List[str]) -> List[str]:
    """
    Parse command arguments respecting quoted strings.
    Handles both single and double quotes.

    Args:
        args: Raw argument list from command split

    Returns:
        List of parsed arguments with quotes removed

    Example:
        ['playlist', 'create', '"Late', 'Night"']
        -> ['playlist', 'create', 'Late Night']
    """
    parsed = []
    current = []
    in_quote = False
    quote_char = None

    for arg in args:
        # Check if this arg starts a quote
        if not in_quote and arg and arg[0] in ('"', "'"):
            quote_char = arg[0]
            in_quote = True
            # Check if quote also ends in same arg
            if len(arg) > 1 and arg[-1] == quote_char:
                parsed.append(arg[1:-1])
                in_quote = False
                quote_char = None
            else:
                current.append(arg[1:])
        # Check if this arg ends the current quote
        elif in_quote and arg and arg[-1] == quote_char:
            current.append(arg[:-1])
            parsed.append(' '.join(current))
            current = []
            in_quote = False
            quote_char = None
        # Inside a quote
        elif in_quote:
            current.append(arg)
        # Regular arg outside quotes
        else:
            parsed.append(arg)

    # If we have unclosed quotes, join what we have
    if current:
        parsed.append(' '.join(current))

    return parsed


def parse_command(user_input: str) -> tuple[str, List[str]]:
    """
    Parse user input into command and arguments.

    Args:
        user_input: Raw user input string

    Returns:
        Tuple of (command, args) where command is lowercase and args is a list
    """
    parts = user_input.strip().split()
    if not parts:
        return "", []

    command = parts[0].lower()
    args = parse_quoted_args(parts[1:])
    return command, args


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _first_int(args: List[str]) -> Optional[int]:
    return _to_int(args[0]) if args else None


def _parse_add(args: List[str]) -> Command:
    if args and args[0] == "-p":
        return AddPlaylist(_first_int(args[1:]))
    if args and args[0] == "-s":
        return AddSongs([int(arg) for arg in args[1:] if arg.isdigit()])
    return Add(" ".join(args))


def _parse_playlist(args: List[str]) -> Command:
    if not args:
        return PlaylistShow()

    sub, rest = args[0].lower(), args[1:]

    if sub in ("show", "-s", "s"):
        return PlaylistShow()

    if sub in ("create", "-c", "c"):
        if "-f" in rest:
            split = rest.index("-f")
            name = " ".join(rest[:split]) or None
            folder = " ".join(rest[split + 1:]) or None
            return PlaylistCreate(name, folder)
        return PlaylistCreate(" ".join(rest) or None)

    if sub in ("add", "-a", "a"):
        playlist_id = _first_int(rest)
        names = rest[1:]
        if names == ["*"]:
            return PlaylistAddQueue(playlist_id)
        songs = [name.strip() for name in " ".join(names).split(",") if name.strip()]
        return PlaylistAdd(playlist_id, songs)

    if sub in ("view", "-v", "v"):
        return PlaylistView(_first_int(rest))

    if sub in ("delete", "-d", "d"):
        return PlaylistDelete(_first_int(rest))

    return Invalid(" ".join(args))


def parse_action(text: str) -> Command:
    """Map one line of input to a Command.

    Verbs are case-insensitive; unknown verbs give Invalid and blank input
    gives Empty.
    """
    command, args = parse_command(text)
    if not command:
        return Empty()

    if command in ("add", "push"):
        return _parse_add(args)
    if command in ("play", "p"):
        return Play()
    if command in ("pause", "wait"):
        return Pause()
    if command in ("toggle", "t"):
        return Toggle()
    if command in ("next", "skip"):
        return Next()
    if command in ("prev", "back", "rollback"):
        return Prev()
    if command == "jump":
        return Jump(_first_int(args))
    if command in ("remove", "rm"):
        return Remove(_first_int(args))
    if command == "clear":
        return Clear()
    if command in ("fetch", "scan"):
        return Scan(" ".join(args) or None)
    if command == "search":
        pattern = " ".join(args)
        return Search("" if pattern == "*" else pattern)
    if command == "playlist":
        return _parse_playlist(args)
    if command in ("queue", "q"):
        return Queue()
    if command in ("help", "h", "?"):
        return Help()
    if command in ("exit", "quit", "out"):
        return Exit()

    return Invalid(text.strip())
