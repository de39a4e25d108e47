"""
BZ Player - Command line entry point

With no subcommand the interactive player starts. The library subcommands
run directly against the catalog and need no audio output.
"""

import argparse
import sys
from typing import Optional

from bz_player.core import config
from bz_player.domain.library import CatalogError


def run_scan(path: Optional[str]) -> int:
    """Scan a folder into the catalog in the foreground.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    from bz_player.domain.library import DirectoryScanner
    from bz_player.main import open_catalog, setup
    from bz_player.notifications import NotificationChannel

    cfg = config.load_config()
    setup(cfg)
    channel = NotificationChannel()

    try:
        catalog = open_catalog(cfg, channel)
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    scanner = DirectoryScanner(
        catalog, cfg.music.default_audio_dir, cfg.music.excluded_dirs
    )
    try:
        root = scanner.resolve(path)
        print(f"Searching {root}")
        added = scanner.fetch_songs(root)
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        catalog.close()

    for notification in channel.drain():
        print(notification)
    print(f"Scan of {root} finished: {added} added")
    return 0


def run_search(pattern: str) -> int:
    """Print catalog songs matching pattern as 'id<TAB>name' lines."""
    from bz_player.main import open_catalog, setup
    from bz_player.notifications import NotificationChannel

    cfg = config.load_config()
    setup(cfg)

    try:
        catalog = open_catalog(cfg, NotificationChannel())
        try:
            matches = catalog.filter_song(pattern)
        finally:
            catalog.close()
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for name, song_id in matches:
        print(f"{song_id}\t{name}")
    return 0


def main() -> None:
    """Main entry point for the bz-player command."""
    parser = argparse.ArgumentParser(
        description="BZ Player - terminal music player",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest='subcommand', help='Available commands')

    scan_parser = subparsers.add_parser('scan', help='Scan a folder into the catalog')
    scan_parser.add_argument(
        'path',
        nargs='?',
        help='Folder to scan (default: configured music directory)'
    )

    search_parser = subparsers.add_parser('search', help='List catalog songs')
    search_parser.add_argument('pattern', nargs='*', help='Name substring')

    args = parser.parse_args()

    if args.subcommand == 'scan':
        sys.exit(run_scan(args.path))

    elif args.subcommand == 'search':
        sys.exit(run_search(' '.join(args.pattern)))

    # No subcommand - start interactive mode
    from .main import interactive_mode
    interactive_mode()


if __name__ == "__main__":
    main()
