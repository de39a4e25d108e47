"""
Configuration management for BZ Player
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


def get_default_audio_dir() -> Path:
    """Get the default directory scanned when no path is given."""
    music_home = os.environ.get("XDG_MUSIC_DIR")
    if music_home:
        return Path(music_home).expanduser()
    return Path.home() / "Music"


@dataclass
class MusicConfig:
    """Configuration for music library settings."""

    default_audio_dir: str = field(default_factory=lambda: str(get_default_audio_dir()))
    # Directory names never descended into while scanning
    excluded_dirs: List[str] = field(
        default_factory=lambda: ["node_modules", "target"]
    )


@dataclass
class PlayerConfig:
    """Configuration for music player settings."""

    mpv_socket_path: Optional[str] = None
    volume: int = 70
    poll_interval: float = 0.5  # Seconds between completion checks


@dataclass
class DatabaseConfig:
    """Configuration for the song catalog."""

    path: Optional[str] = None  # Default: <data dir>/song.db


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/bz-player/bz-player.log)
    )


@dataclass
class Config:
    """Main configuration object."""

    music: MusicConfig = field(default_factory=MusicConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "bz-player"
    return Path.home() / ".config" / "bz-player"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            # Found project root but no config.toml there
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/bz-player (or ~/.config/bz-player)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "bz-player"
    return Path.home() / ".local" / "share" / "bz-player"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# BZ Player Configuration

[music]
# Directory scanned by `scan` when no path is given
default_audio_dir = "~/Music"

# Directory names skipped while scanning
excluded_dirs = ["node_modules", "target"]

[player]
# Path for mpv socket (auto-generated if not specified)
# mpv_socket_path = "/tmp/bz-player-mpv"

# Initial volume (0-100)
volume = 70

# Seconds between "track finished" checks
poll_interval = 0.5

[database]
# Song catalog location (default: ~/.local/share/bz-player/song.db)
# path = "~/.local/share/bz-player/song.db"

[logging]
# Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL
level = "INFO"

# Custom log file path (default: ~/.local/share/bz-player/bz-player.log)
# log_file = "/path/to/custom.log"
""".strip()


def _apply_env_overrides(config: Config) -> Config:
    """Override TOML values with BZ_PLAYER_* environment variables."""
    db_path = os.environ.get("BZ_PLAYER_DB_PATH")
    music_dir = os.environ.get("BZ_PLAYER_MUSIC_DIR")
    log_level = os.environ.get("BZ_PLAYER_LOG_LEVEL")

    if db_path:
        config.database.path = str(Path(db_path).expanduser())
    if music_dir:
        config.music.default_audio_dir = str(Path(music_dir).expanduser())
    if log_level:
        config.logging.level = log_level.upper()

    return config


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - BZ_PLAYER_DB_PATH
    - BZ_PLAYER_MUSIC_DIR
    - BZ_PLAYER_LOG_LEVEL
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"Error loading configuration from {config_path}: {e}")
        print("Using default configuration.")
        return _apply_env_overrides(Config())

    config = Config()

    if "music" in toml_data:
        music_data = toml_data["music"]
        config.music = MusicConfig(
            default_audio_dir=str(
                Path(
                    music_data.get("default_audio_dir", config.music.default_audio_dir)
                ).expanduser()
            ),
            excluded_dirs=music_data.get("excluded_dirs", config.music.excluded_dirs),
        )

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            mpv_socket_path=player_data.get("mpv_socket_path"),
            volume=player_data.get("volume", config.player.volume),
            poll_interval=float(
                player_data.get("poll_interval", config.player.poll_interval)
            ),
        )

    if "database" in toml_data:
        db_path = toml_data["database"].get("path")
        config.database = DatabaseConfig(
            path=str(Path(db_path).expanduser()) if db_path else None
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level),
            log_file=logging_data.get("log_file"),
        )

    return _apply_env_overrides(config)


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
