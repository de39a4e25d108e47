"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Database connection and schema (SQLite)
- Logging (Loguru) and console output (Rich)

Clean architecture principle: The core layer has no dependencies on
domain or application layers.
"""

# Configuration
from .config import (
    Config,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_default_audio_dir,
    create_default_config,
    ensure_directories,
)

# Database
from .database import (
    get_database_path,
    connect,
    init_database,
)

# Console and logging
from .console import get_console, safe_print
from .output import setup_loguru, log, mark_thread_silent

__all__ = [
    # Config
    "Config",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_default_audio_dir",
    "create_default_config",
    "ensure_directories",
    # Database
    "get_database_path",
    "connect",
    "init_database",
    # Console and logging
    "get_console",
    "safe_print",
    "setup_loguru",
    "log",
    "mark_thread_silent",
]
