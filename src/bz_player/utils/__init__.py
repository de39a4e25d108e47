"""
Cross-cutting utilities for BZ Player.

Contains:
- parsers: Command parsing into Command values
"""

from .parsers import *

__all__ = [
    'Command',
    'parse_quoted_args',
    'parse_command',
    'parse_action',
]
