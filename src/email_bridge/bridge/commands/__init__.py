"""Command handling for the `/email` chat command.

This module provides command parsing, dispatch, and reply rendering.
"""

from __future__ import annotations

from .parse import (
    normalize_slash_prefix,
    parse_command,
    parse_slash_command,
    split_command_args,
)
from .router import (
    EMAIL_COMMAND_ID,
    EMAIL_SUBCOMMAND_IDS,
    EmailCommandRouter,
    handle_message,
)

__all__ = [
    "EMAIL_COMMAND_ID",
    "EMAIL_SUBCOMMAND_IDS",
    "EmailCommandRouter",
    "handle_message",
    "normalize_slash_prefix",
    "parse_command",
    "parse_slash_command",
    "split_command_args",
]
