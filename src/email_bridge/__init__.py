"""Chat `/email` command bridge backed by an external email skill script."""

from __future__ import annotations

from .bridge.commands import EmailCommandRouter, handle_message
from .config import ConfigError, EmailBridgeConfig, load_email_config
from .credentials import ensure_secure_permissions
from .interpret import interpret
from .invoker import ProcessInvoker
from .sanitize import is_valid_email, sanitize
from .types import (
    ChatContext,
    Command,
    CommandError,
    CommandOutcome,
    CommandSuccess,
    InvocationResult,
    SanitizedArgument,
)

__all__ = [
    "ChatContext",
    "Command",
    "CommandError",
    "CommandOutcome",
    "CommandSuccess",
    "ConfigError",
    "EmailBridgeConfig",
    "EmailCommandRouter",
    "InvocationResult",
    "ProcessInvoker",
    "SanitizedArgument",
    "ensure_secure_permissions",
    "handle_message",
    "interpret",
    "is_valid_email",
    "load_email_config",
    "sanitize",
]
