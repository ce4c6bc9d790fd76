"""Command parsing utilities."""

from __future__ import annotations

import shlex

from ...types import Command

HELP_KEYWORD = "help"


def normalize_slash_prefix(text: str) -> str:
    """Normalize slash-prefixed text.

    Some chat clients require `//email` so the sent text is `/email`.
    Accept both forms by collapsing only the first leading slash.
    """
    stripped = text.lstrip()
    if not stripped.startswith("//"):
        return text
    leading_ws = len(text) - len(stripped)
    return f"{text[:leading_ws]}{stripped[1:]}"


def parse_slash_command(text: str) -> tuple[str | None, str]:
    """Parse a slash command from text, returning (command_id, args_text).

    command_id is None when the text is not a slash command.
    """
    stripped = normalize_slash_prefix(text).lstrip()
    if not stripped.startswith("/"):
        return None, text
    token, _, rest = stripped.partition(" ")
    if "\n" in token:
        token, _, head = token.partition("\n")
        rest = f"{head} {rest}" if rest else head
    command = token[1:]
    if not command:
        return None, text
    if "@" in command:
        command = command.split("@", 1)[0]
    return command.lower(), rest


def parse_command(text: str) -> Command:
    """Split command text on runs of whitespace.

    The first token is the keyword (matched case-sensitively by the router);
    a blank text maps to the help keyword.
    """
    parts = text.split(maxsplit=1)
    if not parts:
        return Command(keyword=HELP_KEYWORD)
    keyword = parts[0]
    args_text = parts[1] if len(parts) > 1 else ""
    return Command(keyword=keyword, args=tuple(args_text.split()), args_text=args_text)


def split_command_args(text: str) -> tuple[str, ...]:
    """Split command arguments using shell-like quoting.

    Falls back to plain whitespace splitting on unbalanced quotes.
    """
    if not text.strip():
        return ()
    try:
        return tuple(shlex.split(text))
    except ValueError:
        return tuple(text.split())
