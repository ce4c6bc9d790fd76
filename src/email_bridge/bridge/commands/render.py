"""Reply templates for the `/email` commands."""

from __future__ import annotations

import json
from typing import Any

from ...types import CommandError, CommandOutcome, CommandSuccess

SEARCH_RESULT_LIMIT = 5

SEARCH_USAGE = "❌ Usage: `/email search <query>` (min 2 characters)"
SEND_USAGE = "❌ Usage: `/email send <to> <subject> <body>`"
INVALID_EMAIL = "❌ Invalid email address format"

HELP_TEXT = """📧 **Zoho Email Commands**

`/email unread` - Check unread count
`/email summary` - Brief unread summary (for briefings)
`/email search <query>` - Search emails
`/email send <to> <subject> <body>` - Send email
`/email doctor` - Check setup & connectivity
`/email help` - Show this help

**Examples:**
- `/email unread`
- `/email search invoice`
- `/email send john@example.com "Hello" "Hi John"`

**Setup Required:**
1. Export ZOHO_EMAIL
2. Run oauth-setup.py OR set ZOHO_PASSWORD

**Security Note:**
Token file must have 0600 permissions (owner read/write only).
Run: `chmod 600 ~/.clawdbot/zoho-mail-tokens.json`"""


def _text_of(payload: Any) -> str | None:
    if isinstance(payload, str):
        return payload or None
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def render_unread(outcome: CommandOutcome) -> str:
    match outcome:
        case CommandError(message=message):
            return f"❌ Error: {message}"
        case CommandSuccess(payload={"unread_count": int() as count}) if not isinstance(
            count, bool
        ):
            emoji = "📬" if count > 0 else "📭"
            plural = "" if count == 1 else "s"
            return f"{emoji} **Unread:** {count} message{plural}"
    return "Unable to fetch unread count"


def render_summary(outcome: CommandOutcome) -> str:
    match outcome:
        case CommandError(message=message):
            return f"Email check failed: {message}"
        case CommandSuccess(payload=payload):
            text = _text_of(payload)
            if text is not None:
                return text
    return "Email check unavailable"


def render_search(outcome: CommandOutcome, query: str) -> str:
    match outcome:
        case CommandError(message=message):
            return f"❌ Search failed: {message}"
        case CommandSuccess(payload=[*results]) if results:
            lines = [f'🔍 **Search results for "{query}":**', ""]
            for index, entry in enumerate(results[:SEARCH_RESULT_LIMIT], start=1):
                email = entry if isinstance(entry, dict) else {}
                subject = email.get("subject") or "(no subject)"
                sender = email.get("from") or "Unknown"
                lines.append(f"{index}. **{subject}**\n   From: {sender}\n")
            remaining = len(results) - SEARCH_RESULT_LIMIT
            if remaining > 0:
                lines.append(f"_... and {remaining} more results_")
            return "\n".join(lines)
    return f'🔍 No results for "{query}"'


def render_send(outcome: CommandOutcome, *, to: str, subject: str) -> str:
    match outcome:
        case CommandError(message=message):
            return f"❌ Send failed: {message}"
    return f"✅ **Email sent**\nTo: {to}\nSubject: {subject}"


def render_doctor(outcome: CommandOutcome) -> str:
    match outcome:
        case CommandError(message=message):
            output = message
        case CommandSuccess(payload=payload):
            text = _text_of(payload)
            output = text if text is not None else json.dumps(payload, indent=2)
    return f"🔧 **Email Setup Check:**\n\n```\n{output}\n```"
