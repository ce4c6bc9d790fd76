"""Content builders for Matrix message formatting."""

from __future__ import annotations

import html
import re
from typing import Any

_FENCE_RE = re.compile(r"```\n?(.*?)\n?```", re.DOTALL)
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_CODE_RE = re.compile(r"`([^`\n]+)`")
_ITALIC_RE = re.compile(r"(?<!\w)_(.+?)_(?!\w)")
_MARKERS = ("**", "`", "_")


def _render_emphasis(text: str) -> str:
    text = _BOLD_RE.sub(r"<strong>\1</strong>", text)
    text = _ITALIC_RE.sub(r"<em>\1</em>", text)
    return text.replace("\n", "<br>")


def _render_inline(text: str) -> str:
    rendered: list[str] = []
    # code span contents sit at odd indexes and are emitted verbatim
    for index, part in enumerate(_CODE_RE.split(text)):
        if index % 2:
            rendered.append(f"<code>{part}</code>")
        else:
            rendered.append(_render_emphasis(part))
    return "".join(rendered)


def _render_formatted_body(text: str) -> str | None:
    """Render the small markdown subset used by command replies as HTML.

    Returns None when the text carries no markup at all.
    """
    if not any(marker in text for marker in _MARKERS):
        return None
    parts = _FENCE_RE.split(html.escape(text, quote=False))
    rendered: list[str] = []
    for index, part in enumerate(parts):
        # split() with one group puts fenced block contents at odd indexes
        if index % 2:
            rendered.append(f"<pre><code>{part}</code></pre>")
        else:
            rendered.append(_render_inline(part))
    return "".join(rendered)


def _build_reply_content(
    body: str,
    formatted_body: str | None,
    reply_to_event_id: str,
) -> dict[str, Any]:
    """Build content with m.relates_to for replies."""
    content: dict[str, Any] = {
        "msgtype": "m.text",
        "body": body,
        "m.relates_to": {
            "m.in_reply_to": {"event_id": reply_to_event_id},
        },
    }
    if formatted_body:
        content["format"] = "org.matrix.custom.html"
        content["formatted_body"] = formatted_body
    return content
