"""Normalization of untrusted chat input."""

from __future__ import annotations

import re

from .types import SanitizedArgument

MAX_ARGUMENT_LENGTH = 1000

_SHELL_METACHARS_RE = re.compile(r"[;&|`$(){}\[\]<>\\]")
_LINE_BREAKS_RE = re.compile(r"[\r\n]")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def sanitize(value: object) -> SanitizedArgument:
    """Strip shell metacharacters and line breaks, trim, and cap the length.

    Total and deterministic: non-string input maps to an empty string and
    nothing is raised. The trailing strip after truncation keeps
    `sanitize(sanitize(x)) == sanitize(x)`.
    """
    if not isinstance(value, str):
        return SanitizedArgument("")
    cleaned = _SHELL_METACHARS_RE.sub("", value)
    cleaned = _LINE_BREAKS_RE.sub("", cleaned)
    cleaned = cleaned.strip()[:MAX_ARGUMENT_LENGTH].rstrip()
    return SanitizedArgument(cleaned)


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))
