"""Matrix client helpers."""

from __future__ import annotations

from .reply import MatrixReplyContext, attach_email_command

__all__ = ["MatrixReplyContext", "attach_email_command"]
