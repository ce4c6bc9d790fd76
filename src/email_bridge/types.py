"""Shared value types for the email command bridge."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol

TIMED_OUT_MESSAGE = "timed out"


class SanitizedArgument(str):
    """A string that already went through `email_bridge.sanitize.sanitize`."""

    __slots__ = ()


class ChatContext(Protocol):
    async def reply(self, message: str) -> None: ...


@dataclass(frozen=True, slots=True)
class Command:
    keyword: str
    args: tuple[str, ...] = ()
    args_text: str = ""


@dataclass(frozen=True, slots=True)
class InvocationResult:
    exit_code: int | None
    stdout: str
    stderr: str
    timed_out: bool = False
    spawn_error: str | None = None

    @property
    def error_message(self) -> str | None:
        """Classify the run: None on success, otherwise a reply-ready message."""
        if self.timed_out:
            return TIMED_OUT_MESSAGE
        if self.spawn_error is not None:
            return self.spawn_error
        if self.exit_code != 0:
            return self.stderr.strip() or f"command failed with code {self.exit_code}"
        return None

    @property
    def ok(self) -> bool:
        return self.error_message is None


@dataclass(frozen=True, slots=True)
class CommandError:
    message: str

    @property
    def kind(self) -> Literal["error"]:
        return "error"


@dataclass(frozen=True, slots=True)
class CommandSuccess:
    payload: Any

    @property
    def kind(self) -> Literal["success"]:
        return "success"


CommandOutcome = CommandError | CommandSuccess
