"""Dispatch of `/email` subcommands to the skill script."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from ...config import EmailBridgeConfig
from ...credentials import ensure_secure_permissions
from ...interpret import interpret
from ...invoker import ProcessInvoker
from ...logging import get_logger
from ...sanitize import is_valid_email, sanitize
from ...types import ChatContext, Command, CommandOutcome
from .parse import HELP_KEYWORD, parse_command, parse_slash_command, split_command_args
from .render import (
    HELP_TEXT,
    INVALID_EMAIL,
    SEARCH_USAGE,
    SEND_USAGE,
    render_doctor,
    render_search,
    render_send,
    render_summary,
    render_unread,
)

logger = get_logger(__name__)

EMAIL_COMMAND_ID = "email"
EMAIL_SUBCOMMAND_IDS = frozenset(
    {
        "unread",
        "summary",
        "search",
        "send",
        "doctor",
        HELP_KEYWORD,
    }
)
MIN_QUERY_LENGTH = 2
SEND_ARG_COUNT = 3

Handler = Callable[[Command, ChatContext], Awaitable[None]]


class EmailCommandRouter:
    """Route `/email` text to handlers.

    Stateless per call; the only instance state is the configuration and the
    invoker, both fixed at construction.
    """

    def __init__(
        self,
        config: EmailBridgeConfig,
        *,
        invoker: ProcessInvoker | None = None,
    ) -> None:
        self._config = config
        self._invoker = invoker or ProcessInvoker.from_config(config)
        if config.token_file is not None:
            ensure_secure_permissions(config.token_file)
        self._handlers: dict[str, Handler] = {
            "unread": self._handle_unread,
            "summary": self._handle_summary,
            "search": self._handle_search,
            "send": self._handle_send,
            "doctor": self._handle_doctor,
            HELP_KEYWORD: self._handle_help,
        }

    @property
    def config(self) -> EmailBridgeConfig:
        return self._config

    async def handle(self, command_text: str, context: ChatContext) -> None:
        command = parse_command(command_text)
        handler = self._handlers.get(command.keyword, self._handle_help)
        logger.info(
            "email.command.dispatch",
            command=command.keyword if command.keyword in EMAIL_SUBCOMMAND_IDS else HELP_KEYWORD,
            argc=len(command.args),
        )
        await handler(command, context)

    async def _run(self, keyword: str, args: tuple[str, ...] = ()) -> CommandOutcome:
        result = await self._invoker.invoke(keyword, args)
        return interpret(result)

    async def _handle_unread(self, command: Command, context: ChatContext) -> None:
        outcome = await self._run("unread")
        await context.reply(render_unread(outcome))

    async def _handle_summary(self, command: Command, context: ChatContext) -> None:
        outcome = await self._run("summary")
        await context.reply(render_summary(outcome))

    async def _handle_search(self, command: Command, context: ChatContext) -> None:
        query = sanitize(" ".join(command.args))
        if len(query) < MIN_QUERY_LENGTH:
            await context.reply(SEARCH_USAGE)
            return
        outcome = await self._run("search", (query,))
        await context.reply(render_search(outcome, query))

    async def _handle_send(self, command: Command, context: ChatContext) -> None:
        tokens = split_command_args(command.args_text)
        if len(tokens) != SEND_ARG_COUNT:
            await context.reply(SEND_USAGE)
            return
        to, subject, body = (sanitize(token) for token in tokens)
        if not is_valid_email(to):
            await context.reply(INVALID_EMAIL)
            return
        if not subject or not body:
            await context.reply(SEND_USAGE)
            return
        outcome = await self._run("send", (to, subject, body))
        await context.reply(render_send(outcome, to=to, subject=subject))

    async def _handle_doctor(self, command: Command, context: ChatContext) -> None:
        outcome = await self._run("doctor")
        await context.reply(render_doctor(outcome))

    async def _handle_help(self, command: Command, context: ChatContext) -> None:
        await context.reply(HELP_TEXT)


async def handle_message(
    router: EmailCommandRouter, context: ChatContext, text: str
) -> bool:
    """Handle `/email ...` chat text; returns False for anything else."""
    command_id, args_text = parse_slash_command(text)
    if command_id != EMAIL_COMMAND_ID:
        return False
    await router.handle(args_text, context)
    return True
