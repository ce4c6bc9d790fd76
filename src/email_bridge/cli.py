"""
One-shot command line surface for the email bridge.

Runs a single `/email` subcommand against the configured skill script and
prints the reply, which is handy for checking a deployment without a chat
client. Logs go to stderr.
"""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import anyio
import click

from .bridge.commands.router import EmailCommandRouter
from .config import ConfigError, EmailBridgeConfig, load_email_config
from .logging import setup_logging

__all__ = ["ConsoleContext", "main", "run_email_command"]


class ConsoleContext:
    async def reply(self, message: str) -> None:
        click.echo(message)


def run_email_command(text: str, config: EmailBridgeConfig) -> int:
    router = EmailCommandRouter(config)
    anyio.run(router.handle, text, ConsoleContext())
    return 0


@click.command(context_settings={"ignore_unknown_options": True})
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="TOML file with an [email] table.",
)
@click.option(
    "--skill-path",
    type=click.Path(file_okay=False, path_type=Path),
    help="Base directory of the email skill.",
)
@click.option(
    "--token-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="OAuth token file to keep at mode 0600.",
)
@click.option("--timeout-ms", type=click.IntRange(min=1), help="Per-command timeout.")
@click.option("--verbose", is_flag=True, help="Pass --verbose to the skill script.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.argument("words", nargs=-1, type=click.UNPROCESSED)
def main(
    config_path: Path | None,
    skill_path: Path | None,
    token_file: Path | None,
    timeout_ms: int | None,
    verbose: bool,
    debug: bool,
    words: tuple[str, ...],
) -> None:
    """Run one email command, e.g. `email-bridge search invoice`."""
    setup_logging(debug=debug)
    try:
        config = load_email_config(config_path) if config_path else EmailBridgeConfig()
    except ConfigError as exc:
        click.echo(f"Failed to load email config: {exc}", err=True)
        sys.exit(2)

    overrides: dict[str, object] = {}
    if skill_path is not None:
        overrides["script_base_dir"] = skill_path
    if token_file is not None:
        overrides["token_file"] = token_file
    if timeout_ms is not None:
        overrides["default_timeout_ms"] = timeout_ms
    if verbose:
        overrides["verbose"] = True
    config = dataclasses.replace(config, **overrides)

    sys.exit(run_email_command(" ".join(words), config))
