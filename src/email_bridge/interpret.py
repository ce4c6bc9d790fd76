from __future__ import annotations

import json

from .types import CommandError, CommandOutcome, CommandSuccess, InvocationResult


def interpret(result: InvocationResult) -> CommandOutcome:
    """Turn a finished invocation into the outcome handlers consume.

    Failed runs become `CommandError`. Successful stdout is decoded as JSON
    once; anything that does not parse is returned as trimmed text.
    """
    message = result.error_message
    if message is not None:
        return CommandError(message)
    try:
        payload = json.loads(result.stdout)
    except (ValueError, RecursionError):
        return CommandSuccess(result.stdout.strip())
    return CommandSuccess(payload)
