"""Matrix delivery of `/email` replies."""

from __future__ import annotations

from dataclasses import dataclass

import nio

from ..bridge.commands.router import EmailCommandRouter, handle_message
from ..logging import get_logger
from .content_builders import _build_reply_content, _render_formatted_body

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MatrixReplyContext:
    """Chat context that answers a single Matrix event in its room."""

    client: nio.AsyncClient
    room_id: str
    event_id: str

    async def reply(self, message: str) -> None:
        content = _build_reply_content(
            message, _render_formatted_body(message), self.event_id
        )
        response = await self.client.room_send(
            room_id=self.room_id,
            message_type="m.room.message",
            content=content,
        )
        if isinstance(response, nio.RoomSendError):
            logger.warning(
                "email.matrix.reply_failed",
                room_id=self.room_id,
                event_id=self.event_id,
                error=response.message,
            )


def attach_email_command(client: nio.AsyncClient, router: EmailCommandRouter) -> None:
    """Register a text-message callback that serves `/email` on `client`."""

    async def _on_text(room: nio.MatrixRoom, event: nio.RoomMessageText) -> None:
        if event.sender == client.user_id:
            return
        context = MatrixReplyContext(client, room.room_id, event.event_id)
        await handle_message(router, context, event.body)

    client.add_event_callback(_on_text, nio.RoomMessageText)
