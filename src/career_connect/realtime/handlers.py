"""Inbound event handlers of the realtime gateway.

Each handler takes the handler context and the raw event payload and returns
the emissions to deliver. Handlers raise :mod:`career_connect.core.errors`
exceptions (or let pydantic validation errors escape); the gateway turns those
into an error event for the originating connection.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy.orm import Session

from career_connect.core.errors import (
    AuthorizationError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from career_connect.repositories import NotificationRepository
from career_connect.schemas.message import (
    MarkConversationReadRequest,
    SendMessageRequest,
    TypingPayload,
)
from career_connect.schemas.notification import (
    MarkAllNotificationsReadPayload,
    MarkNotificationReadPayload,
)
from career_connect.services.messaging import MessagingService
from career_connect.services.notifications import NotificationService

from .protocol import Emission, InboundEvent, OutboundEvent, ToConnection, ToRoom

if TYPE_CHECKING:
    from .gateway import Connection, RealtimeGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandlerContext:
    """What a handler may touch: the gateway and the connection that sent the event."""

    gateway: RealtimeGateway
    connection: Connection

    def require_actor(self, user_id: str) -> None:
        """Reject payloads acting for someone other than the announced user.

        Anonymous connections are not checked.
        """
        announced = self.connection.user_id
        if announced is not None and announced != user_id:
            raise AuthorizationError("Connection is announced as a different user")


EventHandler = Callable[[HandlerContext, Any], Awaitable[list[Emission]]]


def _require_identifier(data: Any, key: str) -> str:
    """Accept either a bare string or an object carrying ``key``."""
    if isinstance(data, dict):
        data = data.get(key)
    if not isinstance(data, str) or not data.strip():
        raise ValidationError("Missing required fields")
    return data.strip()


async def on_user_online(ctx: HandlerContext, data: Any) -> list[Emission]:
    user_id = _require_identifier(data, "userId")
    emissions = ctx.gateway.announce(ctx.connection, user_id)
    try:
        count = await ctx.gateway.unread_notification_count(user_id)
    except StoreError as exc:
        emissions.append(
            Emission(
                OutboundEvent.ERROR,
                {"event": InboundEvent.USER_ONLINE.value, "error": exc.message},
                ToConnection(ctx.connection),
            )
        )
    else:
        emissions.append(
            Emission(OutboundEvent.NOTIFICATION_COUNT, count, ToConnection(ctx.connection))
        )
    return emissions


async def on_join_conversation(ctx: HandlerContext, data: Any) -> list[Emission]:
    conversation_id = _require_identifier(data, "conversationId")
    ctx.gateway.rooms.join(ctx.connection, conversation_id)
    logger.debug("Connection %s joined conversation %s", ctx.connection.id, conversation_id)
    return []


async def on_leave_conversation(ctx: HandlerContext, data: Any) -> list[Emission]:
    conversation_id = _require_identifier(data, "conversationId")
    ctx.gateway.rooms.leave(ctx.connection, conversation_id)
    logger.debug("Connection %s left conversation %s", ctx.connection.id, conversation_id)
    return []


async def on_send_message(ctx: HandlerContext, data: Any) -> list[Emission]:
    request = SendMessageRequest.model_validate(data)
    ctx.require_actor(request.sender_id)

    def _send(db: Session) -> tuple[dict[str, Any], dict[str, Any] | None]:
        return MessagingService(db).send(request).to_wire()

    message, notification = await ctx.gateway.run_store(_send)
    emissions = await ctx.gateway.message_emissions(
        message, notification, origin=ctx.connection
    )
    if notification is None:
        emissions.append(
            Emission(
                OutboundEvent.MESSAGE_ERROR,
                {"error": "Message sent but the notification could not be created"},
                ToConnection(ctx.connection),
            )
        )
    return emissions


async def on_typing(ctx: HandlerContext, data: Any) -> list[Emission]:
    payload = TypingPayload.model_validate(data)
    return [
        Emission(
            OutboundEvent.USER_TYPING,
            {
                "conversationId": payload.conversation_id,
                "userId": payload.user_id,
                "isTyping": payload.is_typing,
            },
            ToRoom(payload.conversation_id, exclude=ctx.connection),
        )
    ]


async def on_mark_read(ctx: HandlerContext, data: Any) -> list[Emission]:
    request = MarkConversationReadRequest.model_validate(data)
    ctx.require_actor(request.user_id)
    await ctx.gateway.run_store(
        lambda db: MessagingService(db).mark_conversation_read(
            request.conversation_id, request.user_id
        )
    )
    return [
        Emission(
            OutboundEvent.MESSAGES_READ,
            {"userId": request.user_id},
            ToRoom(request.conversation_id, exclude=ctx.connection),
        )
    ]


async def on_mark_notification_read(ctx: HandlerContext, data: Any) -> list[Emission]:
    payload = MarkNotificationReadPayload.model_validate(data)
    ctx.require_actor(payload.user_id)

    def _mark(db: Session) -> int:
        if NotificationService(db).mark_read(payload.notification_id, payload.user_id) == 0:
            raise NotFoundError("Notification not found")
        return NotificationRepository(db).count_unread(payload.user_id)

    count = await ctx.gateway.run_store(_mark)
    return [ctx.gateway.count_emission(payload.user_id, count)]


async def on_mark_all_notifications_read(ctx: HandlerContext, data: Any) -> list[Emission]:
    payload = MarkAllNotificationsReadPayload.model_validate(data)
    ctx.require_actor(payload.user_id)
    await ctx.gateway.run_store(lambda db: NotificationService(db).mark_all_read(payload.user_id))
    return [ctx.gateway.count_emission(payload.user_id, 0)]


EVENT_HANDLERS: dict[str, EventHandler] = {
    InboundEvent.USER_ONLINE.value: on_user_online,
    InboundEvent.JOIN_CONVERSATION.value: on_join_conversation,
    InboundEvent.LEAVE_CONVERSATION.value: on_leave_conversation,
    InboundEvent.SEND_MESSAGE.value: on_send_message,
    InboundEvent.TYPING.value: on_typing,
    InboundEvent.MARK_READ.value: on_mark_read,
    InboundEvent.MARK_NOTIFICATION_READ.value: on_mark_notification_read,
    InboundEvent.MARK_ALL_NOTIFICATIONS_READ.value: on_mark_all_notifications_read,
}

__all__ = ["EVENT_HANDLERS", "EventHandler", "HandlerContext"]
