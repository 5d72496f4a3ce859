# src/career_connect/api/v1/endpoints/messages.py
"""Direct message endpoints for the Career Connect API."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Query, status

from career_connect.api.v1.dependencies import GatewayDep, SessionDep
from career_connect.core.settings import settings
from career_connect.realtime.protocol import Emission, OutboundEvent, ToRoom
from career_connect.schemas.message import (
    DeleteMessageRequest,
    MarkConversationReadRequest,
    MessageRead,
    SendMessageRequest,
)
from career_connect.services.messaging import MessagingService, authorize_participant

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/conversations/{user_id}")
async def list_conversations(user_id: str, db: SessionDep) -> dict[str, Any]:
    """List one conversation per accepted connection, most recently active first."""
    conversations = MessagingService(db).list_conversations(user_id)
    return {"success": True, "conversations": conversations, "count": len(conversations)}


@router.get("/conversation/{conversation_id}")
async def get_conversation_messages(
    conversation_id: str,
    db: SessionDep,
    user_id: str | None = Query(None, alias="userId"),
    limit: int | None = Query(None, ge=1),
    before: datetime | None = Query(None),
) -> dict[str, Any]:
    """Return a chronological page of history and mark the caller's messages read."""
    messages, has_more = MessagingService(db).history(
        conversation_id,
        user_id,
        before=before,
        limit=limit,
    )
    return {
        "success": True,
        "messages": [MessageRead.model_validate(message).to_wire() for message in messages],
        "hasMore": has_more,
    }


@router.post("/send", status_code=status.HTTP_201_CREATED)
async def send_message(
    request: SendMessageRequest,
    db: SessionDep,
    gateway: GatewayDep,
) -> dict[str, Any]:
    """Send a message outside the live channel.

    Applies the same storage and notification rules as the realtime
    ``send-message`` event and fans the result out to live connections.
    Surrounding whitespace is trimmed from the content on this path only.
    """
    request = request.model_copy(update={"content": request.content.strip()})
    service = MessagingService(db)
    authorize_participant(request.conversation_id, request.sender_id)
    service.ensure_can_message(request.sender_id, request.receiver_id)

    result = service.send(request)
    message, notification = result.to_wire()
    await gateway.deliver(await gateway.message_emissions(message, notification))

    return {"success": True, "message": "Message sent successfully", "data": message}


@router.post("/mark-read")
async def mark_messages_read(
    request: MarkConversationReadRequest,
    db: SessionDep,
    gateway: GatewayDep,
) -> dict[str, Any]:
    """Mark every unread message addressed to the caller in a conversation as read."""
    modified = MessagingService(db).mark_conversation_read(
        request.conversation_id, request.user_id
    )
    await gateway.deliver(
        [
            Emission(
                OutboundEvent.MESSAGES_READ,
                {"userId": request.user_id},
                ToRoom(request.conversation_id),
            )
        ]
    )
    return {"success": True, "message": "Messages marked as read", "modifiedCount": modified}


@router.get("/unread-count/{user_id}")
async def get_unread_count(user_id: str, db: SessionDep) -> dict[str, Any]:
    """Count unread messages addressed to a user across all conversations."""
    return {"success": True, "count": MessagingService(db).unread_count(user_id)}


@router.delete("/message/{message_id}")
async def delete_message(
    message_id: int,
    request: DeleteMessageRequest,
    db: SessionDep,
) -> dict[str, Any]:
    """Delete a message. Only its sender may do so."""
    MessagingService(db).delete(message_id, request.user_id)
    logger.info("Message %s deleted by %s", message_id, request.user_id)
    return {"success": True, "message": "Message deleted successfully"}


@router.get("/search/{conversation_id}")
async def search_messages(
    conversation_id: str,
    db: SessionDep,
    query: str | None = Query(None),
    user_id: str | None = Query(None, alias="userId"),
) -> dict[str, Any]:
    """Case-insensitive text search within one conversation, newest first."""
    messages = MessagingService(db).search(conversation_id, user_id, query)
    return {
        "success": True,
        "messages": [MessageRead.model_validate(message).to_wire() for message in messages],
        "count": len(messages),
        "limit": settings.message_search_limit,
    }
