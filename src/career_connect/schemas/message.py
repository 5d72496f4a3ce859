"""Message-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_serializer, field_validator

from .common import CamelModel, serialize_datetime


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class MessageRead(CamelModel):
    """Persisted message document as delivered to clients."""

    id: int
    conversation_id: str
    sender_id: str
    receiver_id: str
    content: str
    timestamp: datetime
    read: bool
    read_at: datetime | None = None

    @field_serializer("timestamp", "read_at")
    def _serialize_times(self, value: datetime | None) -> str | None:
        return serialize_datetime(value)


class SendMessageRequest(CamelModel):
    """Payload for sending a message over REST or the realtime channel."""

    conversation_id: str = Field(..., description="Canonical conversation identifier")
    sender_id: str = Field(..., description="Identity of the sending user")
    receiver_id: str = Field(..., description="Identity of the receiving user")
    content: str = Field(..., description="Message text")

    @field_validator("conversation_id", "sender_id", "receiver_id")
    @classmethod
    def _require_text(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("content")
    @classmethod
    def _require_content(cls, value: str) -> str:
        # Stored as sent; only blank content is rejected.
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class MarkConversationReadRequest(CamelModel):
    """Mark every unread message addressed to ``user_id`` as read."""

    conversation_id: str
    user_id: str

    @field_validator("conversation_id", "user_id")
    @classmethod
    def _require_text(cls, value: str) -> str:
        return _strip_required(value)


class DeleteMessageRequest(CamelModel):
    """Body of a message deletion request."""

    user_id: str

    @field_validator("user_id")
    @classmethod
    def _require_text(cls, value: str) -> str:
        return _strip_required(value)


class TypingPayload(CamelModel):
    """Typing indicator relayed to the other members of a conversation room."""

    conversation_id: str
    user_id: str
    is_typing: bool = True

    @field_validator("conversation_id", "user_id")
    @classmethod
    def _require_text(cls, value: str) -> str:
        return _strip_required(value)
