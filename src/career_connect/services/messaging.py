"""Message sending, history and read-state rules shared by REST and the gateway."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from career_connect.core.errors import (
    AuthorizationError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from career_connect.core.settings import settings
from career_connect.db.time import utcnow
from career_connect.models.message import Message
from career_connect.models.notification import Notification
from career_connect.realtime.rooms import canonical_id, partner_of
from career_connect.repositories import MessageRepository, UserRepository
from career_connect.schemas.message import MessageRead, SendMessageRequest
from career_connect.schemas.notification import NotificationRead
from career_connect.schemas.users import LastMessageRead, PartnerRead
from career_connect.services.notifications import NotificationService

logger = logging.getLogger(__name__)

__all__ = ["MessagingService", "SendResult", "authorize_participant"]


def authorize_participant(conversation_id: str, user_id: str | None) -> str:
    """Return the other participant, rejecting anyone outside the conversation."""
    if settings.conversation_id_separator not in conversation_id:
        raise ValidationError("Invalid conversation ID")
    partner = partner_of(conversation_id, user_id) if user_id else None
    if partner is None:
        raise AuthorizationError("Access denied to this conversation")
    return partner


@dataclass
class SendResult:
    """Outcome of a send: the stored message and, if it could be stored, its notification."""

    message: Message
    notification: Notification | None

    @property
    def notification_failed(self) -> bool:
        return self.notification is None

    def to_wire(self) -> tuple[dict[str, Any], dict[str, Any] | None]:
        message = MessageRead.model_validate(self.message).to_wire()
        notification = (
            NotificationRead.model_validate(self.notification).to_wire()
            if self.notification is not None
            else None
        )
        return message, notification


class MessagingService:
    """Conversation operations on top of the message repository."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.messages = MessageRepository(session)
        self.users = UserRepository(session)

    def send(self, request: SendMessageRequest) -> SendResult:
        """Persist a message, then the receiver's notification.

        The two writes are separate commits. When the notification cannot be
        stored the message stays persisted and the result carries no
        notification. Sends carry no idempotency key, so a client retry stores
        a second copy.

        Raises:
            ValidationError: The conversation id is malformed or does not
                belong to sender and receiver.
            AuthorizationError: The sender is not part of the conversation.
            StoreError: The message itself could not be stored.
        """
        if request.sender_id == request.receiver_id:
            raise ValidationError("Cannot send a message to yourself")
        authorize_participant(request.conversation_id, request.sender_id)
        if canonical_id(request.sender_id, request.receiver_id) != request.conversation_id:
            raise ValidationError("Conversation ID does not match sender and receiver")

        try:
            message = self.messages.create(
                conversation_id=request.conversation_id,
                sender_id=request.sender_id,
                receiver_id=request.receiver_id,
                content=request.content,
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Error sending message: %s", exc, exc_info=True)
            raise StoreError("Failed to send message") from exc

        notification: Notification | None
        try:
            sender = self.users.get_profile(request.sender_id)
            notification = NotificationService(self.session).create_for_message(message, sender)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error(
                "Message %s stored but its notification was not: %s",
                message.id,
                exc,
                exc_info=True,
            )
            notification = None
        return SendResult(message=message, notification=notification)

    def ensure_can_message(self, sender_id: str, receiver_id: str) -> None:
        """Require both profiles to exist and an accepted connection between them."""
        if self.users.get_profile(sender_id) is None or self.users.get_profile(receiver_id) is None:
            raise NotFoundError("User not found")
        if not self.users.are_connected(sender_id, receiver_id):
            raise AuthorizationError("You can only message your connections")

    def mark_conversation_read(self, conversation_id: str, user_id: str) -> int:
        """Mark every unread message addressed to ``user_id`` as read.

        Messages addressed to the other participant are left alone. Calling
        this again updates nothing and still succeeds.
        """
        authorize_participant(conversation_id, user_id)
        updated = self.messages.mark_conversation_read(conversation_id, user_id)
        self.session.commit()
        return updated

    def history(
        self,
        conversation_id: str,
        user_id: str | None,
        *,
        before: datetime | None = None,
        limit: int | None = None,
    ) -> tuple[list[Message], bool]:
        """Return a chronological page of messages and whether older ones may exist.

        Fetching history marks the caller's unread messages as read.
        """
        authorize_participant(conversation_id, user_id)
        page_size = settings.message_page_size if limit is None else limit
        page_size = max(1, min(page_size, settings.message_page_size_max))
        cutoff = before or utcnow()
        if cutoff.tzinfo is None:
            cutoff = cutoff.replace(tzinfo=UTC)
        else:
            cutoff = cutoff.astimezone(UTC)

        messages = self.messages.list_before(conversation_id, cutoff, page_size)
        if user_id:
            self.messages.mark_conversation_read(conversation_id, user_id)
            self.session.commit()
        return messages, len(messages) == page_size

    def search(self, conversation_id: str, user_id: str | None, query: str | None) -> list[Message]:
        term = (query or "").strip()
        if not term:
            raise ValidationError("Search query is required")
        authorize_participant(conversation_id, user_id)
        return self.messages.search(conversation_id, term, settings.message_search_limit)

    def delete(self, message_id: int, user_id: str) -> None:
        """Hard-delete a message; only its sender may do so."""
        message = self.messages.get_by_id(message_id)
        if message is None:
            raise NotFoundError("Message not found")
        if message.sender_id != user_id:
            raise AuthorizationError("You can only delete your own messages")
        if self.messages.delete(message_id) == 0:
            raise NotFoundError("Message not found")
        self.session.commit()

    def unread_count(self, user_id: str) -> int:
        return self.messages.count_unread(user_id)

    def list_conversations(self, user_id: str) -> list[dict[str, Any]]:
        """Summarise one conversation per accepted connection, most recent first."""
        partner_ids = self.users.accepted_partner_ids(user_id)
        conversations: list[dict[str, Any]] = []
        for partner in self.users.get_profiles(partner_ids):
            conversation_id = canonical_id(user_id, partner.uid)
            last_message = self.messages.latest(conversation_id)
            updated_at = last_message.timestamp if last_message else utcnow()
            if updated_at.tzinfo is None:
                updated_at = updated_at.replace(tzinfo=UTC)
            conversations.append(
                {
                    "conversationId": conversation_id,
                    "partner": PartnerRead.model_validate(partner).to_wire(),
                    "lastMessage": (
                        LastMessageRead.model_validate(last_message).to_wire()
                        if last_message
                        else None
                    ),
                    "unreadCount": self.messages.count_unread(user_id, conversation_id),
                    "updatedAt": updated_at,
                }
            )
        conversations.sort(key=lambda item: item["updatedAt"], reverse=True)
        for item in conversations:
            item["updatedAt"] = item["updatedAt"].isoformat()
        return conversations
