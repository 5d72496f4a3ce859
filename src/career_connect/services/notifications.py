"""Notification creation and read-state management."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from career_connect.core.settings import settings
from career_connect.models.message import Message
from career_connect.models.notification import (
    Notification,
    NotificationTargetType,
    NotificationType,
)
from career_connect.models.user import UserProfile
from career_connect.repositories import NotificationRepository, UserRepository
from career_connect.schemas.notification import NotificationCreate

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_SENDER = "System"
DEFAULT_MESSAGE_SENDER = "Someone"
NEW_MESSAGE_TITLE = "New Message"

__all__ = ["NotificationService", "preview_text"]


def preview_text(content: str, length: int | None = None) -> str:
    """Cut ``content`` to the preview length, marking truncation with an ellipsis."""
    limit = settings.notification_preview_length if length is None else length
    if len(content) <= limit:
        return content
    return content[:limit] + "..."


class NotificationService:
    """Business rules for notifications on top of :class:`NotificationRepository`.

    Mutating methods commit their own unit of work.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.notifications = NotificationRepository(session)
        self.users = UserRepository(session)

    def create(self, data: NotificationCreate) -> Notification:
        """Persist a notification, snapshotting the sender's name and photo.

        The snapshot is not refreshed if the sender later edits the profile.
        """
        sender_name = DEFAULT_SYSTEM_SENDER
        sender_photo_url: str | None = None
        if data.sender_id:
            sender = self.users.get_profile(data.sender_id)
            if sender is not None:
                sender_name = sender.display_name or sender_name
                sender_photo_url = sender.photo_url

        notification = self.notifications.create(
            user_id=data.user_id,
            type=data.type.value,
            title=data.title,
            message=data.message,
            sender_id=data.sender_id,
            sender_name=sender_name,
            sender_photo_url=sender_photo_url,
            target_id=data.target_id,
            target_type=data.target_type.value if data.target_type else None,
        )
        self.session.commit()
        return notification

    def create_for_message(self, message: Message, sender: UserProfile | None) -> Notification:
        """Persist the ``new_message`` notification owed to the message receiver."""
        notification = self.notifications.create(
            user_id=message.receiver_id,
            type=NotificationType.NEW_MESSAGE.value,
            title=NEW_MESSAGE_TITLE,
            message=preview_text(message.content),
            sender_id=message.sender_id,
            sender_name=(sender.display_name if sender else None) or DEFAULT_MESSAGE_SENDER,
            sender_photo_url=sender.photo_url if sender else None,
            target_id=message.conversation_id,
            target_type=NotificationTargetType.MESSAGE.value,
        )
        self.session.commit()
        return notification

    def list_for_user(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[Notification], int, int]:
        """Return ``(page, total matching, unread total)`` for a user."""
        page_size = settings.notification_page_size if limit is None else limit
        items = self.notifications.list_for_user(
            user_id, unread_only=unread_only, limit=page_size, offset=offset
        )
        total = self.notifications.count(user_id, unread_only=unread_only)
        unread = self.notifications.count_unread(user_id)
        return items, total, unread

    def unread_count(self, user_id: str) -> int:
        return self.notifications.count_unread(user_id)

    def mark_read(self, notification_id: int, user_id: str) -> int:
        updated = self.notifications.mark_read(notification_id, user_id)
        self.session.commit()
        return updated

    def mark_all_read(self, user_id: str) -> int:
        updated = self.notifications.mark_all_read(user_id)
        self.session.commit()
        logger.debug("Marked %d notifications read for %s", updated, user_id)
        return updated

    def delete(self, notification_id: int, user_id: str) -> int:
        deleted = self.notifications.delete(notification_id, user_id)
        self.session.commit()
        return deleted

    def clear_all(self, user_id: str) -> int:
        deleted = self.notifications.clear_all(user_id)
        self.session.commit()
        return deleted
