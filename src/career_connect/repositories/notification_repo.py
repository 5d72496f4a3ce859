"""Data access helpers for working with notifications."""
from __future__ import annotations

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from career_connect.db.time import utcnow
from career_connect.models.notification import Notification

__all__ = ["NotificationRepository"]


class NotificationRepository:
    """Thin wrapper around database access for notification entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(
        self,
        *,
        user_id: str,
        type: str,
        title: str,
        message: str,
        sender_id: str | None = None,
        sender_name: str | None = None,
        sender_photo_url: str | None = None,
        target_id: str | None = None,
        target_type: str | None = None,
    ) -> Notification:
        """Insert an unread notification and return the flushed ORM instance."""
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            sender_id=sender_id,
            sender_name=sender_name,
            sender_photo_url=sender_photo_url,
            target_id=target_id,
            target_type=target_type,
            read=False,
            created_at=utcnow(),
        )
        self.session.add(notification)
        self.session.flush()
        return notification

    def list_for_user(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Notification]:
        """Return a page of notifications, newest first."""
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.read.is_(False))
        stmt = (
            stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def count(self, user_id: str, *, unread_only: bool = False) -> int:
        stmt = select(func.count(Notification.id)).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.read.is_(False))
        return int(self.session.execute(stmt).scalar_one())

    def count_unread(self, user_id: str) -> int:
        return self.count(user_id, unread_only=True)

    def mark_read(self, notification_id: int, user_id: str) -> int:
        """Mark the notification matching both id and owner; return matched rows."""
        result = self.session.execute(
            update(Notification)
            .where(Notification.id == notification_id, Notification.user_id == user_id)
            .values(read=True, read_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def mark_all_read(self, user_id: str) -> int:
        result = self.session.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True, read_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def delete(self, notification_id: int, user_id: str) -> int:
        result = self.session.execute(
            delete(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        return int(result.rowcount or 0)

    def clear_all(self, user_id: str) -> int:
        result = self.session.execute(delete(Notification).where(Notification.user_id == user_id))
        return int(result.rowcount or 0)
