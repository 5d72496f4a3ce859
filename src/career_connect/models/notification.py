# src/career_connect/models/notification.py
"""Models for per-user notification events."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from career_connect.db.session import Base
from career_connect.db.time import utcnow


class NotificationType(str, Enum):
    """Domain events that produce a notification."""

    CONNECTION_REQUEST = "connection_request"
    CONNECTION_ACCEPTED = "connection_accepted"
    CONNECTION_REJECTED = "connection_rejected"
    NEW_MESSAGE = "new_message"
    JOB_APPLICATION = "job_application"
    JOB_APPLICATION_STATUS = "job_application_status"
    POST_LIKE = "post_like"
    POST_COMMENT = "post_comment"
    SYSTEM_ANNOUNCEMENT = "system_announcement"


class NotificationTargetType(str, Enum):
    """Kind of entity a notification points at."""

    CONNECTION = "connection"
    MESSAGE = "message"
    POST = "post"
    JOB = "job"
    APPLICATION = "application"
    SYSTEM = "system"


class Notification(Base):
    """Notification addressed to a single user.

    ``sender_name`` and ``sender_photo_url`` are copied from the sender's
    profile when the notification is created and are never refreshed.
    """

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_created", "user_id", "created_at"),
        Index("ix_notification_user_read_created", "user_id", "read", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    sender_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    sender_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    sender_photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    target_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    target_type: Mapped[str | None] = mapped_column(String(32), nullable=True)

    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
