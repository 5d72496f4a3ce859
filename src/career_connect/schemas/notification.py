"""Notification-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_serializer, field_validator

from career_connect.models.notification import NotificationTargetType, NotificationType

from .common import CamelModel, serialize_datetime


class NotificationRead(CamelModel):
    """Notification document as delivered to clients."""

    id: int
    user_id: str
    type: str
    title: str
    message: str
    sender_id: str | None = None
    sender_name: str | None = None
    sender_photo_url: str | None = Field(default=None, alias="senderPhotoURL")
    target_id: str | None = None
    target_type: str | None = None
    read: bool
    read_at: datetime | None = None
    created_at: datetime

    @field_serializer("read_at", "created_at")
    def _serialize_times(self, value: datetime | None) -> str | None:
        return serialize_datetime(value)


class NotificationCreate(CamelModel):
    """Request body for creating a notification directly."""

    user_id: str = Field(..., min_length=1)
    type: NotificationType
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    sender_id: str | None = None
    target_id: str | None = None
    target_type: NotificationTargetType | None = None


class NotificationOwnerRequest(CamelModel):
    """Body naming the user that owns the addressed notification."""

    user_id: str

    @field_validator("user_id")
    @classmethod
    def _require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class MarkNotificationReadPayload(NotificationOwnerRequest):
    """Realtime payload marking one notification as read."""

    notification_id: int


class MarkAllNotificationsReadPayload(NotificationOwnerRequest):
    """Realtime payload marking every notification of a user as read."""
