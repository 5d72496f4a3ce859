# src/career_connect/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .message import (
    DeleteMessageRequest,
    MarkConversationReadRequest,
    MessageRead,
    SendMessageRequest,
    TypingPayload,
)
from .notification import (
    MarkAllNotificationsReadPayload,
    MarkNotificationReadPayload,
    NotificationCreate,
    NotificationOwnerRequest,
    NotificationRead,
)
from .users import LastMessageRead, PartnerRead

__all__ = [
    "DeleteMessageRequest", "MarkConversationReadRequest", "MessageRead",
    "SendMessageRequest", "TypingPayload",
    "MarkAllNotificationsReadPayload", "MarkNotificationReadPayload",
    "NotificationCreate", "NotificationOwnerRequest", "NotificationRead",
    "LastMessageRead", "PartnerRead",
]
