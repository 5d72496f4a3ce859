# src/career_connect/models/__init__.py
"""SQLAlchemy models for the Career Connect application."""

from .message import Message
from .notification import Notification, NotificationTargetType, NotificationType
from .user import Connection, UserProfile

__all__ = [
    "Message",
    "Notification", "NotificationTargetType", "NotificationType",
    "Connection", "UserProfile",
]
