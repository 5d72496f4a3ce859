"""Repositories wrapping the message, notification and profile tables."""

from .message_repo import MessageRepository
from .notification_repo import NotificationRepository
from .user_repo import UserRepository

__all__ = ["MessageRepository", "NotificationRepository", "UserRepository"]
