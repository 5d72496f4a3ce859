# src/career_connect/services/__init__.py
"""Business logic services for the Career Connect application."""

from .messaging import MessagingService, SendResult, authorize_participant
from .notifications import NotificationService, preview_text

__all__ = [
    "MessagingService",
    "NotificationService",
    "SendResult",
    "authorize_participant",
    "preview_text",
]
