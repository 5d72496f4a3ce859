"""API endpoint modules for version 1."""

from .messages import router as messages_router
from .notifications import router as notifications_router
from .realtime import router as realtime_router
from .system import router as system_router

__all__ = [
    "messages_router",
    "notifications_router",
    "realtime_router",
    "system_router",
]
