"""Event names, outbound emissions and the JSON frame format of the gateway.

Every frame, in both directions, is a JSON object::

    {"type": "<event name>", "data": <payload>}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from career_connect.core.errors import ValidationError


class InboundEvent(str, Enum):
    """Events a client may send."""

    USER_ONLINE = "user-online"
    JOIN_CONVERSATION = "join-conversation"
    LEAVE_CONVERSATION = "leave-conversation"
    SEND_MESSAGE = "send-message"
    TYPING = "typing"
    MARK_READ = "mark-read"
    MARK_NOTIFICATION_READ = "mark-notification-read"
    MARK_ALL_NOTIFICATIONS_READ = "mark-all-notifications-read"


class OutboundEvent(str, Enum):
    """Events the server emits."""

    USER_STATUS_CHANGED = "user-status-changed"
    RECEIVE_MESSAGE = "receive-message"
    MESSAGE_SENT = "message-sent"
    MESSAGE_ERROR = "message-error"
    NEW_NOTIFICATION = "new-notification"
    NOTIFICATION_COUNT = "notification-count"
    USER_TYPING = "user-typing"
    MESSAGES_READ = "messages-read"
    ERROR = "error"


STATUS_ONLINE = "online"
STATUS_OFFLINE = "offline"


@dataclass(frozen=True)
class ToConnection:
    """Deliver to exactly one connection."""

    handle: Any


@dataclass(frozen=True)
class ToRoom:
    """Deliver to every member of ``room`` except ``exclude``."""

    room: str
    exclude: Any = None


@dataclass(frozen=True)
class Broadcast:
    """Deliver to every live connection except ``exclude``."""

    exclude: Any = None


Target = ToConnection | ToRoom | Broadcast


@dataclass(frozen=True)
class Emission:
    """One outbound event addressed to a target."""

    event: OutboundEvent
    data: Any
    target: Target = field(default_factory=Broadcast)

    def frame(self) -> dict[str, Any]:
        return encode_frame(self.event.value, self.data)


def encode_frame(event: str, data: Any) -> dict[str, Any]:
    return {"type": event, "data": data}


def decode_frame(frame: Any) -> tuple[str, Any]:
    """Split an inbound frame into its event name and payload.

    Raises:
        ValidationError: If the frame is not an object with a string ``type``.
    """
    if not isinstance(frame, dict):
        raise ValidationError("Frame must be a JSON object")
    event = frame.get("type")
    if not isinstance(event, str) or not event:
        raise ValidationError("Frame is missing an event type")
    return event, frame.get("data")


__all__ = [
    "Broadcast",
    "Emission",
    "InboundEvent",
    "OutboundEvent",
    "STATUS_OFFLINE",
    "STATUS_ONLINE",
    "Target",
    "ToConnection",
    "ToRoom",
    "decode_frame",
    "encode_frame",
]
