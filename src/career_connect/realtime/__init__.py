"""Realtime messaging: presence, conversation rooms and the event gateway.

The gateway itself lives in :mod:`career_connect.realtime.gateway`.
"""

from .presence import PresenceRegistry
from .protocol import Emission, InboundEvent, OutboundEvent
from .rooms import RoomRegistry, canonical_id, notification_room, partner_of

__all__ = [
    "Emission",
    "InboundEvent",
    "OutboundEvent",
    "PresenceRegistry",
    "RoomRegistry",
    "canonical_id",
    "notification_room",
    "partner_of",
]
