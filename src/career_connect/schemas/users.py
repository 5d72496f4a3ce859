"""User profile schemas exposed alongside conversations."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_serializer

from .common import CamelModel, serialize_datetime


class PartnerRead(CamelModel):
    """Profile snapshot of the other participant of a conversation."""

    uid: str
    display_name: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    profession: str | None = None
    location: str | None = None


class LastMessageRead(CamelModel):
    """Short preview of the newest message in a conversation."""

    id: int
    content: str
    sender_id: str
    timestamp: datetime
    read: bool

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str | None:
        return serialize_datetime(value)
