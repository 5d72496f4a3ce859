# src/career_connect/models/message.py
"""Models describing direct messages exchanged inside a conversation."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from career_connect.db.session import Base
from career_connect.db.time import utcnow


class Message(Base):
    """Text message between two users.

    ``conversation_id`` is the canonical pair identifier of sender and
    receiver, so both participants resolve the same conversation without
    coordinating. Only ``read``/``read_at`` change after creation.
    """

    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_conversation_timestamp", "conversation_id", "timestamp"),
        Index("ix_message_receiver_read", "receiver_id", "read"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    conversation_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    sender_id: Mapped[str] = mapped_column(String(128), nullable=False)
    receiver_id: Mapped[str] = mapped_column(String(128), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
