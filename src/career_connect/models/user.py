# src/career_connect/models/user.py
"""SQLAlchemy models for user profiles and the connections between them."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from career_connect.db.session import Base
from career_connect.db.time import utcnow

CONNECTION_STATUS_PENDING = "pending"
CONNECTION_STATUS_ACCEPTED = "accepted"
CONNECTION_STATUS_REJECTED = "rejected"
CONNECTION_STATUS_BLOCKED = "blocked"


class UserProfile(Base):
    """Public profile keyed by the external auth provider's uid."""

    __tablename__ = "user_profile"

    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    profession: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)


class Connection(Base):
    """Connection request between two users and its current status."""

    __tablename__ = "connection"
    __table_args__ = (UniqueConstraint("sender_id", "receiver_id", name="uq_connection_pair"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    receiver_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=CONNECTION_STATUS_PENDING
    )
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
