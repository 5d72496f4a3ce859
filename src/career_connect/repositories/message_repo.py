"""Data access helpers for working with conversation messages."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from career_connect.db.time import utcnow
from career_connect.models.message import Message

__all__ = ["MessageRepository"]


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class MessageRepository:
    """Thin wrapper around database access for message entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(
        self,
        *,
        conversation_id: str,
        sender_id: str,
        receiver_id: str,
        content: str,
        timestamp: datetime | None = None,
    ) -> Message:
        """Insert an unread message and return the flushed ORM instance."""
        now = timestamp or utcnow()
        message = Message(
            conversation_id=conversation_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            timestamp=now,
            read=False,
            created_at=now,
            updated_at=now,
        )
        self.session.add(message)
        self.session.flush()
        return message

    def get_by_id(self, message_id: int) -> Message | None:
        return self.session.get(Message, message_id)

    def list_before(self, conversation_id: str, before: datetime, limit: int) -> list[Message]:
        """Return the newest ``limit`` messages older than ``before``, oldest first."""
        result = self.session.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id, Message.timestamp < before)
            .order_by(Message.timestamp.desc(), Message.id.desc())
            .limit(limit)
        )
        messages = list(result.scalars())
        messages.reverse()
        return messages

    def latest(self, conversation_id: str) -> Message | None:
        result = self.session.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.timestamp.desc(), Message.id.desc())
            .limit(1)
        )
        return result.scalars().first()

    def count_unread(self, receiver_id: str, conversation_id: str | None = None) -> int:
        """Count unread messages addressed to ``receiver_id``."""
        stmt = select(func.count(Message.id)).where(
            Message.receiver_id == receiver_id,
            Message.read.is_(False),
        )
        if conversation_id is not None:
            stmt = stmt.where(Message.conversation_id == conversation_id)
        return int(self.session.execute(stmt).scalar_one())

    def mark_conversation_read(self, conversation_id: str, receiver_id: str) -> int:
        """Flip every unread message addressed to ``receiver_id`` and return how many changed."""
        now = utcnow()
        result = self.session.execute(
            update(Message)
            .where(
                Message.conversation_id == conversation_id,
                Message.receiver_id == receiver_id,
                Message.read.is_(False),
            )
            .values(read=True, read_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def search(self, conversation_id: str, term: str, limit: int) -> list[Message]:
        """Case-insensitive substring search, newest first."""
        pattern = f"%{_escape_like(term)}%"
        result = self.session.execute(
            select(Message)
            .where(
                Message.conversation_id == conversation_id,
                Message.content.ilike(pattern, escape="\\"),
            )
            .order_by(Message.timestamp.desc(), Message.id.desc())
            .limit(limit)
        )
        return list(result.scalars())

    def delete(self, message_id: int) -> int:
        result = self.session.execute(delete(Message).where(Message.id == message_id))
        return int(result.rowcount or 0)
