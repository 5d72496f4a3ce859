"""Read-only access to user profiles and accepted connections."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from career_connect.models.user import CONNECTION_STATUS_ACCEPTED, Connection, UserProfile

__all__ = ["UserRepository"]


class UserRepository:
    """Lookups against the profile and connection tables."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_profile(self, uid: str) -> UserProfile | None:
        return self.session.get(UserProfile, uid)

    def get_profiles(self, uids: Iterable[str]) -> list[UserProfile]:
        uid_list = list(uids)
        if not uid_list:
            return []
        result = self.session.execute(select(UserProfile).where(UserProfile.uid.in_(uid_list)))
        return list(result.scalars())

    def accepted_partner_ids(self, uid: str) -> list[str]:
        """Return the other side of every accepted connection involving ``uid``."""
        result = self.session.execute(
            select(Connection).where(
                or_(Connection.sender_id == uid, Connection.receiver_id == uid),
                Connection.status == CONNECTION_STATUS_ACCEPTED,
            )
        )
        partners: list[str] = []
        for connection in result.scalars():
            other = connection.receiver_id if connection.sender_id == uid else connection.sender_id
            if other not in partners:
                partners.append(other)
        return partners

    def are_connected(self, first: str, second: str) -> bool:
        result = self.session.execute(
            select(Connection.id)
            .where(
                or_(
                    and_(Connection.sender_id == first, Connection.receiver_id == second),
                    and_(Connection.sender_id == second, Connection.receiver_id == first),
                ),
                Connection.status == CONNECTION_STATUS_ACCEPTED,
            )
            .limit(1)
        )
        return result.first() is not None
