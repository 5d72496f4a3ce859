"""Conversation identifiers and room membership for live connections."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Hashable
from typing import DefaultDict, Generic, TypeVar

from career_connect.core.settings import settings

NOTIFICATION_ROOM_PREFIX = "notifications_"

H = TypeVar("H", bound=Hashable)


def canonical_id(user_a: str, user_b: str, separator: str | None = None) -> str:
    """Return the order-independent conversation id for two users.

    The REST layer and the gateway both call this, so they agree on the
    identifier without talking to each other.
    """
    sep = settings.conversation_id_separator if separator is None else separator
    first, second = sorted((user_a, user_b))
    return f"{first}{sep}{second}"


def partner_of(conversation_id: str, user_id: str, separator: str | None = None) -> str | None:
    """Return the other participant of ``conversation_id`` as seen by ``user_id``.

    User ids are opaque and may contain the separator, so the id is never
    split. ``user_id`` must sit at either end of the id and the remainder must
    rebuild the same id through :func:`canonical_id`. Returns ``None`` when
    ``user_id`` is not a participant.
    """
    sep = settings.conversation_id_separator if separator is None else separator
    candidates: list[str] = []
    if conversation_id.startswith(user_id + sep):
        candidates.append(conversation_id[len(user_id) + len(sep):])
    if conversation_id.endswith(sep + user_id):
        candidates.append(conversation_id[: -(len(user_id) + len(sep))])
    for other in candidates:
        if other and other != user_id and canonical_id(user_id, other, sep) == conversation_id:
            return other
    return None


def is_participant(conversation_id: str, user_id: str) -> bool:
    return partner_of(conversation_id, user_id) is not None


def notification_room(user_id: str) -> str:
    """Name of the private room that carries a user's notification counts."""
    return f"{NOTIFICATION_ROOM_PREFIX}{user_id}"


class RoomRegistry(Generic[H]):
    """Map room names to the connection handles currently joined to them.

    ``join`` and ``leave`` are the only mutation points; both are idempotent.
    """

    def __init__(self) -> None:
        self._rooms: DefaultDict[str, set[H]] = defaultdict(set)
        self._memberships: DefaultDict[H, set[str]] = defaultdict(set)

    def join(self, handle: H, room: str) -> None:
        self._rooms[room].add(handle)
        self._memberships[handle].add(room)

    def leave(self, handle: H, room: str) -> None:
        members = self._rooms.get(room)
        if members is not None:
            members.discard(handle)
            if not members:
                self._rooms.pop(room, None)
        rooms = self._memberships.get(handle)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                self._memberships.pop(handle, None)

    def leave_all(self, handle: H) -> list[str]:
        """Remove ``handle`` from every room it joined and return those rooms."""
        rooms = sorted(self._memberships.get(handle, ()))
        for room in rooms:
            self.leave(handle, room)
        return rooms

    def members(self, room: str, *, exclude: H | None = None) -> list[H]:
        """Return the handles in ``room``, optionally without ``exclude``."""
        return [handle for handle in self._rooms.get(room, ()) if handle != exclude]

    def rooms_of(self, handle: H) -> frozenset[str]:
        return frozenset(self._memberships.get(handle, ()))

    def is_member(self, handle: H, room: str) -> bool:
        return handle in self._rooms.get(room, ())

    def clear(self) -> None:
        self._rooms.clear()
        self._memberships.clear()


__all__ = [
    "NOTIFICATION_ROOM_PREFIX",
    "RoomRegistry",
    "canonical_id",
    "is_participant",
    "notification_room",
    "partner_of",
]
