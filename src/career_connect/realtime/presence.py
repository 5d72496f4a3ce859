"""Process-local registry of which user is reachable on which live connection."""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

H = TypeVar("H", bound=Hashable)


class PresenceRegistry(Generic[H]):
    """Map user ids to their most recently announced connection handle.

    At most one handle is kept per user and the last registration wins. The
    registry only knows about connections held by this process and is empty
    after a restart. Every method completes without awaiting, so a
    read-then-write never interleaves with another event on the loop.
    """

    def __init__(self) -> None:
        self._handles: dict[str, H] = {}

    def set_online(self, user_id: str, handle: H) -> H | None:
        """Register ``handle`` for ``user_id`` and return the handle it replaced."""
        previous = self._handles.get(user_id)
        self._handles[user_id] = handle
        if previous is not None and previous != handle:
            logger.debug("User %s re-announced; newer connection replaces older one", user_id)
        return previous

    def remove(self, handle: H) -> str | None:
        """Drop the entry owned by ``handle`` and return its user id.

        A handle that is no longer registered (already replaced or removed)
        leaves the registry untouched and returns ``None``.
        """
        for user_id, registered in self._handles.items():
            if registered == handle:
                del self._handles[user_id]
                return user_id
        return None

    def lookup(self, user_id: str) -> H | None:
        return self._handles.get(user_id)

    def is_online(self, user_id: str) -> bool:
        return user_id in self._handles

    def online_user_ids(self) -> list[str]:
        return list(self._handles)

    def clear(self) -> None:
        self._handles.clear()

    def __len__(self) -> int:
        return len(self._handles)


__all__ = ["PresenceRegistry"]
