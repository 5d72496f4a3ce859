"""Realtime gateway: live connections, event dispatch and fan-out.

The gateway owns the presence registry and the room registry for this
process. Inbound events are routed through a dispatch table of handlers that
return :class:`Emission` lists; :meth:`RealtimeGateway.deliver` is the only
place frames are written to connections, so the whole gateway can be driven in
tests with fake connections instead of sockets.

Concurrency model: everything runs on one event loop. Store work goes through
:meth:`RealtimeGateway.run_store`, which executes in a worker thread with its
own session and is the only point where a handler suspends. Registry reads and
writes never await.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from career_connect.core.errors import CareerConnectError, StoreError, ValidationError
from career_connect.repositories import NotificationRepository

from .handlers import EVENT_HANDLERS, EventHandler, HandlerContext
from .presence import PresenceRegistry
from .protocol import (
    STATUS_OFFLINE,
    STATUS_ONLINE,
    Broadcast,
    Emission,
    InboundEvent,
    OutboundEvent,
    Target,
    ToConnection,
    ToRoom,
    decode_frame,
)
from .rooms import RoomRegistry, notification_room

logger = logging.getLogger(__name__)

T = TypeVar("T")

SendFrame = Callable[[dict[str, Any]], Awaitable[None]]


class ConnectionState(str, Enum):
    """Lifecycle of a live connection."""

    CONNECTED = "connected"
    ANNOUNCED = "announced"
    DISCONNECTED = "disconnected"


class Connection:
    """Handle for one live connection.

    Identity-hashed, so it can sit in the presence and room registries. A
    connection stays anonymous until it announces a user id.
    """

    def __init__(self, send: SendFrame, *, connection_id: str | None = None) -> None:
        self.id = connection_id or uuid.uuid4().hex
        self.user_id: str | None = None
        self.state = ConnectionState.CONNECTED
        self._send = send

    async def send(self, frame: dict[str, Any]) -> None:
        await self._send(frame)

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r}, user_id={self.user_id!r}, state={self.state.value})"


def _validation_message(exc: PydanticValidationError) -> str:
    if any(error.get("type") in {"missing", "model_type", "dict_type"} for error in exc.errors()):
        return "Missing required fields"
    return "Invalid payload"


class RealtimeGateway:
    """Accept connections, dispatch their events and deliver the results."""

    def __init__(
        self,
        session_factory: sessionmaker[Session] | Callable[[], Session],
        *,
        presence: PresenceRegistry[Connection] | None = None,
        rooms: RoomRegistry[Connection] | None = None,
        handlers: dict[str, EventHandler] | None = None,
    ) -> None:
        self.presence: PresenceRegistry[Connection] = presence or PresenceRegistry()
        self.rooms: RoomRegistry[Connection] = rooms or RoomRegistry()
        self._session_factory = session_factory
        self._handlers = dict(EVENT_HANDLERS if handlers is None else handlers)
        self._connections: set[Connection] = set()

    # -- connection lifecycle -------------------------------------------------

    def connect(self, send: SendFrame, *, connection_id: str | None = None) -> Connection:
        connection = Connection(send, connection_id=connection_id)
        self._connections.add(connection)
        logger.info("New client connected: %s", connection.id)
        return connection

    def announce(self, connection: Connection, user_id: str) -> list[Emission]:
        """Bind ``connection`` to ``user_id`` and register it as that user's live handle.

        Re-announcing as a different user first releases the old identity.
        """
        emissions: list[Emission] = []
        if connection.user_id is not None and connection.user_id != user_id:
            emissions.extend(self.release_identity(connection))

        self.presence.set_online(user_id, connection)
        connection.user_id = user_id
        connection.state = ConnectionState.ANNOUNCED
        self.rooms.join(connection, notification_room(user_id))
        logger.info("User %s is online", user_id)
        emissions.append(
            Emission(
                OutboundEvent.USER_STATUS_CHANGED,
                {"userId": user_id, "status": STATUS_ONLINE},
                Broadcast(exclude=connection),
            )
        )
        return emissions

    def release_identity(self, connection: Connection) -> list[Emission]:
        """Forget the user bound to ``connection``; announce offline if it was the live handle."""
        previous_user = connection.user_id
        if previous_user is None:
            return []
        self.rooms.leave(connection, notification_room(previous_user))
        removed_user = self.presence.remove(connection)
        if removed_user is None:
            return []
        logger.info("User %s disconnected", removed_user)
        return [
            Emission(
                OutboundEvent.USER_STATUS_CHANGED,
                {"userId": removed_user, "status": STATUS_OFFLINE},
                Broadcast(exclude=connection),
            )
        ]

    def drop(self, connection: Connection) -> list[Emission]:
        """Tear down ``connection`` synchronously and return the offline broadcast, if any.

        Safe to call more than once; only the first call has an effect.
        """
        if connection.state is ConnectionState.DISCONNECTED:
            return []
        emissions = self.release_identity(connection)
        connection.state = ConnectionState.DISCONNECTED
        self.rooms.leave_all(connection)
        self._connections.discard(connection)
        logger.debug("Client disconnected: %s", connection.id)
        return emissions

    async def disconnect(self, connection: Connection) -> None:
        await self.deliver(self.drop(connection))

    def shutdown(self) -> None:
        """Forget every connection and clear the registries."""
        for connection in self._connections:
            connection.state = ConnectionState.DISCONNECTED
        self._connections.clear()
        self.rooms.clear()
        self.presence.clear()
        logger.info("Realtime gateway shut down")

    @property
    def connections(self) -> frozenset[Connection]:
        return frozenset(self._connections)

    # -- inbound ----------------------------------------------------------------

    async def receive_frame(self, connection: Connection, frame: Any) -> list[Emission]:
        """Decode a raw frame, dispatch it and deliver the resulting emissions."""
        try:
            event, data = decode_frame(frame)
        except ValidationError as exc:
            emissions = [self._error_emission(connection, None, exc.message)]
            await self.deliver(emissions)
            return emissions
        return await self.handle(connection, event, data)

    async def handle(self, connection: Connection, event: str, data: Any) -> list[Emission]:
        emissions = await self.dispatch(connection, event, data)
        await self.deliver(emissions)
        return emissions

    async def dispatch(self, connection: Connection, event: str, data: Any) -> list[Emission]:
        """Run the handler for ``event`` and return its emissions.

        A failing handler never propagates: its error becomes a single
        emission addressed to ``connection`` only.
        """
        handler = self._handlers.get(event)
        if handler is None:
            return [self._error_emission(connection, event, "Unknown event")]

        context = HandlerContext(gateway=self, connection=connection)
        try:
            return await handler(context, data)
        except PydanticValidationError as exc:
            logger.info("Rejected %s from %s: %s", event, connection.id, exc)
            return [self._error_emission(connection, event, _validation_message(exc))]
        except CareerConnectError as exc:
            if isinstance(exc, StoreError):
                logger.error("Store failure handling %s: %s", event, exc, exc_info=True)
            else:
                logger.info("Rejected %s from %s: %s", event, connection.id, exc.message)
            return [self._error_emission(connection, event, exc.message)]
        except Exception:
            logger.exception("Unhandled error handling %s from %s", event, connection.id)
            return [self._error_emission(connection, event, "Internal server error")]

    @staticmethod
    def _error_emission(connection: Connection, event: str | None, message: str) -> Emission:
        if event == InboundEvent.SEND_MESSAGE.value:
            return Emission(OutboundEvent.MESSAGE_ERROR, {"error": message}, ToConnection(connection))
        return Emission(
            OutboundEvent.ERROR,
            {"event": event, "error": message},
            ToConnection(connection),
        )

    # -- outbound ---------------------------------------------------------------

    def resolve(self, target: Target) -> list[Connection]:
        """Return the live connections an emission target currently addresses."""
        if isinstance(target, ToConnection):
            handle = target.handle
            return [handle] if handle in self._connections else []
        if isinstance(target, ToRoom):
            return self.rooms.members(target.room, exclude=target.exclude)
        return [conn for conn in self._connections if conn is not target.exclude]

    async def deliver(self, emissions: Iterable[Emission]) -> None:
        for emission in emissions:
            frame = emission.frame()
            for connection in self.resolve(emission.target):
                try:
                    await connection.send(frame)
                except Exception as exc:
                    logger.warning(
                        "Failed to deliver %s to %s: %s",
                        emission.event.value,
                        connection.id,
                        exc,
                    )

    async def message_emissions(
        self,
        message: dict[str, Any],
        notification: dict[str, Any] | None,
        *,
        origin: Connection | None = None,
    ) -> list[Emission]:
        """Build the fan-out for a freshly stored message.

        If the receiver is online the notification goes straight to their
        handle and the recomputed unread count to their notification room.
        The message goes to the conversation room, minus ``origin`` which gets
        ``message-sent`` instead.
        """
        emissions: list[Emission] = []
        if notification is not None:
            emissions.extend(await self.notification_emissions(notification))

        emissions.append(
            Emission(
                OutboundEvent.RECEIVE_MESSAGE,
                message,
                ToRoom(message["conversationId"], exclude=origin),
            )
        )
        if origin is not None:
            emissions.append(Emission(OutboundEvent.MESSAGE_SENT, message, ToConnection(origin)))
        return emissions

    async def notification_emissions(self, notification: dict[str, Any]) -> list[Emission]:
        """Direct-push a stored notification when its owner is online."""
        user_id = notification["userId"]
        if self.presence.lookup(user_id) is None:
            return []

        emissions: list[Emission] = []
        try:
            count = await self.unread_notification_count(user_id)
        except StoreError:
            logger.error("Could not recompute unread count for %s", user_id, exc_info=True)
            count = None
        # Presence may have changed while the count was computed.
        handle = self.presence.lookup(user_id)
        if handle is not None:
            emissions.append(
                Emission(OutboundEvent.NEW_NOTIFICATION, notification, ToConnection(handle))
            )
        if count is not None:
            emissions.append(self.count_emission(user_id, count))
        return emissions

    @staticmethod
    def count_emission(user_id: str, count: int) -> Emission:
        return Emission(OutboundEvent.NOTIFICATION_COUNT, count, ToRoom(notification_room(user_id)))

    async def unread_notification_count(self, user_id: str) -> int:
        return await self.run_store(lambda db: NotificationRepository(db).count_unread(user_id))

    # -- stores -----------------------------------------------------------------

    async def run_store(self, operation: Callable[[Session], T]) -> T:
        """Run ``operation`` against a fresh session in a worker thread.

        Raises:
            StoreError: If the operation fails inside SQLAlchemy.
        """
        return await asyncio.to_thread(self._run_in_session, operation)

    def _run_in_session(self, operation: Callable[[Session], T]) -> T:
        session = self._session_factory()
        try:
            return operation(session)
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError() from exc
        finally:
            session.close()


__all__ = ["Connection", "ConnectionState", "RealtimeGateway"]
