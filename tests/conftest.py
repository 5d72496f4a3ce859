# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from typing import Any

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from career_connect.api.v1.dependencies import get_gateway as app_get_gateway
from career_connect.db.session import Base
from career_connect.db.session import get_db as app_get_session
from career_connect.main import app as fastapi_app
from career_connect.models import Connection as UserConnection
from career_connect.models import UserProfile
from career_connect.models.user import CONNECTION_STATUS_ACCEPTED
from career_connect.realtime.gateway import Connection, RealtimeGateway
from career_connect.realtime.rooms import canonical_id

TEST_DB_URL = "sqlite://"


class FakeSocket:
    """Collects the frames the gateway writes to one connection."""

    def __init__(self) -> None:
        self.frames: list[dict[str, Any]] = []

    async def send(self, frame: dict[str, Any]) -> None:
        self.frames.append(frame)

    def events(self) -> list[str]:
        return [frame["type"] for frame in self.frames]

    def of(self, event: str) -> list[Any]:
        """Return the payloads of every frame of type ``event``."""
        return [frame["data"] for frame in self.frames if frame["type"] == event]

    def clear(self) -> None:
        self.frames.clear()


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def gateway(session_factory: sessionmaker[Session]) -> Iterator[RealtimeGateway]:
    gateway = RealtimeGateway(session_factory)
    try:
        yield gateway
    finally:
        gateway.shutdown()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI, db_session: Session, gateway: RealtimeGateway
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[app_get_gateway] = lambda: gateway
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(app_get_gateway, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def connect(gateway: RealtimeGateway) -> Callable[[], tuple[Connection, FakeSocket]]:
    """Open a gateway connection backed by a frame-recording fake socket."""

    def _connect() -> tuple[Connection, FakeSocket]:
        socket = FakeSocket()
        return gateway.connect(socket.send), socket

    return _connect


@pytest.fixture()
def make_profile(db_session: Session) -> Callable[..., UserProfile]:
    def _make(uid: str, display_name: str | None = None, photo_url: str | None = None) -> UserProfile:
        profile = UserProfile(
            uid=uid,
            display_name=display_name or uid.title(),
            photo_url=photo_url,
            profession="Engineer",
            location="Remote",
        )
        db_session.add(profile)
        db_session.commit()
        return profile

    return _make


@pytest.fixture()
def connected_pair(
    db_session: Session, make_profile: Callable[..., UserProfile]
) -> dict[str, str]:
    """Two users with profiles and an accepted connection between them."""
    make_profile("alice", "Alice Smith", "https://img.example/alice.png")
    make_profile("bob", "Bob Jones")
    db_session.add(
        UserConnection(sender_id="alice", receiver_id="bob", status=CONNECTION_STATUS_ACCEPTED)
    )
    db_session.commit()
    return {
        "sender": "alice",
        "receiver": "bob",
        "conversation": canonical_id("alice", "bob"),
    }
