"""Shared fixtures: an isolated SQLite database and in-memory socket sinks."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

import pytest

TEST_DB_PATH = Path(tempfile.mkdtemp(prefix="experience_hub_")) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"

from experience_hub.application.use_cases.notifications import NotificationBridge  # noqa: E402
from experience_hub.domain.entities import Role, User  # noqa: E402
from experience_hub.infrastructure import database, models  # noqa: E402,F401
from experience_hub.infrastructure.realtime import (  # noqa: E402
    Broadcaster,
    ConnectionAuthenticator,
    ConnectionManager,
    RoomMembershipManager,
)
from experience_hub.infrastructure.repositories import (  # noqa: E402
    ExperienceRepository,
    PortfolioRepository,
    UserRepository,
)
from experience_hub.infrastructure.security import create_user_token  # noqa: E402
from experience_hub.interfaces.realtime import (  # noqa: E402
    ClientInfo,
    EventContext,
    RealtimeServices,
)


class FakeSocket:
    """Records every message the server pushes to it."""

    def __init__(self, *, broken: bool = False) -> None:
        self.messages: list[dict[str, Any]] = []
        self.closed_with: tuple[int, str | None] | None = None
        self.broken = broken

    async def send_json(self, data: Any) -> None:
        if self.broken:
            raise RuntimeError("socket is gone")
        self.messages.append(data)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed_with = (code, reason)

    def events(self) -> list[str]:
        return [message["type"] for message in self.messages]

    def of_type(self, event: str) -> list[dict[str, Any]]:
        return [message["data"] for message in self.messages if message["type"] == event]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def clean_database():
    """Recreate every table so each test starts from an empty database."""

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)


@pytest.fixture
def session():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_user(session):
    def factory(
        role: Role,
        *,
        email: str | None = None,
        name: str | None = None,
        is_active: bool = True,
    ) -> User:
        email = email or f"{role.value.lower()}-{_counter()}@example.com"
        return UserRepository(session).create(
            email=email,
            role=role,
            organization_name=name if role == Role.ORGANIZATION else None,
            student_name=name if role == Role.STUDENT else None,
            is_active=is_active,
        )

    return factory


_sequence = iter(range(1, 1_000_000))


def _counter() -> int:
    return next(_sequence)


@pytest.fixture
def make_experience(session):
    def factory(organization: User, student: User, *, title: str = "Summer internship"):
        return ExperienceRepository(session).create(
            title=title,
            organization_id=organization.organization.id,
            student_id=student.student.id,
        )

    return factory


@pytest.fixture
def make_portfolio(session):
    def factory(student: User, *, title: str = "My work"):
        return PortfolioRepository(session).create(title=title, student_id=student.student.id)

    return factory


@pytest.fixture
def token_for():
    def factory(user: User) -> str:
        return create_user_token(user.id)

    return factory


@pytest.fixture
def services() -> RealtimeServices:
    """Fresh, isolated realtime collaborators for one test."""

    manager = ConnectionManager()
    authenticator = ConnectionAuthenticator()
    publisher = Broadcaster(manager, authenticator)
    return RealtimeServices(
        manager=manager,
        authenticator=authenticator,
        membership=RoomMembershipManager(manager),
        broadcaster=publisher,
        bridge=NotificationBridge(publisher=publisher),
    )


@pytest.fixture
def connect(services, token_for):
    """Open a fake authenticated (or anonymous) connection and return its context."""

    async def factory(user: User | None = None) -> tuple[EventContext, FakeSocket]:
        socket = FakeSocket()
        connection_id = services.manager.register(socket)
        token = token_for(user) if user is not None else None
        identity = await services.authenticator.authenticate(connection_id, token)
        services.membership.attach(connection_id, identity)
        context = EventContext(
            connection_id=connection_id,
            identity=identity,
            services=services,
            client=ClientInfo(host="203.0.113.9", user_agent="pytest"),
        )
        return context, socket

    return factory
