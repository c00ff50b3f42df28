"""Database configuration and session management."""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import TypeVar

import logging

from anyio import to_thread
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from experience_hub.config import Settings, get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


settings = get_settings()

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for the configured database URL."""

    connect_args: dict[str, object] = {}
    if settings.database_url.startswith("sqlite"):
        # Sessions are opened from anyio worker threads.
        connect_args["check_same_thread"] = False
    return create_engine(
        settings.database_url, pool_pre_ping=True, connect_args=connect_args
    )


engine = _build_engine(settings)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database() -> None:
    """Ensure all ORM models have corresponding database tables."""

    from experience_hub.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database schema ready on %s", engine.url.render_as_string(hide_password=True))


def get_db() -> Generator:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def run_in_session(
    work: Callable[[Session], T], session_factory: Callable[[], Session] | None = None
) -> T:
    """Execute ``work`` inside a short-lived session and return its result."""

    factory = session_factory or SessionLocal
    with factory() as session:
        return work(session)


async def run_in_session_async(
    work: Callable[[Session], T], session_factory: Callable[[], Session] | None = None
) -> T:
    """Run ``work`` in a worker thread so the event loop keeps serving sockets."""

    return await to_thread.run_sync(run_in_session, work, session_factory)


__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "get_db",
    "initialize_database",
    "run_in_session",
    "run_in_session_async",
]
