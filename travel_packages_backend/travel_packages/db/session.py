from __future__ import annotations

import logging
from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from travel_packages.core.settings import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for ORM models."""


def _engine_options(url: str) -> dict[str, Any]:
    """Engine keyword arguments for the given URL.

    SQLite needs `check_same_thread=False` because FastAPI runs sync handlers
    in a thread pool; an in-memory SQLite database additionally needs a
    StaticPool so every connection sees the same database.
    """
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options


class Database:
    """Owns the SQLAlchemy engine and the session factory for one application."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.engine: Engine = create_engine(url, **_engine_options(url))
        self.session_factory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    def create_all(self) -> None:
        """Create every table registered on `Base` (idempotent)."""
        # Models must be imported so they are registered on the metadata.
        from travel_packages.db import models  # noqa: F401

        Base.metadata.create_all(self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def close(self) -> None:
        self.engine.dispose()


@dataclass
class AppContext:
    """Everything a request handler may need, built once per application."""

    settings: Settings
    database: Database

    # PUBLIC_INTERFACE
    @classmethod
    def open(cls, settings: Settings) -> "AppContext":
        """This is a public function.

        Build the context for `settings`. Engine creation is lazy in
        SQLAlchemy, so an unreachable database only fails the first request
        that needs it.
        """
        database = Database(settings.sqlalchemy_database_uri)
        logger.info("Opened database engine (%s)", database.engine.url.render_as_string(hide_password=True))
        return cls(settings=settings, database=database)

    def close(self) -> None:
        self.database.close()
        logger.info("Closed database engine")


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the application's context."""
    return request.app.state.context


# PUBLIC_INTERFACE
def get_db(request: Request) -> Generator[Session, None, None]:
    """This is a public function.

    FastAPI dependency that yields a SQLAlchemy Session and guarantees cleanup.

    Yields:
        sqlalchemy.orm.Session: DB session scoped to the request.
    """
    db: Session = get_context(request).database.session()
    try:
        yield db
    finally:
        db.close()
