"""
Database
========
SQLAlchemy engine, session factory and declarative base for the record store.

One session per request: ``get_session`` is a FastAPI dependency that yields a
session and closes it after the response. Tests override it with a session
bound to an in-memory engine.
"""
import logging
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bugtracker.core.config import DATABASE_URL

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def build_engine(url: str) -> Engine:
    """Create an engine, with the SQLite tweaks needed under a threaded server."""
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # single shared connection, otherwise every checkout sees an empty db
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


engine = build_engine(DATABASE_URL)
SessionLocal = build_session_factory(engine)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create the ``bugs`` table if it does not exist yet."""
    from bugtracker.db import tables  # noqa: F401  (registers BugRecord on Base)

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info("Record store ready at %s", target.url.render_as_string(hide_password=True))


def get_session() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
