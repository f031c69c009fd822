"""
Shared fixtures: every test gets its own in-memory SQLite engine.
The app fixture routes the request-scoped session dependency to it.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = ""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from bugtracker.db.database import build_engine, build_session_factory, get_session, init_db
from bugtracker.services.bug_store import BugStore


class TickingClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self, start=datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    s = build_session_factory(engine)()
    yield s
    s.close()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(session, clock):
    return BugStore(session, clock=clock)


@pytest.fixture
def app(engine):
    from main import create_app

    application = create_app()
    factory = build_session_factory(engine)

    def _session_override():
        s = factory()
        try:
            yield s
        finally:
            s.close()

    application.dependency_overrides[get_session] = _session_override
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
