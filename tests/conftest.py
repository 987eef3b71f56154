"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from shortlink import crud
from shortlink.config import Settings
from shortlink.main import create_app

TOKEN = "test-token"


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        api_token=TOKEN,
        short_domain="https://s.example.com/",
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        log_level="DEBUG",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def session_factory(app):
    return app.state.session_factory


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock(monkeypatch):
    """Freeze crud.utcnow so expiry can be tested without sleeping."""
    clock = Clock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))
    monkeypatch.setattr(crud, "utcnow", lambda: clock.now)
    return clock
