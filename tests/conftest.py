from __future__ import annotations

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from barbershop.config import Settings
from barbershop.db import get_session
from barbershop.deps import get_settings
from barbershop.main import app

CLOSED = 2  # Wednesday


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite://", closed_weekday=CLOSED)


@pytest.fixture
def client(engine, settings):
    def session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = session_override
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def open_day():
    """open_day(n) -> the n-th day after today the shop is open (n >= 1)."""

    def _open_day(n: int = 1) -> date:
        day = date.today()
        found = 0
        while found < n:
            day += timedelta(days=1)
            if day.weekday() != CLOSED:
                found += 1
        return day

    return _open_day


@pytest.fixture
def closed_day() -> date:
    day = date.today() + timedelta(days=1)
    while day.weekday() != CLOSED:
        day += timedelta(days=1)
    return day
