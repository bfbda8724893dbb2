"""Shared fixtures: in-memory database, API client and seeded rows."""

import os

from cryptography.fernet import Fernet

os.environ.setdefault("SD_ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ.setdefault("SD_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import stratdeck.models  # noqa: F401
from stratdeck.database import get_session
from stratdeck.main import app
from stratdeck.models.strategy import StrategyCatalog
from stratdeck.models.user import User
from stratdeck.services.auth import create_access_token, hash_password


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite leaves foreign keys unchecked unless asked, Postgres always checks
    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    def _get_session():
        yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(session: Session, email: str, name: str = "Test User") -> User:
    user = User(email=email, name=name, hashed_password=hash_password("secret-pw"))
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def user(session) -> User:
    return _make_user(session, "alice@example.com", "Alice")


@pytest.fixture
def other_user(session) -> User:
    return _make_user(session, "bob@example.com", "Bob")


@pytest.fixture
def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def other_headers(other_user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}


@pytest.fixture
def strategy(session) -> StrategyCatalog:
    row = StrategyCatalog(name="Nifty Momentum", image_uri="https://img/momo.png", default_qty=2)
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


@pytest.fixture
def telegram_strategy(session) -> StrategyCatalog:
    row = StrategyCatalog(name="Alert Scalper", requires_telegram=True)
    session.add(row)
    session.commit()
    session.refresh(row)
    return row
