"""Shared fixtures: a temporary SQLite store, the app and auth tokens."""

import time

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from sentinel.shared.db.models import Base
from sentinel.web.config import WebConfig
from sentinel.web.main import create_app

SECRET = "test-secret"
STAFF_EMAIL = "guard@school.test"


def make_token(
    sub: str = "staff-1",
    email: str = STAFF_EMAIL,
    role: str = "admin",
    expires_in: int = 3600,
    secret: str = SECRET,
) -> str:
    return jwt.encode(
        {"sub": sub, "email": email, "role": role, "exp": int(time.time()) + expires_in},
        secret,
        algorithm="HS256",
    )


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "sentinel.db"


@pytest.fixture
def engine(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seed(engine):
    """Insert rows directly, returning them with their generated ids."""
    def add(*rows):
        with Session(engine, expire_on_commit=False) as session:
            session.add_all(rows)
            session.commit()
        return rows[0] if len(rows) == 1 else rows
    return add


@pytest.fixture
def fetch(engine):
    """Reload a row by primary key."""
    def get(model, key):
        with Session(engine) as session:
            row = session.get(model, key)
            if row is not None:
                session.expunge(row)
            return row
    return get


@pytest.fixture
def config(monkeypatch, db_path, engine):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("SECRET_KEY", SECRET)
    for name in ("REDIS_URL", "CORS_ORIGINS", "JWT_AUDIENCE", "COOKIE_NAME", "LOGIN_URL"):
        monkeypatch.delenv(name, raising=False)
    return WebConfig()


@pytest.fixture
def client(config):
    with TestClient(create_app(config)) as client:
        yield client


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}
