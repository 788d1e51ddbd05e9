import importlib
import pkgutil

import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel

import sentinel

from sentinel.shared.db import Database, normalize_url
from sentinel.shared.exceptions import ConfigurationError
from sentinel.web.auth.jwt import decode_token
from sentinel.web.config import WebConfig
from sentinel.web.main import create_app

from conftest import SECRET, make_token


def test_missing_required_variables(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("SECRET_KEY", raising=False)

    config = WebConfig()

    with pytest.raises(ConfigurationError) as excinfo:
        config.validate()
    assert "DATABASE_URL" in str(excinfo.value)
    assert "SECRET_KEY" in str(excinfo.value)


def test_startup_fails_without_configuration(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("SECRET_KEY", SECRET)

    with pytest.raises(ConfigurationError):
        with TestClient(create_app(WebConfig())):
            pass


def test_database_requires_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(ConfigurationError):
        Database.from_config(WebConfig())


def test_redis_is_optional(config):
    assert config.validate() == ["REDIS_URL not set - change notices stay in this process"]


def test_defaults(config):
    assert config.PORT == 8123
    assert config.COOKIE_NAME == "session"
    assert config.LOGIN_URL == "/auth/login"
    assert config.VIEW_CACHE_TTL == 30


def test_postgres_urls_use_asyncpg():
    assert normalize_url("postgres://u:p@h/db") == "postgresql+asyncpg://u:p@h/db"
    assert normalize_url("postgresql://u:p@h/db") == "postgresql+asyncpg://u:p@h/db"


def test_decode_token():
    data = decode_token(make_token(sub="abc", email="a@school.test"), SECRET)
    assert data.user_id == "abc"
    assert data.email == "a@school.test"
    assert data.profile_id is None

    assert decode_token(make_token(), "wrong-secret") is None
    assert decode_token(make_token(expires_in=-10), SECRET) is None
    assert decode_token("not-a-token", SECRET) is None


def test_every_module_imports():
    for module in pkgutil.walk_packages(sentinel.__path__, "sentinel."):
        importlib.import_module(module.name)


def test_response_schemas_read_orm_rows():
    for module_name in ("admin", "anomaly", "camera", "gate", "intervention", "student"):
        module = importlib.import_module(f"sentinel.shared.schemas.{module_name}")
        for name, obj in vars(module).items():
            if isinstance(obj, type) and issubclass(obj, BaseModel) and obj.__module__ == module.__name__:
                assert "Config" not in vars(obj), name
                if name.endswith("Response"):
                    assert obj.model_config.get("from_attributes"), name
