"""Shared fixtures: settings, both storage backends and an API client."""

import pytest
from fastapi.testclient import TestClient

from students_api.core.config import Settings
from students_api.main import create_app
from students_api.storage.memory import InMemoryStorage
from students_api.storage.sqlite import SqliteStorage


@pytest.fixture(autouse=True)
def _no_config_file(monkeypatch):
    """Keep a developer's CONFIG_PATH from leaking into the tests."""
    monkeypatch.delenv("CONFIG_PATH", raising=False)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(env="test", storage_path=str(tmp_path / "storage" / "students.db"))


@pytest.fixture
def sqlite_storage(settings):
    storage = SqliteStorage(settings.storage_path)
    yield storage
    storage.close()


@pytest.fixture(params=["sqlite", "memory"])
def storage(request, tmp_path):
    """Every storage contract test runs against both backends."""
    if request.param == "sqlite":
        backend = SqliteStorage(str(tmp_path / "students.db"))
    else:
        backend = InMemoryStorage()
    yield backend
    backend.close()


@pytest.fixture
def client(settings):
    """Client for an app that builds its own sqlite storage on startup."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
