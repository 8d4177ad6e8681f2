# tests/conftest.py

from unittest.mock import MagicMock

import pytest

from tinymon_operator.settings import Settings
from tinymon_operator.tinymon.client import TinyMonClient


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """Predictable operator environment for every test."""
    monkeypatch.setenv("TINYMON_URL", "https://tinymon.example.com/")
    monkeypatch.setenv("TINYMON_API_KEY", "test-key")
    monkeypatch.setenv("CLUSTER_NAME", "prod")
    for name in ("TINYMON_TIMEOUT", "TINYMON_RETRY_ATTEMPTS", "TINYMON_RETRY_MAX_WAIT", "TINYMON_SYNC_INTERVAL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    return Settings(tinymon_url="https://tinymon.example.com", api_key="test-key", cluster="prod")


@pytest.fixture
def client():
    """Push client double recording every call in order."""
    mock = MagicMock(spec=TinyMonClient)
    mock.delete_host.return_value = True
    mock.delete_check.return_value = True
    return mock


def make_body(name, namespace=None, annotations=None, spec=None, status=None, **metadata):
    meta = {"name": name, **metadata}
    if namespace:
        meta["namespace"] = namespace
    if annotations is not None:
        meta["annotations"] = annotations
    return {"metadata": meta, "spec": spec or {}, "status": status or {}}


ENABLED = {"tinymon.io/enabled": "true"}
