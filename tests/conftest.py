"""Pytest configuration and fixtures for codeflow tests."""

from pathlib import Path

import pytest

from codeflow.server import create_app
from codeflow.storage import HistoryStore
from codeflow.utils.config import CONFIG_ENV_VAR, config


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """Keep the global config singleton from leaking between tests."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    config.reset()
    yield
    config.reset()


@pytest.fixture
def history_path(tmp_path) -> Path:
    return tmp_path / "history.json"


@pytest.fixture
def store(history_path) -> HistoryStore:
    return HistoryStore(history_path, default_limit=10)


@pytest.fixture
def client(history_path):
    app = create_app(history_path=history_path)
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def config_file(tmp_path, history_path) -> Path:
    """YAML config pointing the history store into tmp_path."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "storage:\n"
        f"  history_path: {history_path.as_posix()}\n"
        "  history_limit: 5\n"
        "logging:\n"
        "  level: WARNING\n",
        encoding="utf-8",
    )
    return path
