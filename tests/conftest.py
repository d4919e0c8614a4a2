"""Shared fixtures for snownotes tests."""

from datetime import datetime, timedelta, timezone
import logging

import pytest

from snownotes.db import Database, MemoryDatabase
from snownotes.store import NoteStore


class FakeClock:
    """Settable clock returning aware UTC datetimes."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 5, 19, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep every test away from the real home and config directories."""
    monkeypatch.setenv("SNOWNOTES_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("SNOWNOTES_LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers and level set on the snownotes logger by a test."""
    yield
    logger = logging.getLogger("snownotes")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, tmp_path):
    if request.param == "memory":
        return MemoryDatabase()
    return Database(tmp_path / "notes.db")


@pytest.fixture
def store(backend, clock):
    return NoteStore(backend, clock=clock)


@pytest.fixture
def write_config(tmp_path):
    """Write config.toml under the isolated XDG_CONFIG_HOME."""
    def _write(text: str):
        config_dir = tmp_path / "config" / "snownotes"
        config_dir.mkdir(parents=True, exist_ok=True)
        path = config_dir / "config.toml"
        path.write_text(text, encoding="utf-8")
        return path
    return _write
