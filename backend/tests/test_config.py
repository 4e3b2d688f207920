"""Tests for settings loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from app.config import Settings

ENV_VARS = (
    "HOSTEL_HOST", "HOSTEL_PORT", "HOSTEL_WEB_ROOT", "HOSTEL_SNAPSHOT_BACKEND",
    "HOSTEL_SNAPSHOT_PATH", "HOSTEL_CORS_ORIGINS", "HOSTEL_LOG_LEVEL",
    "DB_HOST", "DB_NAME", "DB_USER", "DB_PASS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings.from_env()

    assert settings.port == 8080
    assert settings.snapshot_backend == "file"
    assert settings.snapshot_path == Path("data") / "rooms.json"
    assert settings.cors_origins == ["*"]


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("HOSTEL_PORT", "9000")
    monkeypatch.setenv("HOSTEL_SNAPSHOT_BACKEND", " Postgres ")
    monkeypatch.setenv("HOSTEL_CORS_ORIGINS", "http://a.example, http://b.example")
    monkeypatch.setenv("DB_NAME", "hostel")
    monkeypatch.setenv("HOSTEL_WEB_ROOT", "")

    settings = Settings.from_env()

    assert settings.port == 9000
    assert settings.snapshot_backend == "postgres"
    assert settings.cors_origins == ["http://a.example", "http://b.example"]
    assert settings.db_name == "hostel"
    assert settings.web_root == Path("web")


def test_unknown_backend(monkeypatch) -> None:
    monkeypatch.setenv("HOSTEL_SNAPSHOT_BACKEND", "redis")

    with pytest.raises(ValidationError):
        Settings.from_env()
