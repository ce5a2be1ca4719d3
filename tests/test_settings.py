# tests/test_settings.py
"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from campus_board.core.settings import Settings


def test_database_url_is_used_verbatim(monkeypatch) -> None:
    url = "postgresql+psycopg://board:secret@db/board"
    monkeypatch.setenv("DATABASE_URL", url)
    loaded = Settings(_env_file=None)
    assert loaded.database_url == url
    assert not hasattr(loaded, "database_url_sync")


def test_secret_key_is_required(monkeypatch) -> None:
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_revalidation_settings(monkeypatch) -> None:
    monkeypatch.setenv("REVALIDATE_WEBHOOK_URL", "http://render.test/api/revalidate")
    monkeypatch.setenv("REVALIDATE_TIMEOUT_SECONDS", "2.5")
    loaded = Settings(_env_file=None)
    assert loaded.revalidate_webhook_url == "http://render.test/api/revalidate"
    assert loaded.revalidate_timeout_seconds == 2.5
