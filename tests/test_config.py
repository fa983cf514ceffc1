"""Tests for settings."""

import pytest
from pydantic import ValidationError

from paperless_bridge.core.config import Settings


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("BASE_DIR", raising=False)
    settings = Settings(base_dir=tmp_path)

    assert settings.paperless_helper_port == 3137
    assert settings.poll_interval == 5.0
    assert settings.ignore_existing_file is True
    assert settings.reprocess_existing_documents is True
    assert settings.download_original is False
    assert settings.duplicate_phrase == "It is a duplicate"
    assert not settings.polling_is_unbounded


def test_staging_directories_are_created(tmp_path):
    settings = Settings(base_dir=tmp_path)

    assert (tmp_path / "originals").is_dir()
    assert (tmp_path / "pdf-a").is_dir()
    assert settings.archive_path == tmp_path / "pdf-a"


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("PAPERLESS_URL", "http://paperless:8000/")
    monkeypatch.setenv("PAPERLESS_HELPER_PORT", "4000")
    monkeypatch.setenv("POLL_TIMEOUT", "0")
    monkeypatch.setenv("REPROCESS_EXISTING_DOCUMENTS", "false")

    settings = Settings(base_dir=tmp_path)

    assert settings.paperless_url == "http://paperless:8000"
    assert settings.paperless_helper_port == 4000
    assert settings.polling_is_unbounded
    assert settings.reprocess_existing_documents is False


def test_unbounded_polling_needs_an_interval(tmp_path):
    with pytest.raises(ValidationError):
        Settings(base_dir=tmp_path, poll_timeout=0, poll_interval=0)


def test_bounded_polling_allows_zero_interval(tmp_path):
    settings = Settings(base_dir=tmp_path, poll_interval=0, poll_max_attempts=3)

    assert settings.poll_interval == 0
    assert not settings.polling_is_unbounded
