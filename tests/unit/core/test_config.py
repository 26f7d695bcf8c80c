"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import FsdbConfig
from core.errors import FsdbConfigError


def test_from_env_reads_data_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve data root from environment."""
    monkeypatch.setenv("FSDB_DATA_ROOT", "./.tmp-fsdb")

    config = FsdbConfig.from_env()

    assert config.data_root.name == ".tmp-fsdb" and config.data_root.is_absolute()


def test_from_env_defaults_to_plain_keywords(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset flags should fall back to plain ids and pretty settings."""
    monkeypatch.delenv("FSDB_QUALIFIED_KEYWORDS", raising=False)
    monkeypatch.delenv("FSDB_PRETTY_SETTINGS", raising=False)

    config = FsdbConfig.from_env()

    assert config.qualified_keywords is False and config.pretty_settings is True


def test_from_env_parses_boolean_literals(monkeypatch: pytest.MonkeyPatch) -> None:
    """Boolean flags should accept common literal spellings."""
    monkeypatch.setenv("FSDB_QUALIFIED_KEYWORDS", "Yes")
    monkeypatch.setenv("FSDB_PRETTY_SETTINGS", "0")

    config = FsdbConfig.from_env()

    assert config.qualified_keywords is True and config.pretty_settings is False


def test_from_env_raises_for_invalid_boolean(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for unrecognized boolean values."""
    monkeypatch.setenv("FSDB_QUALIFIED_KEYWORDS", "maybe")

    with pytest.raises(FsdbConfigError):
        FsdbConfig.from_env()
