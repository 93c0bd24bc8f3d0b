"""Tests for settings and logging."""

import logging
from pathlib import Path

import pytest

from dotstore.core import config
from dotstore.core.config import get_logger
from dotstore.core.models import DecodePolicy

_ENV = [
    "DOTSTORE_DB_PATH",
    "DOTSTORE_TABLE_PREFIX",
    "DOTSTORE_BUSY_TIMEOUT",
    "DOTSTORE_DECODE_POLICY",
    "DOTSTORE_LOCK_ROOTS",
    "DOTSTORE_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Start every test from an unset environment and a cold settings cache."""
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)
    config.reset_settings_cache()
    yield
    config.reset_settings_cache()


class TestSettings:
    """Tests for get_settings()."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test the values used when nothing is configured."""
        monkeypatch.chdir(tmp_path)

        settings = config.get_settings()

        assert settings.db_path == Path.cwd() / ".dotstore" / "store.db"
        assert settings.table_prefix == "dotstore_"
        assert settings.busy_timeout == 5.0
        assert settings.decode_policy is DecodePolicy.AS_MAP
        assert settings.lock_roots is False
        assert settings.log_level == "WARNING"

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test that each variable is read."""
        monkeypatch.setenv("DOTSTORE_DB_PATH", str(tmp_path / "custom.db"))
        monkeypatch.setenv("DOTSTORE_TABLE_PREFIX", "kv_")
        monkeypatch.setenv("DOTSTORE_BUSY_TIMEOUT", "0.5")
        monkeypatch.setenv("DOTSTORE_DECODE_POLICY", "Struct")
        monkeypatch.setenv("DOTSTORE_LOCK_ROOTS", "yes")
        monkeypatch.setenv("DOTSTORE_LOG_LEVEL", "debug")

        settings = config.get_settings()

        assert settings.db_path == tmp_path / "custom.db"
        assert settings.table_prefix == "kv_"
        assert settings.busy_timeout == 0.5
        assert settings.decode_policy is DecodePolicy.AS_STRUCT
        assert settings.lock_roots is True
        assert settings.log_level == "DEBUG"

    def test_settings_are_cached(self) -> None:
        """Test that repeated calls return the same object until reset."""
        first = config.get_settings()
        assert config.get_settings() is first

        config.reset_settings_cache()
        assert config.get_settings() is not first

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("DOTSTORE_DECODE_POLICY", "yaml"),
            ("DOTSTORE_BUSY_TIMEOUT", "soon"),
            ("DOTSTORE_BUSY_TIMEOUT", "-1"),
            ("DOTSTORE_LOG_LEVEL", "LOUD"),
        ],
    )
    def test_invalid_values_rejected(
        self, monkeypatch: pytest.MonkeyPatch, name: str, value: str
    ) -> None:
        """Test that unusable values raise ValueError naming the variable."""
        monkeypatch.setenv(name, value)

        with pytest.raises(ValueError) as exc_info:
            config.get_settings()

        assert name in str(exc_info.value)


class TestLogging:
    """Tests for get_logger()."""

    def test_logger_respects_configured_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that loggers live under the dotstore namespace at the configured level."""
        monkeypatch.setenv("DOTSTORE_LOG_LEVEL", "DEBUG")

        logger = get_logger("tests.logging")
        config.get_settings()

        assert logger.getEffectiveLevel() == logging.DEBUG
        assert logger.name == "dotstore.tests.logging"

    def test_get_logger_reads_no_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a bad environment only fails once settings are resolved."""
        monkeypatch.setenv("DOTSTORE_LOG_LEVEL", "LOUD")

        logger = get_logger("tests.lazy")

        assert logger.name == "dotstore.tests.lazy"
        with pytest.raises(ValueError):
            config.get_settings()

    def test_root_logger_name(self) -> None:
        """Test that no name gives the package logger."""
        assert get_logger().name == "dotstore"
