"""Environment-driven settings for dotstore."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotstore.core.models import DecodePolicy

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}

DEFAULT_DB_DIR = ".dotstore"
DEFAULT_DB_NAME = "store.db"


def _bool_from_env(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid number for {name}: '{raw}'") from exc
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def _decode_policy_from_env(raw: str | None) -> DecodePolicy:
    if raw is None:
        return DecodePolicy.AS_MAP
    value = raw.strip().lower()
    try:
        return DecodePolicy(value)
    except ValueError as exc:
        allowed = sorted(p.value for p in DecodePolicy)
        raise ValueError(
            f"Unsupported DOTSTORE_DECODE_POLICY '{value}'. Expected one of {allowed}."
        ) from exc


def _log_level_from_env(raw: str | None) -> str:
    level = (raw or "WARNING").strip().upper()
    if level not in _LOG_LEVELS:
        raise ValueError(
            f"Unsupported DOTSTORE_LOG_LEVEL '{level}'. Expected one of {sorted(_LOG_LEVELS)}."
        )
    return level


@dataclass(frozen=True)
class Settings:
    # Storage
    db_path: Path
    table_prefix: str
    busy_timeout: float

    # Behaviour
    decode_policy: DecodePolicy
    lock_roots: bool

    # Logging
    log_level: str


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger under the dotstore namespace.

    Reads no settings: the level is inherited from the "dotstore" logger,
    which get_settings() configures.
    """
    return logging.getLogger("dotstore" if name is None else f"dotstore.{name}")


def _configure_logging(level: str) -> None:
    logger = logging.getLogger("dotstore")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    raw_db_path = os.getenv("DOTSTORE_DB_PATH", "").strip()
    db_path = Path(raw_db_path) if raw_db_path else Path.cwd() / DEFAULT_DB_DIR / DEFAULT_DB_NAME

    table_prefix = os.getenv("DOTSTORE_TABLE_PREFIX", "dotstore_")

    settings = Settings(
        db_path=db_path,
        table_prefix=table_prefix,
        busy_timeout=_float_from_env("DOTSTORE_BUSY_TIMEOUT", 5.0),
        decode_policy=_decode_policy_from_env(os.getenv("DOTSTORE_DECODE_POLICY")),
        lock_roots=_bool_from_env(os.getenv("DOTSTORE_LOCK_ROOTS"), default=False),
        log_level=_log_level_from_env(os.getenv("DOTSTORE_LOG_LEVEL")),
    )
    _configure_logging(settings.log_level)
    return settings


def reset_settings_cache() -> None:
    get_settings.cache_clear()
