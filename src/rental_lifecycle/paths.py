"""Filesystem paths for the rental lifecycle application."""

from __future__ import annotations

import os
from pathlib import Path

from rental_lifecycle.config import (
    APP_DATA_DIRNAME,
    CONFIG_FILENAME,
    DB_FILENAME,
    HOME_ENV_VAR,
    LOGS_DIRNAME,
    RECEIPTS_DIRNAME,
)


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_app_data_dir() -> Path:
    """Create and return the app data directory for the current user."""
    override = os.getenv(HOME_ENV_VAR)
    if override:
        return _ensure_dir(Path(override))
    appdata = os.getenv("APPDATA")
    if appdata:
        base_dir = Path(appdata)
    else:
        base_dir = Path.home() / ".rental_lifecycle"
    return _ensure_dir(base_dir / APP_DATA_DIRNAME)


def get_db_path() -> Path:
    """Return the path to the SQLite database file."""
    return get_app_data_dir() / DB_FILENAME


def get_config_path() -> Path:
    """Return the path to the JSON settings file."""
    return get_app_data_dir() / CONFIG_FILENAME


def get_logs_dir() -> Path:
    """Create and return the log directory inside the app data folder."""
    return _ensure_dir(get_app_data_dir() / LOGS_DIRNAME)


def get_receipts_dir() -> Path:
    """Create and return the booking receipts directory."""
    return _ensure_dir(get_app_data_dir() / RECEIPTS_DIRNAME)
