"""Helpers for locating application directories."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "ActivityInsights"
APP_AUTHOR = "ActivityInsights"


def _dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)


def get_config_dir() -> Path:
    """Return the directory holding user settings."""
    path = Path(_dirs().user_config_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_settings_path() -> Path:
    return get_config_dir() / "settings.json"


def get_log_path() -> Path:
    path = Path(_dirs().user_log_path)
    path.mkdir(parents=True, exist_ok=True)
    return path / "insights.log"
