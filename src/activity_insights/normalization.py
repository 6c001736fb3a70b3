"""Utilities to turn raw watcher event data into activity labels."""

from __future__ import annotations

import re
from typing import Optional

UNKNOWN_ACTIVITY = "Unknown"

_BROWSER_SUFFIXES: tuple[str, ...] = (
    " - Microsoft Edge",
    " - Google Chrome",
    " - Mozilla Firefox",
    " - Brave",
    " - Opera",
)

_EXECUTABLE_SUFFIX = re.compile(r"\.(exe|app)$", re.IGNORECASE)


def normalize_app_name(app: Optional[str]) -> Optional[str]:
    """Strip executable suffixes so ``Code.exe`` and ``Code`` group together."""
    if not app:
        return None
    cleaned = _EXECUTABLE_SUFFIX.sub("", app.strip())
    return cleaned or None


def normalize_window_title(window_title: Optional[str]) -> Optional[str]:
    """Remove common browser suffixes to surface tab names."""
    if not window_title:
        return None
    normalized = window_title.strip()
    for suffix in _BROWSER_SUFFIXES:
        if normalized.endswith(suffix):
            normalized = normalized[: -len(suffix)].rstrip(" -")
            break

    normalized = re.sub(r"\s{2,}", " ", normalized).strip(" -|")
    return normalized or None


def activity_label(app: Optional[str], window_title: Optional[str]) -> str:
    """Prefer the application name; fall back to the cleaned window title."""
    return (
        normalize_app_name(app)
        or normalize_window_title(window_title)
        or UNKNOWN_ACTIVITY
    )
