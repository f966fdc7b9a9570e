"""Helpers for locating application directories and log files."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from platformdirs import PlatformDirs

from .models import Bucket

APP_NAME = "FocusTracker"
APP_AUTHOR = "FocusTracker"


def get_data_dir() -> Path:
    """Return the base directory for persistent data."""
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
    path = Path(dirs.user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_log_dir() -> Path:
    """Default directory for the daily focus summaries."""
    return get_data_dir() / "logs"


def get_log_path() -> Path:
    """Diagnostics log written by the ``track`` command."""
    return get_data_dir() / "tracker.log"


def summary_file_name(day: date, bucket: Bucket) -> str:
    return f"focus_tracker_{day.isoformat()}{bucket.suffix}.log"
