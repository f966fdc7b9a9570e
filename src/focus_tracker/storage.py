"""Flat-file storage for the daily summary logs."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from .models import Bucket
from .paths import summary_file_name

logger = logging.getLogger(__name__)


class SummaryStore:
    """Reads and writes UTF-8 text blobs by file name inside ``log_dir``."""

    def __init__(self, log_dir: Path) -> None:
        self.log_dir = Path(log_dir)

    def path_for(self, day: date, bucket: Bucket) -> Path:
        return self.log_dir / summary_file_name(day, bucket)

    def read_text(self, name: str) -> Optional[str]:
        """Return the blob stored under ``name``, or ``None`` if it is absent."""
        path = self.log_dir / name
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError:
            logger.exception("Could not read %s", path)
            return None

    def write_text(self, name: str, text: str) -> bool:
        """Replace the blob stored under ``name``; returns ``False`` on failure."""
        path = self.log_dir / name
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write log file %s: %s", path, exc)
            return False
        return True

    def read_summary(self, day: date, bucket: Bucket) -> Optional[str]:
        return self.read_text(summary_file_name(day, bucket))

    def write_summary(self, day: date, bucket: Bucket, text: str) -> bool:
        return self.write_text(summary_file_name(day, bucket), text)
