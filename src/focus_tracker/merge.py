"""Recover aggregation totals from a previously written summary log."""

from __future__ import annotations

import logging
import re
from typing import Optional

from .durations import parse_duration
from .models import AggregationTable, FocusKey, add_duration
from .summary import APP_SEPARATOR, NO_TITLE, SEPARATOR, SUMMARY_HEADER

logger = logging.getLogger(__name__)

# "<application> — <duration>"; the duration never contains spaces or colons.
_HEADER_PATTERN = re.compile(rf"^(.+?)\s+{APP_SEPARATOR}\s+[^\s:]+$")


def merge_summary(text: Optional[str], into: AggregationTable) -> int:
    """Add the per-title durations found in ``text`` to ``into``.

    Application lines only set the context for the entries below them;
    their totals are ignored and recomputed when the table is written again.
    Durations are added, never overwritten, so a given log must be merged at
    most once per run. Returns the number of entries merged.
    """
    if not text:
        return 0

    merged = 0
    application: Optional[str] = None
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(SUMMARY_HEADER) or line == SEPARATOR:
            continue

        header = _HEADER_PATTERN.match(line)
        if header:
            application = header.group(1).strip() or None
            continue

        if line.startswith("-"):
            key_and_duration = _parse_entry(line, application)
            if key_and_duration is None:
                logger.debug("Skipping summary line %d: %r", lineno, raw_line)
                continue
            key, duration_text = key_and_duration
            add_duration(into, key, parse_duration(duration_text))
            merged += 1
            continue

        if APP_SEPARATOR in line:
            name = line.rpartition(APP_SEPARATOR)[0].strip()
            application = name or None
            continue

        logger.debug("Skipping summary line %d: %r", lineno, raw_line)
    return merged


def _parse_entry(line: str, application: Optional[str]) -> Optional[tuple[FocusKey, str]]:
    if application is None:
        return None
    title, sep, duration_text = line[1:].rpartition(":")
    if not sep:
        return None
    title = title.strip()
    if title == NO_TITLE:
        title = ""
    return FocusKey(application, title), duration_text.strip()
