"""Text encoding for durations stored in the daily summary logs."""

from __future__ import annotations

import re
from datetime import timedelta

# "m" must not swallow the "m" of a millisecond unit such as "300ms".
_COMPONENT_PATTERNS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"(\d+(?:\.\d+)?)\s*h"), 3600),
    (re.compile(r"(\d+(?:\.\d+)?)\s*m(?!s)"), 60),
    (re.compile(r"(\d+(?:\.\d+)?)\s*s"), 1),
)


def render_duration(duration: timedelta) -> str:
    """Render ``duration`` as ``1h2m3s``, dropping leading zero units.

    Sub-second precision is rounded away; negative durations render as ``0s``.
    """
    total_seconds = max(int(round(duration.total_seconds())), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{minutes}m{seconds}s"
    return f"{seconds}s"


def parse_duration(text: str) -> timedelta:
    """Parse any subset of hour/minute/second components.

    Missing components count as zero and unrecognised text is ignored, so a
    hand-edited or damaged value degrades to a partial total instead of
    failing.
    """
    total = 0.0
    for pattern, unit_seconds in _COMPONENT_PATTERNS:
        match = pattern.search(text)
        if match:
            total += float(match.group(1)) * unit_seconds
    return timedelta(seconds=round(total))
