"""Render aggregation tables into the daily summary log format."""

from __future__ import annotations

from datetime import date, timedelta

from .durations import render_duration
from .models import AggregationTable, Bucket

SUMMARY_HEADER = "Focus Summary for"
SEPARATOR = "-" * 40
NO_TITLE = "(no title)"
APP_SEPARATOR = "—"


def render_summary(table: AggregationTable, day: date, bucket: Bucket) -> str:
    """Return the text of one bucket's summary for ``day``.

    Applications and titles are sorted; each application's total is the sum
    of its title durations at the time of rendering.
    """
    lines = [
        f"{SUMMARY_HEADER} {day.isoformat()} ({bucket.suffix})",
        SEPARATOR,
    ]
    for application in sorted(table):
        titles = table[application]
        total = sum(titles.values(), timedelta(0))
        lines.append(f"{application} {APP_SEPARATOR} {render_duration(total)}")
        for title in sorted(titles):
            lines.append(f"  - {title or NO_TITLE}: {render_duration(titles[title])}")
    lines.append("")
    return "\n".join(lines) + "\n"
