"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta

from .merge import merge_summary
from .models import LOCKED_SCREEN_APP, AggregationTable, Bucket, table_total
from .storage import SummaryStore
from .summary import NO_TITLE


class SummaryPrinter:
    """Render human-readable summaries of the persisted logs in the console."""

    def __init__(self, store: SummaryStore) -> None:
        self.store = store

    def load(self, day: date) -> dict[Bucket, AggregationTable]:
        tables: dict[Bucket, AggregationTable] = {}
        for bucket in Bucket:
            tables[bucket] = {}
            merge_summary(self.store.read_summary(day, bucket), tables[bucket])
        return tables

    def print_daily_summary(self, day: date) -> None:
        tables = self.load(day)
        if not any(tables.values()):
            print("No focus recorded for the selected day.")
            return

        work = tables[Bucket.WORK]
        outside = tables[Bucket.OUTSIDE]
        print(f"Summary for {day.isoformat()}")
        print("-" * 40)
        print(f"Work hours:    {format_duration(table_total(work))}")
        print(f"Outside hours: {format_duration(table_total(outside))}")
        locked = timedelta(0)
        for table in tables.values():
            locked += sum(table.get(LOCKED_SCREEN_APP, {}).values(), timedelta(0))
        print(f"Locked screen: {format_duration(locked)}")
        print()

        top_entries = aggregate_by_application(work, outside)
        if top_entries:
            print("Top applications:")
            for application, duration in top_entries[:5]:
                print(f"  {application:<30} {format_duration(duration)}")

        top_windows = aggregate_top_windows(work, outside)
        if top_windows:
            print()
            print("Top windows / tabs:")
            for application, title, duration in top_windows[:5]:
                label = title or NO_TITLE
                print(f"  {application[:12]:<12} {label[:45]:<45} {format_duration(duration)}")


def aggregate_by_application(*tables: AggregationTable) -> list[tuple[str, timedelta]]:
    totals: defaultdict[str, timedelta] = defaultdict(timedelta)
    for table in tables:
        for application, titles in table.items():
            if application == LOCKED_SCREEN_APP:
                continue
            totals[application] += sum(titles.values(), timedelta(0))
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)


def aggregate_top_windows(*tables: AggregationTable) -> list[tuple[str, str, timedelta]]:
    totals: defaultdict[tuple[str, str], timedelta] = defaultdict(timedelta)
    for table in tables:
        for application, titles in table.items():
            if application == LOCKED_SCREEN_APP:
                continue
            for title, duration in titles.items():
                totals[(application, title)] += duration
    sorted_items = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [(application, title, duration) for (application, title), duration in sorted_items]


def format_duration(duration: timedelta) -> str:
    total_seconds = int(round(duration.total_seconds()))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
