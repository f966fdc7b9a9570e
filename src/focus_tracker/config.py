"""Configuration models and helpers for the focus tracker."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

WEEKDAY_NAMES: tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
DEFAULT_WORKDAYS: frozenset[int] = frozenset(range(5))
DEFAULT_IDLE_SECONDS = 120


@dataclass(frozen=True, order=True, slots=True)
class TimeOfDay:
    """A wall-clock time without a date, ordered by (hour, minute)."""

    hour: int
    minute: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            raise ValueError(f"Invalid time of day {self.hour}:{self.minute}")

    @classmethod
    def parse(cls, value: str) -> "TimeOfDay":
        """Parse ``HH:MM``; raises ``ValueError`` on anything else."""
        hour_text, sep, minute_text = value.strip().partition(":")
        if not sep or not hour_text.isdigit() or not minute_text.isdigit():
            raise ValueError(f"Expected HH:MM, got {value!r}")
        return cls(int(hour_text), int(minute_text))

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True, slots=True)
class WorkWindowConfig:
    """Weekdays (Monday=0) and the time-of-day range counted as work hours."""

    workdays: frozenset[int] = DEFAULT_WORKDAYS
    start: TimeOfDay = TimeOfDay(8, 0)
    end: TimeOfDay = TimeOfDay(17, 0)

    @property
    def crosses_midnight(self) -> bool:
        return self.start > self.end


@dataclass(frozen=True, slots=True)
class TrackerSettings:
    """Runtime configuration for the focus tracker."""

    idle_threshold: timedelta = timedelta(seconds=DEFAULT_IDLE_SECONDS)
    work_window: WorkWindowConfig = field(default_factory=WorkWindowConfig)
    sample_interval: timedelta = timedelta(seconds=2)
    locked_interval: timedelta = timedelta(seconds=5)
    autosave_interval: timedelta = timedelta(minutes=10)
    log_dir: Optional[Path] = None

    @classmethod
    def from_values(
        cls,
        idle_seconds: Optional[str] = None,
        workdays: Optional[str] = None,
        work_start: Optional[str] = None,
        work_end: Optional[str] = None,
        log_dir: Optional[Path] = None,
        sample_seconds: float = 2.0,
    ) -> "TrackerSettings":
        """Build settings from raw option values, falling back to defaults."""
        defaults = WorkWindowConfig()
        window = WorkWindowConfig(
            workdays=parse_workdays(workdays),
            start=parse_time_of_day(work_start, defaults.start),
            end=parse_time_of_day(work_end, defaults.end),
        )
        return cls(
            idle_threshold=timedelta(seconds=parse_idle_seconds(idle_seconds)),
            work_window=window,
            sample_interval=timedelta(seconds=sample_seconds),
            log_dir=Path(log_dir) if log_dir else None,
        )


def parse_idle_seconds(value: Optional[str], default: int = DEFAULT_IDLE_SECONDS) -> int:
    if value is None or not str(value).strip():
        return default
    try:
        seconds = int(str(value).strip())
    except ValueError:
        logger.warning("Could not parse idle threshold %r; using %ds.", value, default)
        return default
    if seconds < 0:
        logger.warning("Negative idle threshold %r; using %ds.", value, default)
        return default
    return seconds


def parse_workdays(value: Optional[str]) -> frozenset[int]:
    """Parse a comma-separated list such as ``Mon,Tue,Wed``.

    Unknown names are ignored. An empty or missing value means Monday to
    Friday; so does a list in which no name is recognised.
    """
    if value is None or not value.strip():
        return DEFAULT_WORKDAYS
    days: set[int] = set()
    for part in value.split(","):
        name = part.strip().lower()[:3]
        if name in WEEKDAY_NAMES:
            days.add(WEEKDAY_NAMES.index(name))
        elif name:
            logger.warning("Ignoring unknown weekday %r.", part.strip())
    if not days:
        logger.warning("No valid weekdays in %r; using Mon-Fri.", value)
        return DEFAULT_WORKDAYS
    return frozenset(days)


def parse_time_of_day(value: Optional[str], default: TimeOfDay) -> TimeOfDay:
    if value is None or not value.strip():
        return default
    try:
        return TimeOfDay.parse(value)
    except ValueError:
        logger.warning("Could not parse time %r; using %s.", value, default)
        return default
