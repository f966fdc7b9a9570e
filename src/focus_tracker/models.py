"""Domain models for tracked focus."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Union

LOCKED_SCREEN_APP = "Locked screen"

AggregationTable = dict[str, dict[str, timedelta]]


class Bucket(enum.Enum):
    """Partition a credited interval lands in."""

    WORK = ""
    OUTSIDE = "_outside"

    @property
    def suffix(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class FocusKey:
    """Application and window title that currently hold the user's attention."""

    application: str
    title: str = ""


@dataclass(frozen=True, slots=True)
class NoFocus:
    pass


@dataclass(frozen=True, slots=True)
class NormalFocus:
    key: FocusKey


@dataclass(frozen=True, slots=True)
class LockedFocus:
    """The screen was locked (or the user went idle) at ``locked_at``."""

    locked_at: datetime

    @property
    def key(self) -> FocusKey:
        return FocusKey(LOCKED_SCREEN_APP, self.locked_at.strftime("%H-%M-%S"))


FocusState = Union[NoFocus, NormalFocus, LockedFocus]


@dataclass(slots=True)
class FocusSession:
    state: FocusState
    since: datetime


@dataclass(frozen=True, slots=True)
class Credit:
    """A contiguous interval credited to one table entry."""

    key: FocusKey
    bucket: Bucket
    start: datetime
    duration: timedelta


def add_duration(table: AggregationTable, key: FocusKey, duration: timedelta) -> None:
    titles = table.setdefault(key.application, {})
    titles[key.title] = titles.get(key.title, timedelta(0)) + duration


def table_total(table: AggregationTable) -> timedelta:
    return sum(
        (duration for titles in table.values() for duration in titles.values()),
        timedelta(0),
    )
