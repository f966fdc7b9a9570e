from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

import pytest

from focus_tracker.models import FocusKey
from focus_tracker.probes import FocusProbe
from focus_tracker.storage import SummaryStore

# 2024-01-02 was a Tuesday.
TUESDAY_10AM = datetime(2024, 1, 2, 10, 0, 0)


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


class FakeProbe(FocusProbe):
    """Replays scripted idle times and foreground windows."""

    def __init__(self) -> None:
        self.idle = 0
        self.identity: Optional[tuple[str, str]] = None
        self.titles: dict[str, str] = {}

    def focus(self, application: str, title: str = "") -> None:
        self.identity = (application, application)
        self.titles[application] = title

    def idle_seconds(self) -> int:
        return self.idle

    def foreground_identity(self) -> Optional[tuple[str, str]]:
        return self.identity

    def window_title(self, process_name: str) -> str:
        return self.titles.get(process_name, "")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(TUESDAY_10AM)


@pytest.fixture
def probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def store(tmp_path) -> SummaryStore:
    return SummaryStore(tmp_path / "logs")


def key(application: str, title: str = "") -> FocusKey:
    return FocusKey(application, title)
