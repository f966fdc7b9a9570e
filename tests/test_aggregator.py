from datetime import datetime, timedelta

import pytest

from conftest import FakeClock, key
from focus_tracker.aggregator import FocusAggregator
from focus_tracker.config import TimeOfDay, WorkWindowConfig
from focus_tracker.models import (
    LOCKED_SCREEN_APP,
    Bucket,
    LockedFocus,
    NoFocus,
    NormalFocus,
    table_total,
)
from focus_tracker.schedule import WorkWindowClassifier

THRESHOLD = timedelta(seconds=120)


@pytest.fixture
def aggregator(clock: FakeClock) -> FocusAggregator:
    return FocusAggregator(
        WorkWindowClassifier(WorkWindowConfig()), THRESHOLD, clock=clock
    )


def test_starts_without_focus(aggregator):
    assert isinstance(aggregator.state, NoFocus)
    assert aggregator.work == {}
    assert aggregator.outside == {}


def test_end_to_end_workday_example(aggregator, clock):
    aggregator.observe(0, key("Editor", "file.go"))
    clock.advance(30)
    aggregator.observe(0, key("Browser", "docs"))
    clock.advance(45)
    aggregator.flush()

    assert aggregator.work == {
        "Editor": {"file.go": timedelta(seconds=30)},
        "Browser": {"docs": timedelta(seconds=45)},
    }
    assert aggregator.outside == {}


def test_title_change_closes_the_previous_session(aggregator, clock):
    aggregator.observe(0, key("A", "X"))
    clock.advance(10)
    credit = aggregator.observe(0, key("A", "Y"))

    assert credit is not None
    assert credit.key == key("A", "X")
    assert credit.duration == timedelta(seconds=10)
    assert aggregator.state == NormalFocus(key("A", "Y"))


def test_same_key_does_not_credit(aggregator, clock):
    aggregator.observe(0, key("A", "X"))
    clock.advance(10)
    assert aggregator.observe(0, key("A", "X")) is None
    assert aggregator.work == {}


def test_idle_locks_the_screen(aggregator, clock):
    aggregator.observe(0, key("Editor", "main.py"))
    clock.advance(5)
    credit = aggregator.observe(200, key("Editor", "main.py"))

    assert credit.key == key("Editor", "main.py")
    assert credit.duration == timedelta(seconds=5)
    assert aggregator.state == LockedFocus(clock.now)
    assert aggregator.since == clock.now


def test_idle_at_threshold_is_not_locked(aggregator):
    aggregator.observe(120, key("Editor"))
    assert isinstance(aggregator.state, NormalFocus)


def test_repeated_idle_observations_stay_locked(aggregator, clock):
    aggregator.observe(0, key("Editor"))
    clock.advance(5)
    aggregator.observe(200, None)
    locked_since = aggregator.since
    clock.advance(60)
    assert aggregator.observe(260, None) is None
    assert aggregator.since == locked_since


def test_locked_time_is_credited_to_the_locked_screen(aggregator, clock):
    aggregator.observe(0, key("Editor"))
    clock.advance(5)
    aggregator.observe(200, None)
    clock.advance(600)
    credit = aggregator.observe(0, key("Editor"))

    assert credit.key.application == LOCKED_SCREEN_APP
    assert credit.key.title == "10-00-05"
    assert aggregator.work[LOCKED_SCREEN_APP] == {"10-00-05": timedelta(minutes=10)}


def test_missing_foreground_window_is_not_a_transition(aggregator, clock):
    aggregator.observe(0, key("Editor", "main.py"))
    clock.advance(10)
    assert aggregator.observe(0, None) is None
    assert aggregator.state == NormalFocus(key("Editor", "main.py"))
    assert aggregator.work == {}


def test_empty_title_reuses_last_known_title(aggregator, clock):
    aggregator.observe(0, key("Browser", "docs"))
    clock.advance(10)
    assert aggregator.observe(0, key("Browser", "")) is None
    assert aggregator.state == NormalFocus(key("Browser", "docs"))


def test_empty_title_without_history_is_kept(aggregator, clock):
    aggregator.observe(0, key("Finder", ""))
    clock.advance(3)
    aggregator.flush()
    assert aggregator.work == {"Finder": {"": timedelta(seconds=3)}}


def test_session_is_bucketed_by_its_start(aggregator, clock):
    clock.now = datetime(2024, 1, 2, 16, 50)
    aggregator.observe(0, key("Editor"))
    clock.advance(3600)
    aggregator.flush()

    assert aggregator.work == {"Editor": {"": timedelta(hours=1)}}
    assert aggregator.outside == {}


def test_session_started_after_hours_goes_outside(aggregator, clock):
    clock.now = datetime(2024, 1, 2, 17, 0)
    aggregator.observe(0, key("Game"))
    clock.advance(60)
    credit = aggregator.flush()

    assert credit.bucket is Bucket.OUTSIDE
    assert aggregator.outside == {"Game": {"": timedelta(minutes=1)}}


def test_crossing_midnight_session_stays_in_work():
    clock = FakeClock(datetime(2024, 1, 2, 23, 50))
    window = WorkWindowConfig(start=TimeOfDay(22, 0), end=TimeOfDay(6, 0))
    aggregator = FocusAggregator(WorkWindowClassifier(window), THRESHOLD, clock=clock)
    aggregator.observe(0, key("Terminal", "deploy"))
    clock.advance(20 * 60)
    aggregator.flush()

    assert aggregator.work == {"Terminal": {"deploy": timedelta(minutes=20)}}


def test_flush_keeps_the_session_open(aggregator, clock):
    aggregator.observe(0, key("Editor"))
    clock.advance(10)
    aggregator.flush()
    assert aggregator.state == NormalFocus(key("Editor"))
    assert aggregator.since == clock.now


def test_flush_without_focus_credits_nothing(aggregator):
    assert aggregator.flush() is None
    assert aggregator.snapshot() == {Bucket.WORK: {}, Bucket.OUTSIDE: {}}


def test_clock_moving_backwards_credits_nothing(aggregator, clock):
    aggregator.observe(0, key("Editor"))
    opened = aggregator.since
    clock.advance(-30)
    credit = aggregator.observe(0, key("Browser"))

    assert credit.duration == timedelta(0)
    assert aggregator.since == opened


def test_credited_time_covers_the_whole_run(clock):
    aggregator = FocusAggregator(
        WorkWindowClassifier(WorkWindowConfig()), THRESHOLD, clock=clock
    )
    clock.now = datetime(2024, 1, 2, 16, 58)
    first = clock.now
    observations = [
        (0, key("Editor", "a.py"), 37.4),
        (0, key("Editor", "b.py"), 61.2),
        (0, None, 12.0),
        (300, None, 900.0),
        (400, key("Editor", "b.py"), 5.0),
        (0, key("Browser", ""), 14.9),
        (0, key("Browser", "news"), 120.0),
    ]
    for idle, candidate, seconds in observations:
        aggregator.observe(idle, candidate)
        clock.advance(seconds)
    aggregator.flush()

    credited = table_total(aggregator.work) + table_total(aggregator.outside)
    elapsed = clock.now - first
    assert abs((credited - elapsed).total_seconds()) <= 1
    assert aggregator.outside
