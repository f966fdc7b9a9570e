from datetime import datetime

import pytest

from focus_tracker.config import TimeOfDay, WorkWindowConfig
from focus_tracker.models import Bucket
from focus_tracker.schedule import WorkWindowClassifier

# 2024-01-01 is a Monday; 2024-01-06 a Saturday.
DAY_WINDOW = WorkWindowClassifier(WorkWindowConfig())
NIGHT_WINDOW = WorkWindowClassifier(
    WorkWindowConfig(start=TimeOfDay(22, 0), end=TimeOfDay(6, 0))
)


@pytest.mark.parametrize(
    "instant, expected",
    [
        (datetime(2024, 1, 2, 8, 0), True),
        (datetime(2024, 1, 2, 7, 59, 59), False),
        (datetime(2024, 1, 2, 16, 59, 59), True),
        (datetime(2024, 1, 2, 17, 0), False),
        (datetime(2024, 1, 6, 10, 0), False),
        (datetime(2024, 1, 7, 10, 0), False),
    ],
)
def test_day_window_boundaries(instant, expected):
    assert DAY_WINDOW.is_work_hour(instant) is expected


@pytest.mark.parametrize(
    "instant, expected",
    [
        (datetime(2024, 1, 2, 23, 59), True),
        (datetime(2024, 1, 2, 22, 0), True),
        (datetime(2024, 1, 2, 5, 59), True),
        (datetime(2024, 1, 2, 6, 0), False),
        (datetime(2024, 1, 2, 12, 0), False),
        (datetime(2024, 1, 2, 21, 59), False),
    ],
)
def test_night_window_on_a_workday(instant, expected):
    assert NIGHT_WINDOW.is_work_hour(instant) is expected


def test_night_window_continues_into_saturday_morning():
    assert NIGHT_WINDOW.is_work_hour(datetime(2024, 1, 6, 0, 10))
    assert NIGHT_WINDOW.is_work_hour(datetime(2024, 1, 6, 5, 59))


def test_night_window_applies_on_the_day_after_a_workday():
    assert NIGHT_WINDOW.is_work_hour(datetime(2024, 1, 6, 23, 0))
    assert not NIGHT_WINDOW.is_work_hour(datetime(2024, 1, 6, 12, 0))


def test_night_window_skips_the_day_after_a_non_workday():
    assert not NIGHT_WINDOW.is_work_hour(datetime(2024, 1, 7, 3, 0))
    assert not NIGHT_WINDOW.is_work_hour(datetime(2024, 1, 7, 23, 0))


def test_crossing_midnight_detection():
    assert NIGHT_WINDOW.window.crosses_midnight
    assert not DAY_WINDOW.window.crosses_midnight


def test_custom_workdays():
    weekend = WorkWindowClassifier(WorkWindowConfig(workdays=frozenset({5, 6})))
    assert weekend.is_work_hour(datetime(2024, 1, 6, 9, 0))
    assert not weekend.is_work_hour(datetime(2024, 1, 2, 9, 0))


def test_bucket_for():
    assert DAY_WINDOW.bucket_for(datetime(2024, 1, 2, 9, 0)) is Bucket.WORK
    assert DAY_WINDOW.bucket_for(datetime(2024, 1, 2, 19, 0)) is Bucket.OUTSIDE
