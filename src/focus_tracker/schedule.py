"""Work-hours classification for instants in local time."""

from __future__ import annotations

from datetime import datetime, timedelta

from .config import TimeOfDay, WorkWindowConfig
from .models import Bucket


class WorkWindowClassifier:
    """Decide whether an instant falls inside the configured work window.

    A window whose start is later than its end (``22:00-06:00``) crosses
    midnight. Its late and early segments form one window, which applies on
    workdays and on the day after a workday, so with Mon-Fri workdays
    Saturday still counts while Sunday does not.
    """

    def __init__(self, window: WorkWindowConfig) -> None:
        self.window = window

    def is_work_hour(self, instant: datetime) -> bool:
        window = self.window
        time_of_day = TimeOfDay(instant.hour, instant.minute)
        is_workday = instant.weekday() in window.workdays

        if not window.crosses_midnight:
            return is_workday and window.start <= time_of_day < window.end

        yesterday = (instant - timedelta(days=1)).weekday()
        in_late_segment = time_of_day >= window.start
        in_early_segment = time_of_day < window.end
        if not (is_workday or yesterday in window.workdays):
            return False
        return in_late_segment or in_early_segment

    def bucket_for(self, instant: datetime) -> Bucket:
        return Bucket.WORK if self.is_work_hour(instant) else Bucket.OUTSIDE
