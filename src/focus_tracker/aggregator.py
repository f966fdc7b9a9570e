"""Focus state machine that credits elapsed time to work or outside totals."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from .durations import render_duration
from .models import (
    AggregationTable,
    Bucket,
    Credit,
    FocusKey,
    FocusSession,
    FocusState,
    LockedFocus,
    NoFocus,
    NormalFocus,
    add_duration,
)
from .schedule import WorkWindowClassifier

logger = logging.getLogger(__name__)


class FocusAggregator:
    """Tracks the focused window and accumulates time per application/title.

    Every credited interval is bucketed by the instant its session started,
    so a session that runs past the end of the work window is counted
    entirely as work.
    """

    def __init__(
        self,
        classifier: WorkWindowClassifier,
        idle_threshold: timedelta,
        *,
        work: Optional[AggregationTable] = None,
        outside: Optional[AggregationTable] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.classifier = classifier
        self.idle_threshold = idle_threshold
        self._clock = clock
        self._tables: dict[Bucket, AggregationTable] = {
            Bucket.WORK: work if work is not None else {},
            Bucket.OUTSIDE: outside if outside is not None else {},
        }
        self._session = FocusSession(state=NoFocus(), since=clock())
        self._last_titles: dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def state(self) -> FocusState:
        return self._session.state

    @property
    def since(self) -> datetime:
        return self._session.since

    def table(self, bucket: Bucket) -> AggregationTable:
        return self._tables[bucket]

    @property
    def work(self) -> AggregationTable:
        return self._tables[Bucket.WORK]

    @property
    def outside(self) -> AggregationTable:
        return self._tables[Bucket.OUTSIDE]

    def observe(
        self,
        idle_seconds: float,
        candidate: Optional[FocusKey],
        now: Optional[datetime] = None,
    ) -> Optional[Credit]:
        """Feed one sample; returns the credit recorded if focus changed.

        ``candidate`` is ``None`` when the foreground window could not be
        determined, in which case only the idle check applies.
        """
        now = now or self._clock()
        with self._lock:
            current = self._session.state
            if idle_seconds > self.idle_threshold.total_seconds():
                if isinstance(current, LockedFocus):
                    return None
                return self._transition_locked(LockedFocus(now), now)

            if candidate is None:
                return None

            candidate = self._with_cached_title(candidate)
            if isinstance(current, NormalFocus) and current.key == candidate:
                return None
            return self._transition_locked(NormalFocus(candidate), now)

    def flush(self, now: Optional[datetime] = None) -> Optional[Credit]:
        """Credit the open session up to ``now`` and keep it open from there."""
        now = now or self._clock()
        with self._lock:
            credit = self._credit_locked(now)
            self._advance_locked(now)
            return credit

    def snapshot(self) -> dict[Bucket, AggregationTable]:
        """Return a copy of both tables that is safe to render elsewhere."""
        with self._lock:
            return {
                bucket: {app: dict(titles) for app, titles in table.items()}
                for bucket, table in self._tables.items()
            }

    def _with_cached_title(self, candidate: FocusKey) -> FocusKey:
        if candidate.title:
            self._last_titles[candidate.application] = candidate.title
            return candidate
        cached = self._last_titles.get(candidate.application)
        if cached:
            return FocusKey(candidate.application, cached)
        return candidate

    def _transition_locked(self, state: FocusState, now: datetime) -> Optional[Credit]:
        credit = self._credit_locked(now)
        self._advance_locked(now)
        self._session.state = state
        return credit

    def _advance_locked(self, now: datetime) -> None:
        # since never moves backwards once a session is open
        if isinstance(self._session.state, NoFocus) or now > self._session.since:
            self._session.since = now

    def _credit_locked(self, now: datetime) -> Optional[Credit]:
        state = self._session.state
        if isinstance(state, NoFocus):
            return None

        start = self._session.since
        if now < start:
            logger.debug("Clock moved backwards (%s < %s); crediting nothing.", now, start)
            duration = timedelta(0)
        else:
            duration = now - start
        bucket = self.classifier.bucket_for(start)
        add_duration(self._tables[bucket], state.key, duration)
        logger.info(
            "%s [%s]: active for %s",
            state.key.application,
            state.key.title,
            render_duration(duration),
        )
        return Credit(key=state.key, bucket=bucket, start=start, duration=duration)
