"""Polling driver that feeds OS observations into the focus aggregator."""

from __future__ import annotations

import logging
import signal
import threading
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from .aggregator import FocusAggregator
from .config import TrackerSettings
from .merge import merge_summary
from .models import Bucket
from .probes import FocusProbe
from .schedule import WorkWindowClassifier
from .storage import SummaryStore
from .summary import render_summary

logger = logging.getLogger(__name__)


class FocusTracker:
    """Samples the focused window at a fixed interval and persists daily totals."""

    def __init__(
        self,
        settings: TrackerSettings,
        probe: FocusProbe,
        store: SummaryStore,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings
        self.probe = probe
        self.store = store
        self._clock = clock
        self.aggregator = FocusAggregator(
            WorkWindowClassifier(settings.work_window),
            settings.idle_threshold,
            clock=clock,
        )
        self._started = False
        self._stopped = False
        self._last_save = clock()
        self._save_lock = threading.Lock()

    def start(self, day: Optional[date] = None) -> int:
        """Merge the logs already written today; only the first call merges."""
        if self._started:
            return 0
        self._started = True
        day = day or self._clock().date()
        merged = 0
        for bucket in Bucket:
            text = self.store.read_summary(day, bucket)
            if text is None:
                continue
            merged += merge_summary(text, self.aggregator.table(bucket))
            logger.info("Loaded previous totals from %s", self.store.path_for(day, bucket))
        return merged

    def sample_once(self, now: Optional[datetime] = None) -> timedelta:
        """Take one observation and return how long to wait before the next."""
        idle = self.probe.idle_seconds()
        now = now or self._clock()
        if idle > self.settings.idle_threshold.total_seconds():
            self.aggregator.observe(idle, None, now)
            return self.settings.locked_interval

        focus = self.probe.current_focus()
        if focus is None:
            logger.debug("No foreground window this tick.")
        self.aggregator.observe(idle, focus, now)
        return self.settings.sample_interval

    def save(self, day: Optional[date] = None) -> None:
        """Write both tables; prints a summary to stdout if it cannot be written."""
        day = day or self._clock().date()
        with self._save_lock:
            tables = self.aggregator.snapshot()
            for bucket in Bucket:
                table = tables[bucket]
                if not table:
                    continue
                text = render_summary(table, day, bucket)
                if self.store.write_summary(day, bucket, text):
                    logger.info("Summary written to %s", self.store.path_for(day, bucket))
                else:
                    print("---- Printing summary to stdout instead ----")
                    print(text, end="")
            self._last_save = self._clock()

    def autosave_if_due(self, now: Optional[datetime] = None) -> bool:
        now = now or self._clock()
        if now - self._last_save < self.settings.autosave_interval:
            return False
        self.save(now.date())
        return True

    def run_forever(self) -> None:
        stop_event = threading.Event()
        install_signal_handlers(stop_event)
        try:
            self.run_until_stopped(stop_event)
        except KeyboardInterrupt:
            logger.info("Tracker interrupted.")

    def run_until_stopped(self, stop_event: threading.Event) -> None:
        """Run the tracker until the provided event is set."""
        try:
            self._run_loop(stop_event)
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        """Credit the open session and write the final summaries once."""
        if self._stopped:
            return
        self._stopped = True
        now = self._clock()
        self.aggregator.flush(now)
        self.save(now.date())
        logger.info("Tracker stopped.")

    def _run_loop(self, stop_event: threading.Event) -> None:
        self.start()
        logger.info("Tracking focus; writing summaries to %s", self.store.log_dir)
        while not stop_event.is_set():
            try:
                wait = self.sample_once()
                self.autosave_if_due()
            except Exception:
                logger.exception("Sampling failed; retrying on the next tick.")
                wait = self.settings.sample_interval
            # Sleep in an interruptible manner.
            stop_event.wait(wait.total_seconds())


def install_signal_handlers(stop_event: threading.Event) -> None:
    """Turn SIGINT/SIGTERM into a cooperative stop request."""

    def _request_stop(signum: int, _frame: object) -> None:
        logger.info("Received %s; stopping.", signal.Signals(signum).name)
        stop_event.set()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)
