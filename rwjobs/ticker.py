"""Timers the scheduler can own.

``CronTicker`` fires on the hour every N hours in a given timezone (so with
the defaults: 00:00, 06:00, 12:00 and 18:00 Kigali time). ``ManualTicker``
fires only when told to, which makes scheduler tests deterministic.

Only 1, 2, 3, 4, 6, 8 and 12 hours map to a cron step; any other interval
(5h, 24h, ...) uses a plain interval trigger counted from when it was armed.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from rwjobs import config

LOGGER = logging.getLogger(__name__)

Callback = Callable[[], None]


class TickerHandle(Protocol):
    def cancel(self) -> None: ...

    def next_run(self) -> Optional[datetime]: ...


class Ticker(Protocol):
    def schedule(self, callback: Callback) -> TickerHandle: ...


class _CronHandle:
    def __init__(self, scheduler: BackgroundScheduler, job_id: str):
        self._scheduler = scheduler
        self._job_id = job_id

    def cancel(self) -> None:
        self._scheduler.shutdown(wait=False)

    def next_run(self) -> Optional[datetime]:
        job = self._scheduler.get_job(self._job_id)
        return job.next_run_time if job is not None else None


class CronTicker:
    def __init__(self, interval_hours: int | None = None, timezone: str | None = None):
        self.interval_hours = interval_hours or config.interval_hours()
        self.timezone = timezone or config.timezone_name()

    def trigger(self) -> CronTrigger | IntervalTrigger:
        # A cron step only keeps the gap constant when it divides the day
        if self.interval_hours < 24 and 24 % self.interval_hours == 0:
            return CronTrigger(hour=f"*/{self.interval_hours}", minute=0, timezone=self.timezone)
        return IntervalTrigger(hours=self.interval_hours, timezone=self.timezone)

    def schedule(self, callback: Callback) -> TickerHandle:
        scheduler = BackgroundScheduler(timezone=self.timezone)
        scheduler.add_job(
            callback,
            self.trigger(),
            id="rwjobs-ingest",
            max_instances=1,
            coalesce=True,
            misfire_grace_time=600,
        )
        scheduler.start()
        LOGGER.info("ticker armed every=%sh tz=%s", self.interval_hours, self.timezone)
        return _CronHandle(scheduler, "rwjobs-ingest")


class _ManualHandle:
    def __init__(self, ticker: "ManualTicker"):
        self._ticker = ticker
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def next_run(self) -> Optional[datetime]:
        return None if self.cancelled else self._ticker.next_at


class ManualTicker:
    """Ticker for tests and one-off tooling; ``fire()`` runs the callback inline."""

    def __init__(self, next_at: Optional[datetime] = None):
        self.next_at = next_at
        self._callback: Optional[Callback] = None
        self._handle: Optional[_ManualHandle] = None

    def schedule(self, callback: Callback) -> TickerHandle:
        self._callback = callback
        self._handle = _ManualHandle(self)
        return self._handle

    @property
    def armed(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    def fire(self) -> bool:
        """Invoke the callback if armed. Returns whether it ran."""
        if not self.armed or self._callback is None:
            return False
        self._callback()
        return True


__all__ = ["Ticker", "TickerHandle", "CronTicker", "ManualTicker"]
