"""Recurring ingestion with a single run-lock.

One :class:`IngestScheduler` is built at process start and handed to whatever
exposes start/stop/status (the CLI or the API). At most one run executes at a
time: scheduled ticks that find the lock taken are skipped, manual requests
are rejected with :class:`ScrapeInProgressError`.

Sources are processed one after another. Each gets a ``scraping_logs`` row
that starts as ``started`` and ends as ``completed`` or ``failed``; a failed
source never stops the ones after it.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from rwjobs import config
from rwjobs.core.ingest import Ingestor
from rwjobs.core.orchestrator import Orchestrator
from rwjobs.db.store import JobStore, SqlJobStore
from rwjobs.errors import PipelineFailure, ScrapeInProgressError
from rwjobs.ticker import CronTicker, Ticker, TickerHandle

LOGGER = logging.getLogger(__name__)


@dataclass
class SourceReport:
    source: str
    log_id: Optional[int]
    found: int = 0
    added: int = 0
    updated: int = 0
    failed: int = 0
    error: Optional[str] = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunSummary:
    started_at: datetime
    finished_at: Optional[datetime] = None
    reports: List[SourceReport] = field(default_factory=list)

    @property
    def found(self) -> int:
        return sum(r.found for r in self.reports)

    @property
    def added(self) -> int:
        return sum(r.added for r in self.reports)

    @property
    def updated(self) -> int:
        return sum(r.updated for r in self.reports)

    def to_dict(self) -> dict:
        out = asdict(self)
        out.update(found=self.found, added=self.added, updated=self.updated)
        return out


@dataclass
class SchedulerStatus:
    scheduled: bool
    running: bool
    next_run: Optional[datetime] = None


class IngestScheduler:
    def __init__(
        self,
        orchestrator: Optional[Orchestrator] = None,
        ingestor: Optional[Ingestor] = None,
        store: Optional[JobStore] = None,
        sources: Optional[Sequence[str]] = None,
        ticker: Optional[Ticker] = None,
    ):
        self.store: JobStore = store if store is not None else SqlJobStore()
        self.orchestrator = orchestrator if orchestrator is not None else Orchestrator()
        self.ingestor = ingestor if ingestor is not None else Ingestor(self.store)
        self.sources: list[str] = list(sources) if sources is not None else config.configured_sources()
        self.ticker: Ticker = ticker if ticker is not None else CronTicker()

        self._lock = threading.Lock()
        self._handle: Optional[TickerHandle] = None
        self._handle_guard = threading.Lock()

    # --- trigger surface -----------------------------------------------------

    def start(self) -> None:
        with self._handle_guard:
            if self._handle is not None:
                LOGGER.info("scheduler already scheduled")
                return
            self._handle = self.ticker.schedule(self._on_tick)
        LOGGER.info("scheduler started sources=%s", ",".join(self.sources))

    def stop(self) -> None:
        """Cancel future ticks. A run already in progress finishes normally."""
        with self._handle_guard:
            handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()
            LOGGER.info("scheduler stopped")

    def is_running(self) -> bool:
        return self._lock.locked()

    def status(self) -> SchedulerStatus:
        handle = self._handle
        return SchedulerStatus(
            scheduled=handle is not None,
            running=self.is_running(),
            next_run=handle.next_run() if handle is not None else None,
        )

    def run_manual(self) -> RunSummary:
        """Run every configured source now, in the calling thread."""
        return self.run_sources(self.sources)

    def run_sources(self, sources: Iterable[str]) -> RunSummary:
        self._acquire()
        try:
            return self._run(list(sources))
        finally:
            self._lock.release()

    def trigger(self) -> None:
        """Start a full run on a background thread.

        The run-lock is taken before returning, so a second call made right
        after this one is rejected rather than racing it.
        """
        self._acquire()
        try:
            thread = threading.Thread(target=self._run_and_release, name="rwjobs-manual", daemon=True)
            thread.start()
        except BaseException:
            self._lock.release()
            raise

    # --- internals -----------------------------------------------------------

    def _acquire(self) -> None:
        if not self._lock.acquire(blocking=False):
            raise ScrapeInProgressError()

    def _run_and_release(self) -> None:
        try:
            self._run(self.sources)
        except Exception:
            LOGGER.exception("scheduler manual-run-error")
        finally:
            self._lock.release()

    def _on_tick(self) -> None:
        if not self._lock.acquire(blocking=False):
            LOGGER.info("scheduler tick-skipped reason=run-in-progress")
            return
        try:
            self._run(self.sources)
        except Exception:
            LOGGER.exception("scheduler tick-error")
        finally:
            self._lock.release()

    def _run(self, sources: List[str]) -> RunSummary:
        summary = RunSummary(started_at=datetime.now(timezone.utc))
        LOGGER.info("run start at=%s sources=%s", summary.started_at.isoformat(), len(sources))
        for source in sources:
            summary.reports.append(self._ingest_source(source))
        summary.finished_at = datetime.now(timezone.utc)
        self._log_summary(summary)
        return summary

    def _ingest_source(self, source: str) -> SourceReport:
        t0 = time.monotonic()
        try:
            log_id = self.store.insert_run_log(source)
        except Exception as exc:
            LOGGER.exception("run source=%s log-insert-failed", source)
            return SourceReport(source=source, log_id=None, error=str(PipelineFailure(source, exc)))

        report = SourceReport(source=source, log_id=log_id)
        try:
            postings = self.orchestrator.run({source})
            counts = self.ingestor.process_all(postings)
        except Exception as exc:
            failure = PipelineFailure(source, exc)
            report.error = str(failure)
            report.duration_ms = int((time.monotonic() - t0) * 1000)
            LOGGER.exception("run source=%s failed error=%s", source, failure)
            self._finish_log(log_id, {"status": "failed", "error_message": report.error})
            return report

        report.found, report.added = counts.found, counts.added
        report.updated, report.failed = counts.updated, counts.failed
        report.duration_ms = int((time.monotonic() - t0) * 1000)
        self._finish_log(
            log_id,
            {
                "status": "completed",
                "jobs_found": counts.found,
                "jobs_added": counts.added,
                "jobs_updated": counts.updated,
            },
        )
        LOGGER.info(
            "run source=%s found=%s added=%s updated=%s failed=%s duration_ms=%s",
            source, counts.found, counts.added, counts.updated, counts.failed, report.duration_ms,
        )
        return report

    def _finish_log(self, log_id: int, fields: dict) -> None:
        try:
            self.store.update_run_log(log_id, {**fields, "completed_at": datetime.now(timezone.utc)})
        except Exception:
            LOGGER.exception("run log-update-failed id=%s", log_id)

    @staticmethod
    def _log_summary(summary: RunSummary) -> None:
        duration = (summary.finished_at - summary.started_at).total_seconds() if summary.finished_at else 0
        LOGGER.info(
            "run done duration_s=%s found=%s added=%s updated=%s",
            round(duration), summary.found, summary.added, summary.updated,
        )
        for r in summary.reports:
            if r.error:
                LOGGER.info("run result source=%s error=%s", r.source, r.error)
            else:
                LOGGER.info("run result source=%s found=%s added=%s updated=%s", r.source, r.found, r.added, r.updated)


__all__ = ["IngestScheduler", "RunSummary", "SourceReport", "SchedulerStatus"]
