from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, Depends, Query, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from rwjobs import __version__, config
from rwjobs.api.deps import get_scheduler
from rwjobs.errors import ScrapeInProgressError
from rwjobs.scheduler import IngestScheduler, SchedulerStatus

LOGGER = logging.getLogger(__name__)


# -------------------------
# Pydantic response models
# -------------------------
class StatusOut(BaseModel):
    isScheduled: bool
    isRunning: bool
    nextRun: Optional[datetime] = None

    @classmethod
    def from_status(cls, status: SchedulerStatus) -> "StatusOut":
        return cls(isScheduled=status.scheduled, isRunning=status.running, nextRun=status.next_run)


class ActionOut(BaseModel):
    message: str
    status: StatusOut


class ScrapingLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    source_name: str
    status: str
    jobs_found: int
    jobs_added: int
    jobs_updated: int
    error_message: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None


class ScrapeOut(BaseModel):
    message: str
    logs: List[ScrapingLogOut]


class ScrapersOut(BaseModel):
    scrapers: List[str]


def _status(scheduler: IngestScheduler) -> StatusOut:
    return StatusOut.from_status(scheduler.status())


def create_app(scheduler: IngestScheduler | None = None) -> FastAPI:
    """Build the trigger API around one scheduler instance.

    With no scheduler given, a default one is built when the app starts (and
    started immediately if ``RWJOBS_AUTOSTART`` is set).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = getattr(app.state, "scheduler", None) is None
        if owned:
            app.state.scheduler = IngestScheduler()
            if config.autostart_enabled():
                app.state.scheduler.start()
        try:
            yield
        finally:
            if owned:
                app.state.scheduler.stop()

    app = FastAPI(title="rwjobs ingest API", version=__version__, lifespan=lifespan)
    if scheduler is not None:
        app.state.scheduler = scheduler

    # CORS (open for now; tighten before public deploy)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------
    # Routes
    # -------------------------
    @app.get("/healthz", tags=["meta"])
    async def healthz():
        return {"status": "ok"}

    @app.get("/scrapers", response_model=ScrapersOut, tags=["scheduler"])
    def list_scrapers(scheduler: IngestScheduler = Depends(get_scheduler)):
        return ScrapersOut(scrapers=scheduler.orchestrator.available())

    @app.get("/jobs/scheduler/status", response_model=StatusOut, tags=["scheduler"])
    def scheduler_status(scheduler: IngestScheduler = Depends(get_scheduler)):
        return _status(scheduler)

    @app.post("/jobs/scheduler/start", response_model=ActionOut, tags=["scheduler"])
    def scheduler_start(scheduler: IngestScheduler = Depends(get_scheduler)):
        scheduler.start()
        return ActionOut(message="Job scheduler started successfully", status=_status(scheduler))

    @app.post("/jobs/scheduler/stop", response_model=ActionOut, tags=["scheduler"])
    def scheduler_stop(scheduler: IngestScheduler = Depends(get_scheduler)):
        scheduler.stop()
        return ActionOut(message="Job scheduler stopped successfully", status=_status(scheduler))

    @app.post("/jobs/scheduler/run", response_model=ActionOut, status_code=202, tags=["scheduler"])
    def scheduler_run(scheduler: IngestScheduler = Depends(get_scheduler)):
        """Kick off a full run in the background and return immediately."""
        try:
            scheduler.trigger()
        except ScrapeInProgressError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        return ActionOut(message="Manual scraping started successfully", status=_status(scheduler))

    @app.post("/jobs/scrape", response_model=ScrapeOut, tags=["scheduler"])
    def scrape(
        source: Optional[str] = Query(None, description="Single source name; all configured sources if omitted"),
        scheduler: IngestScheduler = Depends(get_scheduler),
    ):
        """Synchronous one-shot ingest. Returns the run logs it wrote."""
        sources = [source] if source else scheduler.sources
        try:
            summary = scheduler.run_sources(sources)
        except ScrapeInProgressError as exc:
            raise HTTPException(status_code=409, detail=str(exc))

        logs = []
        for report in summary.reports:
            if report.log_id is None:
                continue
            row = scheduler.store.get_run_log(report.log_id)
            if row is not None:
                logs.append(ScrapingLogOut.model_validate(row))
        return ScrapeOut(message=f"Scraping completed for {len(sources)} source(s)", logs=logs)

    return app


app = create_app()
