"""Persistence operations the ingestion pipeline needs, and nothing else.

The pipeline only talks to a :class:`JobStore`; :class:`SqlJobStore` is the
SQLAlchemy implementation. Every call opens its own short-lived session and
commits before returning, so a failed write never poisons the next one.
"""
from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, Mapping, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from rwjobs.db.models import Job, ScrapingLog, JOB_MUTABLE_FIELDS, RUN_STATUSES


class JobStore(Protocol):
    def find_job_by_url(self, url: str) -> Optional[Job]: ...

    def insert_job(self, fields: Mapping[str, Any]) -> int: ...

    def update_job(self, job_id: int, fields: Mapping[str, Any]) -> None: ...

    def insert_run_log(self, source: str) -> int: ...

    def update_run_log(self, log_id: int, fields: Mapping[str, Any]) -> None: ...

    def get_run_log(self, log_id: int) -> Optional[ScrapingLog]: ...


class SqlJobStore:
    def __init__(self, session_factory: sessionmaker | None = None):
        if session_factory is None:
            from rwjobs.db.session import SessionLocal
            session_factory = SessionLocal
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session: Session = self._session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # --- jobs ---------------------------------------------------------------

    def find_job_by_url(self, url: str) -> Optional[Job]:
        with self._session() as session:
            return session.execute(
                select(Job).where(Job.source_url == url)
            ).scalar_one_or_none()

    def insert_job(self, fields: Mapping[str, Any]) -> int:
        if not fields.get("source_url"):
            raise ValueError("insert_job requires 'source_url'")
        with self._session() as session:
            job = Job(**dict(fields))
            session.add(job)
            session.commit()
            return job.id

    def update_job(self, job_id: int, fields: Mapping[str, Any]) -> None:
        """Overwrite mutable fields on an existing row.

        Identity (``source_url``) and ``created_at`` are never touched, and
        ``None`` values overwrite just like anything else.
        """
        unknown = set(fields) - set(JOB_MUTABLE_FIELDS)
        if unknown:
            raise ValueError(f"update_job got non-mutable fields: {sorted(unknown)}")
        with self._session() as session:
            job = session.get(Job, job_id)
            if job is None:
                raise LookupError(f"job id={job_id} not found")
            for key, value in fields.items():
                setattr(job, key, value)
            # Bump even when no column changed
            job.updated_at = datetime.now(timezone.utc)
            session.commit()

    # --- run logs -----------------------------------------------------------

    def insert_run_log(self, source: str) -> int:
        with self._session() as session:
            log = ScrapingLog(source_name=source, status="started")
            session.add(log)
            session.commit()
            return log.id

    def update_run_log(self, log_id: int, fields: Mapping[str, Any]) -> None:
        status = fields.get("status")
        if status is not None and status not in RUN_STATUSES:
            raise ValueError(f"unknown run status {status!r}")
        with self._session() as session:
            log = session.get(ScrapingLog, log_id)
            if log is None:
                raise LookupError(f"scraping log id={log_id} not found")
            for key, value in fields.items():
                setattr(log, key, value)
            session.commit()

    def get_run_log(self, log_id: int) -> Optional[ScrapingLog]:
        with self._session() as session:
            return session.get(ScrapingLog, log_id)


__all__ = ["JobStore", "SqlJobStore"]
