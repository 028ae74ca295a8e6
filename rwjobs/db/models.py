from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    String,
    Date,
    DateTime,
    Boolean,
    Enum,
    Text,
    Index,
    Integer,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from rwjobs.core.classify import JOB_TYPES

# --- SQLAlchemy base ---------------------------------------------------------

class Base(DeclarativeBase):
    """Declarative base for all models."""
    pass


# --- Enums -------------------------------------------------------------------

RUN_STATUSES = ("started", "completed", "failed")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- Models ------------------------------------------------------------------

class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        Index("ix_jobs_posted_date", "posted_date"),
        Index("ix_jobs_category", "category"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    # Identity: the listing URL on the source site. Unique so concurrent
    # writers cannot create two rows for one posting.
    source_url: Mapped[str] = mapped_column(String(1000), nullable=False, unique=True, index=True)
    source_name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    company: Mapped[str] = mapped_column(String(300), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(300))
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    requirements: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # Classifier output
    job_type: Mapped[str] = mapped_column(
        Enum(*JOB_TYPES, name="job_type_enum", native_enum=False), default="Full-time", nullable=False
    )
    category: Mapped[str] = mapped_column(String(80), default="Other", nullable=False)

    # Parsed deadline, when the source gave one we could read
    posted_date: Mapped[Optional[date]] = mapped_column(Date)

    # Bookkeeping
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Job id={self.id} src={self.source_name} title={self.title!r}>"


class ScrapingLog(Base):
    """One row per (source, scheduler invocation)."""

    __tablename__ = "scraping_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    source_name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        Enum(*RUN_STATUSES, name="run_status_enum", native_enum=False), default="started", nullable=False
    )

    jobs_found: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    jobs_added: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    jobs_updated: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    error_message: Mapped[Optional[str]] = mapped_column(Text)

    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<ScrapingLog id={self.id} source={self.source_name} status={self.status}>"


# Fields the ingestor is allowed to overwrite on an existing row
JOB_MUTABLE_FIELDS = (
    "title",
    "company",
    "location",
    "description",
    "requirements",
    "job_type",
    "category",
    "posted_date",
    "source_name",
)


__all__ = [
    "Base",
    "Job",
    "ScrapingLog",
    "RUN_STATUSES",
    "JOB_MUTABLE_FIELDS",
]
