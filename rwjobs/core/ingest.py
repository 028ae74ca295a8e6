from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.exc import DataError, IntegrityError

from rwjobs import config
from rwjobs.core.classify import classify_category, classify_type
from rwjobs.core.models import MergedPosting
from rwjobs.db.store import JobStore
from rwjobs.errors import RecordFailure

LOGGER = logging.getLogger(__name__)

# Problems with one row. Anything else (lost connection, missing table) is a
# pipeline failure and propagates to the scheduler.
RECORD_ERRORS = (IntegrityError, DataError, ValueError, LookupError)


@dataclass
class ProcessResult:
    created: bool
    error: Optional[RecordFailure] = None


@dataclass
class IngestCounts:
    found: int = 0
    added: int = 0
    updated: int = 0
    failed: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class Ingestor:
    """Create-or-update postings keyed by their source URL."""

    def __init__(self, store: JobStore, *, default_location: str | None = None):
        self.store = store
        self.default_location = default_location if default_location is not None else config.default_location()

    def job_fields(self, posting: MergedPosting) -> Dict[str, Any]:
        snippet = posting.snippet or ""
        return {
            "title": posting.title,
            "company": posting.company,
            "location": posting.location or self.default_location,
            "description": snippet,
            "requirements": snippet,
            "job_type": classify_type(posting.title, posting.snippet),
            "category": classify_category(posting.title),
            "posted_date": posting.deadline_date,
            "source_name": posting.source,
        }

    def process(self, posting: MergedPosting) -> ProcessResult:
        """Upsert one posting. Record-level failures are returned, not raised."""
        try:
            existing = self.store.find_job_by_url(posting.url)
            fields = self.job_fields(posting)
            if existing is None:
                self.store.insert_job({"source_url": posting.url, **fields})
                return ProcessResult(created=True)
            self.store.update_job(existing.id, fields)
            return ProcessResult(created=False)
        except RECORD_ERRORS as exc:
            failure = RecordFailure(posting.title, exc)
            LOGGER.warning("ingest record-failed title=%s url=%s error=%s", posting.title, posting.url, exc)
            return ProcessResult(created=False, error=failure)

    def process_all(self, postings: Iterable[MergedPosting]) -> IngestCounts:
        counts = IngestCounts()
        for posting in postings:
            counts.found += 1
            result = self.process(posting)
            if result.error is not None:
                counts.failed += 1
            elif result.created:
                counts.added += 1
            else:
                counts.updated += 1
        return counts


__all__ = ["Ingestor", "IngestCounts", "ProcessResult", "RECORD_ERRORS"]
