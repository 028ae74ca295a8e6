# scripts/smoke_ingest.py
from __future__ import annotations

from datetime import date

from rwjobs.core.ingest import Ingestor
from rwjobs.core.models import MergedPosting
from rwjobs.db.models import Base, Job
from rwjobs.db.session import ENGINE, get_session
from rwjobs.db.store import SqlJobStore


def main() -> None:
    Base.metadata.create_all(bind=ENGINE)
    posting = MergedPosting(
        title="Junior Software Developer",
        company="DemoCo Ltd",
        location="Kigali",
        deadline="Deadline: 30/11/2026",
        deadline_date=date(2026, 11, 30),
        url="https://jobs.example.rw/demo-123",
        source="demo",
        snippet="Full-time role for a Python developer.",
    )

    ingestor = Ingestor(SqlJobStore())
    first = ingestor.process(posting)
    second = ingestor.process(posting)
    print(f"first created={first.created} second created={second.created}")

    with get_session() as session:
        for r in session.query(Job).order_by(Job.id.desc()).limit(5):
            print(r.id, r.company, r.title, r.category, r.job_type, r.source_url)


if __name__ == "__main__":
    main()
