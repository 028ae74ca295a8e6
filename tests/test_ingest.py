import unittest
from datetime import date

from sqlalchemy import create_engine, select, func
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rwjobs.core.ingest import Ingestor
from rwjobs.core.models import MergedPosting
from rwjobs.db.models import Base, Job
from rwjobs.db.store import SqlJobStore


def posting(title="Senior Software Developer", url="https://x/1", **kw):
    kw.setdefault("company", "Acme")
    kw.setdefault("source", "jobinrwanda.com")
    return MergedPosting(title=title, url=url, **kw)


class IngestTests(unittest.TestCase):
    def setUp(self):
        engine = create_engine(
            "sqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.Session = sessionmaker(bind=engine, expire_on_commit=False)
        self.store = SqlJobStore(self.Session)
        self.ingestor = Ingestor(self.store, default_location="Rwanda")

    def _jobs(self):
        with self.Session() as session:
            return session.execute(select(Job).order_by(Job.id)).scalars().all()

    def test_insert_fills_derived_fields(self):
        result = self.ingestor.process(posting(snippet="6-month internship", deadline_date=date(2026, 3, 1)))
        self.assertTrue(result.created)
        self.assertIsNone(result.error)

        (job,) = self._jobs()
        self.assertEqual(job.source_url, "https://x/1")
        self.assertEqual(job.category, "Technology")
        self.assertEqual(job.job_type, "Internship")
        self.assertEqual(job.location, "Rwanda")
        self.assertEqual(job.description, "6-month internship")
        self.assertEqual(job.requirements, "6-month internship")
        self.assertEqual(job.posted_date, date(2026, 3, 1))
        self.assertEqual(job.source_name, "jobinrwanda.com")

    def test_same_url_twice_is_one_row(self):
        first = self.ingestor.process(posting())
        second = self.ingestor.process(posting())
        self.assertTrue(first.created)
        self.assertFalse(second.created)
        self.assertIsNone(second.error)
        with self.Session() as session:
            self.assertEqual(session.scalar(select(func.count()).select_from(Job)), 1)

    def test_update_replaces_every_field(self):
        self.ingestor.process(posting(location="Kigali", snippet="Full description of the role", deadline_date=date(2026, 1, 5)))
        (before,) = self._jobs()

        self.ingestor.process(posting(title="Finance Officer", company="Bank", location=None, snippet=None))
        (after,) = self._jobs()

        self.assertEqual(after.id, before.id)
        self.assertEqual(after.title, "Finance Officer")
        self.assertEqual(after.company, "Bank")
        self.assertEqual(after.category, "Finance")
        self.assertEqual(after.location, "Rwanda")
        self.assertEqual(after.description, "")
        self.assertIsNone(after.posted_date)
        self.assertEqual(after.created_at, before.created_at)
        self.assertGreaterEqual(after.updated_at, before.updated_at)

    def test_record_failure_does_not_stop_batch(self):
        store = self.store

        class FlakyStore(SqlJobStore):
            def insert_job(self, fields):
                if fields["title"] == "Broken Row":
                    raise IntegrityError("INSERT INTO jobs", {}, Exception("constraint failed"))
                return store.insert_job(fields)

        ingestor = Ingestor(FlakyStore(self.Session), default_location="Rwanda")
        counts = ingestor.process_all([
            posting("Accountant", "https://x/a"),
            posting("Broken Row", "https://x/b"),
            posting("Cashier", "https://x/c"),
        ])
        self.assertEqual(counts.to_dict(), {"found": 3, "added": 2, "updated": 0, "failed": 1})
        self.assertEqual([j.title for j in self._jobs()], ["Accountant", "Cashier"])

    def test_record_failure_is_reported(self):
        class RejectingStore(SqlJobStore):
            def insert_job(self, fields):
                raise ValueError("title too long")

        result = Ingestor(RejectingStore(self.Session)).process(posting())
        self.assertFalse(result.created)
        self.assertIsNotNone(result.error)
        self.assertEqual(result.error.title, "Senior Software Developer")
        self.assertIn("title too long", str(result.error))

    def test_storage_outage_propagates(self):
        class DownStore(SqlJobStore):
            def find_job_by_url(self, url):
                raise OperationalError("SELECT", {}, Exception("connection refused"))

        with self.assertRaises(OperationalError):
            Ingestor(DownStore(self.Session)).process_all([posting()])

    def test_counts_mix_of_new_and_existing(self):
        self.ingestor.process(posting("Accountant", "https://x/a"))
        counts = self.ingestor.process_all([
            posting("Accountant", "https://x/a"),
            posting("Cashier", "https://x/c"),
        ])
        self.assertEqual((counts.found, counts.added, counts.updated, counts.failed), (2, 1, 1, 0))


class StoreTests(unittest.TestCase):
    def setUp(self):
        engine = create_engine(
            "sqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.store = SqlJobStore(sessionmaker(bind=engine, expire_on_commit=False))

    def test_run_log_lifecycle(self):
        log_id = self.store.insert_run_log("kora.rw")
        log = self.store.get_run_log(log_id)
        self.assertEqual(log.status, "started")
        self.assertEqual(log.jobs_found, 0)
        self.assertIsNotNone(log.started_at)
        self.assertIsNone(log.completed_at)

        self.store.update_run_log(log_id, {"status": "completed", "jobs_found": 4, "jobs_added": 3, "jobs_updated": 1})
        log = self.store.get_run_log(log_id)
        self.assertEqual((log.status, log.jobs_found, log.jobs_added, log.jobs_updated), ("completed", 4, 3, 1))

    def test_run_log_rejects_unknown_status(self):
        log_id = self.store.insert_run_log("kora.rw")
        with self.assertRaises(ValueError):
            self.store.update_run_log(log_id, {"status": "done"})

    def test_update_job_rejects_identity_change(self):
        job_id = self.store.insert_job({
            "source_url": "https://x/1", "source_name": "t", "title": "Driver", "company": "Acme",
        })
        with self.assertRaises(ValueError):
            self.store.update_job(job_id, {"source_url": "https://x/2"})

    def test_update_missing_job(self):
        with self.assertRaises(LookupError):
            self.store.update_job(999, {"title": "Driver"})

    def test_duplicate_url_violates_unique(self):
        fields = {"source_url": "https://x/1", "source_name": "t", "title": "Driver", "company": "Acme"}
        self.store.insert_job(fields)
        with self.assertRaises(IntegrityError):
            self.store.insert_job(fields)


if __name__ == "__main__":
    unittest.main()
