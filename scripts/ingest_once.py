# scripts/ingest_once.py
from __future__ import annotations

import logging
import sys

from rwjobs.scheduler import IngestScheduler


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO)
    scheduler = IngestScheduler()
    summary = scheduler.run_sources(argv or scheduler.sources)
    print(f"Fetched {summary.found} postings: {summary.added} added, {summary.updated} updated")
    return 1 if any(r.error for r in summary.reports) else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
