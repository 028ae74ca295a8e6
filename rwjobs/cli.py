# rwjobs/cli.py
"""Command line entry point: ``rwjobs <command>``.

  init-db            create tables
  sources            list registered extractors
  scrape [-s NAME]   one-shot ingest (all configured sources by default)
  schedule           run the recurring scheduler in the foreground
  serve              run the trigger API with uvicorn
"""
from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
import threading
from datetime import datetime

from rwjobs import config


# --- JSON helpers ---
def _json_default(o):
    if isinstance(o, datetime):
        return o.isoformat()
    return str(o)


def _cmd_init_db(args: argparse.Namespace) -> int:
    from rwjobs.db.models import Base
    from rwjobs.db.session import ENGINE, current_engine_url

    logging.getLogger(__name__).info("Initializing database schema at %s", current_engine_url())
    Base.metadata.create_all(bind=ENGINE)
    return 0


def _cmd_sources(args: argparse.Namespace) -> int:
    from rwjobs.extractors import available

    configured = set(config.configured_sources())
    for name in available():
        print(f"{'*' if name in configured else ' '} {name}")
    return 0


def _cmd_scrape(args: argparse.Namespace) -> int:
    from rwjobs.scheduler import IngestScheduler

    scheduler = IngestScheduler()
    summary = scheduler.run_sources(args.source or scheduler.sources)
    if args.json:
        print(json.dumps(summary.to_dict(), default=_json_default, indent=2))
    else:
        for r in summary.reports:
            if r.error:
                print(f"✗ {r.source}: ERROR - {r.error}")
            else:
                print(f"✓ {r.source}: {r.found} found, {r.added} added, {r.updated} updated")
        print(f"Total: {summary.found} found, {summary.added} added, {summary.updated} updated")
    return 1 if any(r.error for r in summary.reports) else 0


def _cmd_schedule(args: argparse.Namespace) -> int:
    from rwjobs.scheduler import IngestScheduler

    scheduler = IngestScheduler()
    scheduler.start()
    if args.run_now:
        scheduler.trigger()

    stop = threading.Event()

    def _handle(signum, frame):
        stop.set()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)
    status = scheduler.status()
    logging.getLogger(__name__).info("next run at %s", status.next_run)
    stop.wait()
    scheduler.stop()
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("rwjobs.api.main:app", host=args.host, port=args.port, log_level=config.log_level().lower())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rwjobs", description="Rwanda job board ingestion")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-db", help="Create database tables")
    p.set_defaults(func=_cmd_init_db)

    p = sub.add_parser("sources", help="List available sources (* = configured)")
    p.set_defaults(func=_cmd_sources)

    p = sub.add_parser("scrape", help="Run a one-shot ingest")
    p.add_argument("-s", "--source", action="append", default=None,
                   help="Source name; repeat for several (default: RWJOBS_SOURCES)")
    p.add_argument("--json", action="store_true", help="Print the run summary as JSON")
    p.set_defaults(func=_cmd_scrape)

    p = sub.add_parser("schedule", help="Run the scheduler until interrupted")
    p.add_argument("--run-now", action="store_true", help="Also start a run immediately")
    p.set_defaults(func=_cmd_schedule)

    p = sub.add_parser("serve", help="Serve the trigger API")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    # When executed as `python -m rwjobs.cli ...`
    sys.exit(main())
