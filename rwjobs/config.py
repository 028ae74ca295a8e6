"""Runtime configuration for rwjobs.

Everything is read from environment variables. If a ``.env`` file exists
(path overridable via ``RWJOBS_DOTENV``) it is loaded on import so the CLI,
the scheduler and the API process all point at the same database.
"""
from __future__ import annotations

import os

from dotenv import load_dotenv

_ = load_dotenv(dotenv_path=os.getenv("RWJOBS_DOTENV", ".env"))

# Source name -> extractor binding lives in rwjobs.extractors; this is the
# order the scheduler walks them in.
DEFAULT_SOURCES: tuple[str, ...] = (
    "jobwebrwanda.com",
    "jobinrwanda.com",
    "kora.rw",
    "bag.work",
    "ndangira.net",
    "greatrwandajobs.com",
)

NOT_SPECIFIED = "Not specified"


def _parse_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _int_env(name: str, default: int) -> int:
    v = os.getenv(name)
    try:
        return int(v) if v is not None else default
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    v = os.getenv(name)
    try:
        return float(v) if v is not None else default
    except ValueError:
        return default


def configured_sources() -> list[str]:
    raw = os.getenv("RWJOBS_SOURCES", "")
    names = [s.strip() for s in raw.split(",") if s.strip()]
    return names or list(DEFAULT_SOURCES)


def interval_hours() -> int:
    hours = _int_env("RWJOBS_INTERVAL_HOURS", 6)
    return hours if hours > 0 else 6


def timezone_name() -> str:
    return os.getenv("RWJOBS_TIMEZONE", "Africa/Kigali")


def extract_timeout() -> float:
    return _float_env("RWJOBS_EXTRACT_TIMEOUT", 180.0)


def http_timeout() -> float:
    return _float_env("RWJOBS_HTTP_TIMEOUT", 30.0)


def default_location() -> str:
    return os.getenv("RWJOBS_DEFAULT_LOCATION", "Rwanda")


def log_level() -> str:
    return os.getenv("RWJOBS_LOG_LEVEL", "INFO").upper()


def autostart_enabled() -> bool:
    return _parse_bool(os.getenv("RWJOBS_AUTOSTART"))
