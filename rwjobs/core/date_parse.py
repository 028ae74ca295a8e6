from __future__ import annotations

from datetime import date, datetime
import re

MONTHS = {
    'jan': 1,
    'feb': 2,
    'mar': 3,
    'apr': 4,
    'may': 5,
    'jun': 6,
    'jul': 7,
    'aug': 8,
    'sep': 9,
    'sept': 9,
    'oct': 10,
    'nov': 11,
    'dec': 12,
}

_MONTH_NAMES = (
    r"(January|February|March|April|May|June|July|August|September|October|November|December"
    r"|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)\.?"
)

LABEL = re.compile(
    r"^\s*(application\s+)?(deadline|closing\s+date|closes|expires?|apply\s+by)\s*(on)?\s*[:\-–]?\s*",
    re.I,
)
DMY = re.compile(r"(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})")
YMD = re.compile(r"(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})")
MONTH_D_Y = re.compile(_MONTH_NAMES + r"\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})", re.I)
D_MONTH_Y = re.compile(r"(\d{1,2})(?:st|nd|rd|th)?\s+" + _MONTH_NAMES + r",?\s+(\d{4})", re.I)

# Tried before the regexes; these cover what a plain "parse it" would accept.
DIRECT_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%A, %B %d, %Y",
    "%a, %d %b %Y",
)


def _month(name: str) -> int | None:
    key = name.lower().rstrip('.')
    return MONTHS.get(key) or MONTHS.get(key[:3])


def _safe_date(year: int, month: int | None, day: int) -> date | None:
    if month is None:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def strip_label(text: str) -> str:
    return LABEL.sub("", text or "", count=1).strip()


def _direct(text: str) -> date | None:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in DIRECT_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_deadline(text: str | None) -> date | None:
    """Best-effort parse of a free-text deadline.

    Returns None when nothing matches; callers treat that as "no deadline".
    """
    if not text:
        return None
    cleaned = strip_label(text)
    if not cleaned:
        return None

    found = _direct(cleaned)
    if found:
        return found

    m = DMY.search(cleaned)
    if m:
        day, month, year = map(int, m.groups())
        found = _safe_date(year, month, day)
        if found:
            return found

    m = YMD.search(cleaned)
    if m:
        year, month, day = map(int, m.groups())
        found = _safe_date(year, month, day)
        if found:
            return found

    m = MONTH_D_Y.search(cleaned)
    if m:
        found = _safe_date(int(m.group(3)), _month(m.group(1)), int(m.group(2)))
        if found:
            return found

    m = D_MONTH_Y.search(cleaned)
    if m:
        found = _safe_date(int(m.group(3)), _month(m.group(2)), int(m.group(1)))
        if found:
            return found

    return None


def find_date_text(text: str | None) -> str | None:
    """Return the first date-looking substring of ``text`` (unparsed)."""
    if not text:
        return None
    for pattern in (DMY, YMD, MONTH_D_Y, D_MONTH_Y):
        m = pattern.search(text)
        if m:
            return m.group(0)
    return None
