from __future__ import annotations
from typing import Iterable, List, Tuple
from .models import RawPosting, MergedPosting, dedupe_key
from .date_parse import parse_deadline

def deduplicate_postings(postings: Iterable[RawPosting]) -> list[RawPosting]:
    # First occurrence wins; key is the lowercased (title, company) pair
    seen: set[Tuple[str, str]] = set()
    unique: List[RawPosting] = []
    for p in postings:
        key = dedupe_key(p)
        if key in seen:
            continue
        seen.add(key)
        unique.append(p)
    return unique

def _rank_key(p: MergedPosting) -> tuple[int, int, str]:
    if p.deadline_date is not None:
        return (0, p.deadline_date.toordinal(), p.title.casefold())
    return (1, 0, p.title.casefold())

def rank_postings(postings: Iterable[MergedPosting]) -> list[MergedPosting]:
    """Soonest deadline first, undated last, then by title (case-insensitive)."""
    return sorted(postings, key=_rank_key)

def merge_postings(postings: Iterable[RawPosting]) -> list[MergedPosting]:
    merged = [
        MergedPosting.from_raw(p, parse_deadline(p.deadline))
        for p in deduplicate_postings(postings)
    ]
    return rank_postings(merged)
