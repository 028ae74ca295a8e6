from .models import RawPosting, MergedPosting, collapse_ws, dedupe_key
from .dedupe import deduplicate_postings, rank_postings, merge_postings
from .date_parse import parse_deadline
from .classify import classify_category, classify_type

__all__ = [
    "RawPosting",
    "MergedPosting",
    "collapse_ws",
    "dedupe_key",
    "deduplicate_postings",
    "rank_postings",
    "merge_postings",
    "parse_deadline",
    "classify_category",
    "classify_type",
]
