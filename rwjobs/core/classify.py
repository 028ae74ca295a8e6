"""Keyword classifiers for job category and employment type.

Both functions are total: any string (including "") maps to a label. Rules
are checked in order and the first hit wins, so "Finance Manager" is Finance,
not Management.
"""
from __future__ import annotations

from typing import Sequence, Tuple

DEFAULT_CATEGORY = "Other"
DEFAULT_JOB_TYPE = "Full-time"

JOB_TYPES = ("Full-time", "Part-time", "Contract", "Internship")

Rule = Tuple[str, Sequence[str]]

CATEGORY_RULES: tuple[Rule, ...] = (
    ("Technology", ("software", "developer", "programmer", "it ", "tech")),
    ("Marketing", ("marketing", "sales", "communication")),
    ("Finance", ("finance", "accounting", "audit")),
    ("Human Resources", ("hr", "human resource", "recruitment")),
    ("Healthcare", ("health", "medical", "doctor", "nurse")),
    ("Engineering", ("engineer", "construction", "civil")),
    ("Education", ("teacher", "education", "academic")),
    ("Management", ("manager", "director", "admin")),
)

JOB_TYPE_RULES: tuple[Rule, ...] = (
    ("Internship", ("intern",)),
    ("Part-time", ("part-time", "part time")),
    ("Contract", ("contract", "temporary", "freelance")),
)


def _first_match(text: str, rules: Sequence[Rule], default: str) -> str:
    for label, needles in rules:
        if any(n in text for n in needles):
            return label
    return default


def classify_category(title: str | None) -> str:
    return _first_match((title or "").lower(), CATEGORY_RULES, DEFAULT_CATEGORY)


def classify_type(title: str | None, snippet: str | None = None) -> str:
    text = f"{title or ''} {snippet or ''}".lower()
    return _first_match(text, JOB_TYPE_RULES, DEFAULT_JOB_TYPE)
