from __future__ import annotations

from datetime import date

from pydantic import BaseModel, field_validator

from rwjobs.config import NOT_SPECIFIED


def collapse_ws(text: str | None) -> str:
    return " ".join((text or "").split()).strip()


class RawPosting(BaseModel):
    """One listing as an extractor saw it. Deadline is left in source format."""

    title: str
    url: str
    source: str
    company: str = NOT_SPECIFIED
    location: str | None = None
    deadline: str | None = None
    snippet: str | None = None

    @field_validator("title", "url")
    @classmethod
    def _required(cls, value: str) -> str:
        value = collapse_ws(value)
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("company")
    @classmethod
    def _company(cls, value: str) -> str:
        return collapse_ws(value) or NOT_SPECIFIED

    @field_validator("location", "deadline", "snippet")
    @classmethod
    def _optional(cls, value: str | None) -> str | None:
        return collapse_ws(value) or None


class MergedPosting(RawPosting):
    deadline_date: date | None = None

    @classmethod
    def from_raw(cls, raw: RawPosting, deadline_date: date | None) -> "MergedPosting":
        return cls(**raw.model_dump(), deadline_date=deadline_date)


def dedupe_key(posting: RawPosting) -> tuple[str, str]:
    return (posting.title.strip().lower(), posting.company.strip().lower())
