from __future__ import annotations


class IngestError(Exception):
    """Base class for errors raised by the ingestion pipeline."""


class ExtractionFailure(IngestError):
    """A single source could not be fetched or parsed.

    Raised inside an extractor and caught at its boundary; never escapes
    ``extract()``.
    """

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class RecordFailure(IngestError):
    """One posting could not be written to storage."""

    def __init__(self, title: str, cause: BaseException):
        super().__init__(f"failed to store {title!r}: {cause}")
        self.title = title
        self.cause = cause


class PipelineFailure(IngestError):
    """A whole source failed (orchestrator or storage level)."""

    def __init__(self, source: str, cause: BaseException):
        super().__init__(str(cause) or type(cause).__name__)
        self.source = source
        self.cause = cause


class ScrapeInProgressError(IngestError):
    """A run was requested while another one holds the run-lock.

    Callers should not retry; the active run will finish on its own.
    """

    def __init__(self, message: str = "Scraping is already in progress"):
        super().__init__(message)


__all__ = [
    "IngestError",
    "ExtractionFailure",
    "RecordFailure",
    "PipelineFailure",
    "ScrapeInProgressError",
]
