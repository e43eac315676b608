"""Exceptions raised by the citation engine."""


class CitemarkError(Exception):
    """Base class for citemark errors."""


class CitationValidationError(CitemarkError, ValueError):
    """A built citation record violates its invariants.

    Signals a defect in the engine, not noisy upstream data, so callers
    should let it propagate.
    """

    def __init__(self, message: str, citation_id: int | None = None):
        super().__init__(message)
        self.citation_id = citation_id


class ResponseFormatError(CitemarkError, ValueError):
    """Generation response envelope has no readable output text."""


class IncompleteResponseError(CitemarkError):
    """Response is still being generated and cannot be parsed yet."""
