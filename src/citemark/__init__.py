"""Citemark - citation annotation engine for generated text."""

from .errors import (
    CitationValidationError,
    CitemarkError,
    IncompleteResponseError,
    ResponseFormatError,
)
from .formatting import (
    deduplicate_citations,
    extract_source_info,
    filter_citations,
    filter_citations_by_file,
    format_citation,
    group_citations_by_source,
    sort_citations,
)
from .models import Citation, FormattedCitation, ParsedResponse
from .parser import parse_citations, parse_response

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Pipeline
    "parse_citations",
    "parse_response",
    # Rendering
    "extract_source_info",
    "format_citation",
    "group_citations_by_source",
    "filter_citations",
    "filter_citations_by_file",
    "deduplicate_citations",
    "sort_citations",
    # Models
    "Citation",
    "FormattedCitation",
    "ParsedResponse",
    # Errors
    "CitemarkError",
    "CitationValidationError",
    "ResponseFormatError",
    "IncompleteResponseError",
]
