"""Build and validate citation records from numbered spans."""

import logging
from collections.abc import Iterable

from .errors import CitationValidationError
from .formatting import extract_source_info
from .models import Citation, NumberedSpan

logger = logging.getLogger(__name__)


def validate_citation(citation: Citation) -> None:
    """Check citation invariants.

    Raises:
        CitationValidationError: If id < 1 or file_id is empty
    """
    if citation.id < 1:
        raise CitationValidationError(
            f"Citation id must be >= 1, got {citation.id}",
            citation_id=citation.id,
        )
    if not citation.file_id.strip():
        raise CitationValidationError(
            f"Citation {citation.id} has an empty file_id",
            citation_id=citation.id,
        )


def build_citation(numbered: NumberedSpan) -> Citation:
    """Build the validated citation record for one numbered span."""
    annotation = numbered.annotation
    payload = annotation.file_citation
    source = extract_source_info(payload.file_id)

    citation = Citation(
        id=numbered.id,
        file_id=payload.file_id,
        quote=payload.quote,
        original_text=annotation.text,
        filename=source.filename,
        page_number=source.page_number,
    )
    validate_citation(citation)
    return citation


def build_citations(numbered_spans: Iterable[NumberedSpan]) -> list[Citation]:
    citations = [build_citation(numbered) for numbered in numbered_spans]
    logger.debug(f"Built {len(citations)} citation record(s)")
    return citations
