"""Tests for citation record building and validation."""

import pytest

from citemark.errors import CitationValidationError, CitemarkError
from citemark.models import (
    Citation,
    FileCitation,
    FileCitationAnnotation,
    NumberedSpan,
    ResolvedSpan,
)
from citemark.records import build_citation, build_citations, validate_citation


def _numbered(citation_id=1, file_id="file-abc", quote="quoted words", marker="【4:0†source】"):
    annotation = FileCitationAnnotation(
        text=marker,
        start_index=0,
        end_index=len(marker),
        file_citation=FileCitation(file_id=file_id, quote=quote),
    )
    span = ResolvedSpan(start=0, end=len(marker), order=0, annotation=annotation)
    return NumberedSpan(id=citation_id, span=span)


def test_build_citation_copies_fields():
    citation = build_citation(_numbered())

    assert citation == Citation(
        id=1,
        file_id="file-abc",
        quote="quoted words",
        original_text="【4:0†source】",
    )


def test_build_citation_leaves_source_info_absent():
    """Opaque file ids never yield a fabricated filename or page."""
    citation = build_citation(_numbered(file_id="file-report.pdf"))

    assert citation.filename is None
    assert citation.page_number is None


def test_build_citation_allows_empty_quote():
    assert build_citation(_numbered(quote="")).quote == ""


def test_build_citation_rejects_empty_file_id():
    with pytest.raises(CitationValidationError, match="empty file_id"):
        build_citation(_numbered(file_id=""))


def test_build_citations_preserves_order():
    citations = build_citations([_numbered(1, "file-a"), _numbered(2, "file-b")])

    assert [(c.id, c.file_id) for c in citations] == [(1, "file-a"), (2, "file-b")]


@pytest.mark.parametrize("citation_id", [0, -1])
def test_validate_rejects_non_positive_id(citation_id):
    citation = Citation(id=citation_id, file_id="file-1", original_text="【a】")

    with pytest.raises(CitationValidationError) as exc_info:
        validate_citation(citation)

    assert exc_info.value.citation_id == citation_id


@pytest.mark.parametrize("file_id", ["", "   "])
def test_validate_rejects_blank_file_id(file_id):
    citation = Citation(id=1, file_id=file_id, original_text="【a】")

    with pytest.raises(CitationValidationError):
        validate_citation(citation)


def test_validate_accepts_valid_citation():
    validate_citation(Citation(id=3, file_id="file-1", original_text="【a】"))


def test_validation_error_hierarchy():
    error = CitationValidationError("bad")

    assert isinstance(error, CitemarkError)
    assert isinstance(error, ValueError)
