"""Pure rendering helpers for citation records."""

from collections.abc import Iterable

from .models import Citation, FormattedCitation, SourceInfo


def extract_source_info(file_id: str) -> SourceInfo:
    """Decode filename and page number embedded in a file identifier.

    File ids issued by the generation service are opaque (e.g. 'file-abc123')
    and carry neither value, so both fields are always absent. This is the
    hook for a future structured identifier scheme; it must not guess.
    """
    return SourceInfo()


def format_citation(citation: Citation) -> FormattedCitation:
    """Render a citation for display.

    display is '[id] filename, page N', '[id] filename' or '[id] file_id'
    depending on which source fields are known.
    """
    if citation.filename and citation.page_number is not None:
        display = f"[{citation.id}] {citation.filename}, page {citation.page_number}"
    elif citation.filename:
        display = f"[{citation.id}] {citation.filename}"
    else:
        display = f"[{citation.id}] {citation.file_id}"

    return FormattedCitation(
        id=citation.id,
        display=display,
        quote=citation.quote,
        source=citation.filename or citation.file_id,
    )


def group_citations_by_source(citations: Iterable[Citation]) -> dict[str, list[Citation]]:
    """Group citations by display source, in order of first appearance."""
    groups: dict[str, list[Citation]] = {}
    for citation in citations:
        groups.setdefault(format_citation(citation).source, []).append(citation)
    return groups


def filter_citations(citations: Iterable[Citation], term: str) -> list[Citation]:
    """Case-insensitive search over quote, filename and file_id."""
    needle = term.strip().lower()
    if not needle:
        return list(citations)

    matches = []
    for citation in citations:
        haystacks = [citation.quote, citation.filename or "", citation.file_id]
        if any(needle in value.lower() for value in haystacks):
            matches.append(citation)
    return matches


def filter_citations_by_file(citations: Iterable[Citation], file_id: str) -> list[Citation]:
    """Citations whose file_id equals file_id exactly."""
    return [citation for citation in citations if citation.file_id == file_id]


def deduplicate_citations(citations: Iterable[Citation]) -> list[Citation]:
    """Drop repeats of the same (file_id, quote), keeping the first occurrence."""
    seen: set[tuple[str, str]] = set()
    unique = []
    for citation in citations:
        key = (citation.file_id, citation.quote)
        if key in seen:
            continue
        seen.add(key)
        unique.append(citation)
    return unique


def sort_citations(citations: Iterable[Citation]) -> list[Citation]:
    """Return a new list ordered by citation id."""
    return sorted(citations, key=lambda citation: citation.id)
