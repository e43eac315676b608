"""Citation parsing pipeline for completed generation responses.

The whole response must be buffered before parsing: offsets and marker
search need the complete text and the full annotation list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from .assign import assign_ids
from .errors import IncompleteResponseError, ResponseFormatError
from .models import ParsedResponse
from .normalize import normalize_annotations
from .records import build_citations
from .rewrite import rewrite_text

logger = logging.getLogger(__name__)

_UNFINISHED_STATUSES = {"in_progress", "queued"}


def parse_citations(
    text: str,
    annotations: Optional[Iterable[Any]],
    *,
    relocate: bool = True,
) -> ParsedResponse:
    """Replace citation markers with [n] references and build their records.

    Args:
        text: Complete response text
        annotations: Raw annotations (models, dicts or SDK objects)
        relocate: Search for markers whose claimed offsets do not match

    Returns:
        ParsedResponse with rewritten text and citations ordered by id

    Raises:
        CitationValidationError: If a built record is invalid
    """
    annotation_list = list(annotations or [])
    if not text or not annotation_list:
        return ParsedResponse(text=text, citations=[])

    spans = normalize_annotations(text, annotation_list, relocate=relocate)
    numbered = assign_ids(spans)
    citations = build_citations(numbered)
    display_text = rewrite_text(text, numbered)

    logger.debug(f"Resolved {len(citations)} of {len(annotation_list)} annotation(s)")
    return ParsedResponse(text=display_text, citations=citations)


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _text_parts(response: Any) -> list[tuple[str, list[Any]]]:
    """Collect (text, annotations) from every text part of a response."""
    # Responses API object: output[] -> message content[]
    output = _field(response, "output")
    if isinstance(output, (list, tuple)):
        parts = []
        for item in output:
            content = _field(item, "content")
            if isinstance(content, (list, tuple)):
                for part in content:
                    parts.extend(_text_parts(part))
        return parts

    # Message with a content list
    content = _field(response, "content")
    if isinstance(content, (list, tuple)):
        parts = []
        for part in content:
            parts.extend(_text_parts(part))
        return parts
    # Chat message with string content
    if isinstance(content, str):
        return [(content, list(_field(response, "annotations") or []))]

    text = _field(response, "text")
    # Assistants message content: {"type": "text", "text": {"value": ..., "annotations": [...]}}
    if text is not None and not isinstance(text, str):
        value = _field(text, "value")
        if isinstance(value, str):
            return [(value, list(_field(text, "annotations") or []))]
        return []

    if isinstance(text, str):
        return [(text, list(_field(response, "annotations") or []))]
    return []


def extract_text_and_annotations(response: Any) -> tuple[str, list[Any]]:
    """Pull output text and its annotations out of a generation response.

    Supports a plain {"text", "annotations"} mapping, Responses API objects
    and content parts, and Assistants message content, as dicts or SDK
    objects. Multiple text parts are concatenated with annotation offsets
    shifted to match.

    Only marker-bearing annotations (text, start_index, end_index and a
    nested file_citation) can be resolved. Responses API file citations of
    the index-only form {type, file_id, filename, index} have no marker, so
    the normalizer drops them as malformed and the text is left unchanged.

    Raises:
        IncompleteResponseError: If the response is still being generated
        ResponseFormatError: If no output text is present
    """
    status = _field(response, "status")
    if isinstance(status, str) and status in _UNFINISHED_STATUSES:
        raise IncompleteResponseError(
            f"Response status is '{status}'; buffer the response to completion before parsing"
        )

    parts = _text_parts(response)
    if not parts:
        raise ResponseFormatError("Response contains no output text")

    if len(parts) == 1:
        return parts[0]

    text_chunks: list[str] = []
    annotations: list[Any] = []
    offset = 0
    for part_text, part_annotations in parts:
        for annotation in part_annotations:
            annotations.append(_shift_annotation(annotation, offset))
        text_chunks.append(part_text)
        offset += len(part_text)
    return "".join(text_chunks), annotations


def _shift_annotation(annotation: Any, offset: int) -> Any:
    if offset == 0:
        return annotation
    if isinstance(annotation, Mapping):
        data = dict(annotation)
    elif hasattr(annotation, "model_dump"):
        data = annotation.model_dump()
    else:
        return annotation

    for key in ("start_index", "end_index"):
        if isinstance(data.get(key), int):
            data[key] = data[key] + offset
    return data


def parse_response(response: Any, *, relocate: bool = True) -> ParsedResponse:
    """Parse citations from a completed generation response.

    Raises:
        IncompleteResponseError: If the response is still being generated
        ResponseFormatError: If no output text is present
        CitationValidationError: If a built record is invalid
    """
    text, annotations = extract_text_and_annotations(response)
    return parse_citations(text, annotations, relocate=relocate)
