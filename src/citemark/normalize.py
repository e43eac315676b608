"""Resolve untrusted annotation offsets against the actual response text.

Each file citation annotation claims a [start_index, end_index) range that
should bound its marker text. The generation service does not always count
offsets the way Python slices strings (multi-byte markers such as '【' shift
everything after them), so every claim is checked:

1. If text[start:end] equals the marker and the range does not overlap an
   already accepted span, the claim is accepted as-is.
2. Otherwise the marker is searched for forward from the end of the furthest
   accepted span, never before it, so identical markers are consumed left to
   right and no region of the text is matched twice.
3. If the marker cannot be found the annotation is dropped and logged.

Annotations are visited in ascending claimed start_index, ties broken by
input order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from pydantic import ValidationError

from .models import (
    FILE_CITATION,
    Annotation,
    FileCitationAnnotation,
    OtherAnnotation,
    Resolution,
    ResolutionStatus,
    ResolvedSpan,
)

logger = logging.getLogger(__name__)


def _annotation_kind(raw: Any) -> Optional[str]:
    if isinstance(raw, Mapping):
        kind = raw.get("type")
    else:
        kind = getattr(raw, "type", None)
    return str(kind) if kind is not None else None


def coerce_annotation(raw: Any) -> Optional[Annotation]:
    """Convert one raw annotation into the Annotation union.

    Accepts model instances, dicts, or attribute objects such as SDK
    response types.

    Returns:
        FileCitationAnnotation, OtherAnnotation for any other kind, or None
        if a file_citation is malformed.
    """
    if isinstance(raw, (FileCitationAnnotation, OtherAnnotation)):
        return raw

    kind = _annotation_kind(raw)
    if kind != FILE_CITATION:
        return OtherAnnotation(type=kind or "unknown")

    try:
        return FileCitationAnnotation.model_validate(raw, from_attributes=True)
    except ValidationError as e:
        logger.warning(f"Dropping malformed file_citation annotation: {e.error_count()} validation error(s)")
        logger.debug(f"Annotation validation detail: {e}")
        return None


def coerce_annotations(annotations: Iterable[Any]) -> list[Annotation]:
    """Coerce a list of raw annotations, dropping malformed ones."""
    coerced = []
    for raw in annotations:
        annotation = coerce_annotation(raw)
        if annotation is not None:
            coerced.append(annotation)
    return coerced


def _overlaps(start: int, end: int, accepted: list[ResolvedSpan]) -> bool:
    return any(start < span.end and span.start < end for span in accepted)


def _match_claimed(
    text: str,
    annotation: FileCitationAnnotation,
    order: int,
    accepted: list[ResolvedSpan],
) -> Optional[ResolvedSpan]:
    start, end = annotation.start_index, annotation.end_index
    if start < 0 or end > len(text) or start > end:
        return None
    if text[start:end] != annotation.text:
        return None
    if _overlaps(start, end, accepted):
        return None
    return ResolvedSpan(start=start, end=end, order=order, annotation=annotation)


def _search_forward(
    text: str,
    annotation: FileCitationAnnotation,
    order: int,
    cursor: int,
) -> Optional[ResolvedSpan]:
    idx = text.find(annotation.text, cursor)
    if idx == -1:
        return None
    return ResolvedSpan(start=idx, end=idx + len(annotation.text), order=order, annotation=annotation)


def resolve_annotations(
    text: str,
    annotations: Iterable[Any],
    *,
    relocate: bool = True,
) -> list[Resolution]:
    """Resolve every annotation and report what happened to each.

    Args:
        text: Complete response text
        annotations: Raw annotations in upstream order
        relocate: Search for the marker when the claimed offsets do not match

    Returns:
        One Resolution per input annotation, in input order
    """
    resolutions: dict[int, Resolution] = {}
    candidates: list[tuple[int, FileCitationAnnotation]] = []

    raw_annotations = list(annotations)
    for order, raw in enumerate(raw_annotations):
        annotation = coerce_annotation(raw)
        if annotation is None:
            resolutions[order] = Resolution(
                order=order,
                kind=FILE_CITATION,
                status=ResolutionStatus.MALFORMED,
                marker=None,
                claimed_start=None,
                claimed_end=None,
                span=None,
                reason="failed validation",
            )
        elif isinstance(annotation, OtherAnnotation):
            resolutions[order] = Resolution(
                order=order,
                kind=annotation.type,
                status=ResolutionStatus.IGNORED,
                marker=None,
                claimed_start=None,
                claimed_end=None,
                span=None,
                reason="not a file citation",
            )
        else:
            candidates.append((order, annotation))

    candidates.sort(key=lambda item: (item[1].start_index, item[0]))

    accepted: list[ResolvedSpan] = []
    cursor = 0
    for order, annotation in candidates:
        span = None
        status = ResolutionStatus.UNRESOLVED
        reason = ""

        if not annotation.text:
            reason = "empty marker text"
        else:
            span = _match_claimed(text, annotation, order, accepted)
            if span is not None:
                status = ResolutionStatus.EXACT
            elif relocate:
                span = _search_forward(text, annotation, order, cursor)
                if span is not None:
                    status = ResolutionStatus.RELOCATED
                    reason = f"claimed [{annotation.start_index}, {annotation.end_index}) did not match"
                else:
                    reason = f"marker not found after offset {cursor}"
            else:
                reason = "claimed offsets did not match"

        if span is None:
            logger.warning(
                f"Dropping citation annotation #{order} ({annotation.text!r}): {reason}"
            )
        else:
            accepted.append(span)
            cursor = max(cursor, span.end)
            if status is ResolutionStatus.RELOCATED:
                logger.debug(
                    f"Relocated annotation #{order} ({annotation.text!r}) "
                    f"from [{annotation.start_index}, {annotation.end_index}) to [{span.start}, {span.end})"
                )

        resolutions[order] = Resolution(
            order=order,
            kind=FILE_CITATION,
            status=status,
            marker=annotation.text,
            claimed_start=annotation.start_index,
            claimed_end=annotation.end_index,
            span=span,
            reason=reason,
        )

    return [resolutions[order] for order in range(len(raw_annotations))]


def normalize_annotations(
    text: str,
    annotations: Iterable[Any],
    *,
    relocate: bool = True,
) -> list[ResolvedSpan]:
    """Return the accepted spans for the file citations in annotations, sorted by start."""
    spans = [r.span for r in resolve_annotations(text, annotations, relocate=relocate) if r.span is not None]
    return sorted(spans, key=lambda span: (span.start, span.order))
