"""Substitute resolved markers with numeric reference tokens."""

from collections.abc import Sequence

from .models import NumberedSpan


def reference_token(citation_id: int) -> str:
    return f"[{citation_id}]"


def rewrite_text(text: str, numbered_spans: Sequence[NumberedSpan]) -> str:
    """Replace each span in text with its [id] token.

    Everything outside the spans is copied unchanged. Spans must lie within
    the text and must not overlap.

    Raises:
        ValueError: If a span is out of bounds or overlaps the previous one
    """
    parts: list[str] = []
    position = 0
    for numbered in sorted(numbered_spans, key=lambda s: (s.start, s.span.order)):
        if numbered.start < position or numbered.end > len(text) or numbered.start > numbered.end:
            raise ValueError(
                f"Span [{numbered.start}, {numbered.end}) for citation {numbered.id} "
                f"overlaps or exceeds text of length {len(text)}"
            )
        parts.append(text[position:numbered.start])
        parts.append(reference_token(numbered.id))
        position = numbered.end
    parts.append(text[position:])
    return "".join(parts)
