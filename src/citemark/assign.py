"""Sequential reference numbering for resolved spans."""

from collections.abc import Iterable

from .models import NumberedSpan, ResolvedSpan


def assign_ids(spans: Iterable[ResolvedSpan]) -> list[NumberedSpan]:
    """Number spans 1, 2, 3, ... in left-to-right text order.

    Spans sharing a start keep their input annotation order.
    """
    ordered = sorted(spans, key=lambda span: (span.start, span.order))
    return [NumberedSpan(id=index, span=span) for index, span in enumerate(ordered, start=1)]
