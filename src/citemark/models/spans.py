"""Internal records produced while resolving annotation offsets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .annotation import FileCitationAnnotation


@dataclass(frozen=True)
class ResolvedSpan:
    start: int
    end: int  # exclusive
    order: int  # position of the annotation in the caller's input
    annotation: FileCitationAnnotation


@dataclass(frozen=True)
class NumberedSpan:
    id: int
    span: ResolvedSpan

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    @property
    def annotation(self) -> FileCitationAnnotation:
        return self.span.annotation


class ResolutionStatus(str, Enum):
    """Outcome of resolving one input annotation."""

    EXACT = "exact"
    RELOCATED = "relocated"
    UNRESOLVED = "unresolved"
    MALFORMED = "malformed"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Resolution:
    order: int
    kind: str
    status: ResolutionStatus
    marker: Optional[str]
    claimed_start: Optional[int]
    claimed_end: Optional[int]
    span: Optional[ResolvedSpan]
    reason: str = ""
