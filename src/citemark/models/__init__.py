"""Data models for the citation engine."""

from .annotation import (
    FILE_CITATION,
    Annotation,
    FileCitation,
    FileCitationAnnotation,
    OtherAnnotation,
)
from .citation import Citation, FormattedCitation, ParsedResponse, SourceInfo
from .spans import NumberedSpan, Resolution, ResolutionStatus, ResolvedSpan

__all__ = [
    # Input
    "FILE_CITATION",
    "Annotation",
    "FileCitation",
    "FileCitationAnnotation",
    "OtherAnnotation",
    # Resolution
    "ResolvedSpan",
    "NumberedSpan",
    "Resolution",
    "ResolutionStatus",
    # Output
    "Citation",
    "ParsedResponse",
    "SourceInfo",
    "FormattedCitation",
]
